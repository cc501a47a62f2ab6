#!/usr/bin/env python3
"""Start the read-only status server over a fresh CrashSession.

Usage: python scripts/run_server.py [config.yaml]

Optionally replays a JSONL file first (--replay=path) so the endpoints have data.
"""

import logging
import os
import sys

# Project root: same as run_replay.py
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)

logging.basicConfig(
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    level=logging.INFO,
)


def main() -> None:
    from aviator.app.crash_session import CrashSession
    from aviator.config.settings import read_config
    from aviator.status_server.app import run_server

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    replay_path = next((a.split("=", 1)[1] for a in sys.argv[1:] if a.startswith("--replay=")), None)
    config, _ = read_config(args[0] if args else None)

    if replay_path:
        from run_replay import load_events, replay

        session = replay(load_events(replay_path), config)
    else:
        session = CrashSession(config=config)
    run_server(config, session)


if __name__ == "__main__":
    main()
