#!/usr/bin/env python3
"""Replay a JSONL file of decoded server messages through a fresh CrashSession.

Usage: python scripts/run_replay.py events.jsonl [config.yaml] [--debug]

Each line is one message ({"event": "game_starting", ...}). Lines with
"event": "user_action" drive the user side instead: {"action": "place",
"idx": 0, "amount": 100, "auto_cashout": 2.0}, {"action": "cancel", "idx": 0}
or {"action": "cashout", "idx": 0}.
"""

import json
import logging
import os
import sys

# Project root: always resolve relative to script location, not cwd
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)

# ANSI color codes
_RESET = "\033[0m"
_BOLD = "\033[1m"
_GRAY = "\033[90m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_CYAN = "\033[36m"

_LEVEL_COLORS = {
    logging.DEBUG: _GRAY,
    logging.INFO: _CYAN,
    logging.WARNING: _YELLOW,
    logging.ERROR: _RED + _BOLD,
    logging.CRITICAL: _RED + _BOLD,
}


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors per log level."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno, _RESET)
        record.levelname = f"{color}[{record.levelname}]{_RESET}"
        return super().format(record)


def setup_logging(debug: bool = False) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ColoredFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logging.root.handlers.clear()
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG if debug else logging.INFO)


def load_events(path: str) -> list:
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


def replay(events: list, config: dict):
    """Run events through a session; returns the session."""
    from aviator.app.crash_session import CrashSession
    from aviator.app.dispatcher import EventDispatcher
    from aviator.core.errors import UnknownEvent
    from aviator.core.state.models import BetPayload

    log = logging.getLogger("replay")
    session = CrashSession(config=config)
    dispatcher = EventDispatcher(session)
    for ev in events:
        if ev.get("event") == "user_action":
            action = ev.get("action")
            idx = ev.get("idx", 0)
            if action == "place":
                payload = BetPayload(amount=ev["amount"], idx=idx, auto_cashout=ev.get("auto_cashout", 0.0))
                session.place_bet(idx, payload)
            elif action == "cancel":
                session.cancel_bet(idx)
            elif action == "cashout":
                session.cashout(idx)
            else:
                log.warning("Unknown user action %r", action)
            continue
        try:
            dispatcher.dispatch(ev)
        except UnknownEvent as e:
            log.warning("Skipping: %s", e)
    return session


def main() -> None:
    from aviator.config.settings import read_config

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    setup_logging(debug="--debug" in sys.argv)
    if not args:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    config, config_path = read_config(args[1] if len(args) > 1 else None)
    logging.getLogger("replay").info("Config: %s", config_path)
    session = replay(load_events(args[0]), config)
    session.metrics.log_snapshot()
    print(json.dumps(session.snapshot(), indent=2))


if __name__ == "__main__":
    main()
