"""FastAPI app for GET /status and GET /rounds over one live CrashSession.

Read-only: the server never writes to the session's atoms. Bets and round
events reach the session through EventDispatcher / user-action handlers only.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Query

from aviator.app.crash_session import CrashSession
from aviator.config.settings import get_status_server_config

logger = logging.getLogger(__name__)


def create_app(session: CrashSession, history_limit: Optional[int] = None) -> FastAPI:
    """Build FastAPI app over session. history_limit caps GET /rounds (default from config)."""
    cfg = get_status_server_config(session.config)
    max_rounds = history_limit or cfg["history_limit"] or 50
    app = FastAPI(title="Aviator Status Server", description="Read-only view of a crash game session")

    @app.get("/status")
    def get_status() -> Dict[str, Any]:
        """Session snapshot plus metrics counters."""
        payload = session.snapshot()
        payload["metrics"] = session.metrics.as_dict()
        return payload

    @app.get("/rounds")
    def get_rounds(limit: int = Query(10, ge=1, description="Newest rounds to return")) -> Dict[str, Any]:
        """Round history tail, newest last."""
        rounds = session.get(session.rounds)
        n = min(limit, max_rounds)
        return {"rounds": [r.to_dict() for r in rounds[-n:]]}

    return app


def run_server(config: dict, session: Optional[CrashSession] = None) -> None:
    """Start the status server (host/port from status_server config) with uvicorn."""
    import uvicorn

    session = session or CrashSession(config=config)
    cfg = get_status_server_config(config)
    app = create_app(session)
    host = cfg["host"] or "127.0.0.1"
    port = cfg["port"] or 8765
    logger.info("Status server on %s:%s", host, port)
    uvicorn.run(app, host=host, port=int(port), log_level="info")
