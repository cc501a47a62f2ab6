"""Read-only status server (GET /status, GET /rounds)."""

from aviator.status_server.app import create_app, run_server

__all__ = ["create_app", "run_server"]
