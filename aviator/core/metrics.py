"""Simple in-memory counters for store notifications and bet lifecycle outcomes."""

import logging
import threading
from typing import Dict

logger = logging.getLogger(__name__)


class Metrics:
    """In-memory counters; log on demand with log_snapshot()."""

    def __init__(self):
        self._lock = threading.Lock()
        self._notifications = 0
        self._listener_errors = 0
        self._bets_queued = 0
        self._bets_placed = 0
        self._bets_cancelled = 0
        self._cashouts = 0
        self._busts = 0
        self._rejected = 0
        self._rounds = 0

    def inc_notifications(self) -> None:
        with self._lock:
            self._notifications += 1

    def inc_listener_errors(self) -> None:
        with self._lock:
            self._listener_errors += 1

    def inc_bets_queued(self) -> None:
        with self._lock:
            self._bets_queued += 1

    def inc_bets_placed(self) -> None:
        with self._lock:
            self._bets_placed += 1

    def inc_bets_cancelled(self) -> None:
        with self._lock:
            self._bets_cancelled += 1

    def inc_cashouts(self) -> None:
        with self._lock:
            self._cashouts += 1

    def inc_busts(self) -> None:
        with self._lock:
            self._busts += 1

    def inc_rejected(self) -> None:
        with self._lock:
            self._rejected += 1

    def inc_rounds(self) -> None:
        with self._lock:
            self._rounds += 1

    @property
    def notifications(self) -> int:
        with self._lock:
            return self._notifications

    @property
    def listener_errors(self) -> int:
        with self._lock:
            return self._listener_errors

    @property
    def rejected(self) -> int:
        with self._lock:
            return self._rejected

    def as_dict(self) -> Dict[str, int]:
        with self._lock:
            return {
                "notifications": self._notifications,
                "listener_errors": self._listener_errors,
                "bets_queued": self._bets_queued,
                "bets_placed": self._bets_placed,
                "bets_cancelled": self._bets_cancelled,
                "cashouts": self._cashouts,
                "busts": self._busts,
                "rejected": self._rejected,
                "rounds": self._rounds,
            }

    def log_snapshot(self) -> None:
        """Log current metrics snapshot."""
        parts = [f"{k}={v}" for k, v in self.as_dict().items()]
        logger.info("metrics " + " ".join(parts))
