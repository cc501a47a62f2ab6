"""Structured logging for FSM transitions, bet actions and round summaries."""

import logging
import uuid
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _ensure_trace_id(extra: dict) -> str:
    trace_id = extra.get("trace_id")
    if not trace_id:
        trace_id = str(uuid.uuid4())[:8]
        extra["trace_id"] = trace_id
    return trace_id


def _format(kind: str, extra: dict) -> str:
    return kind + " " + " ".join(f"{k}={v}" for k, v in sorted(extra.items()))


def _label(value: Any) -> Any:
    return getattr(value, "name", value)


def log_fsm_transition(
    fsm: str,
    from_state: Any,
    to_state: Any,
    event: Any,
    slot: Optional[int] = None,
    trace_id: Optional[str] = None,
    extra: Optional[dict] = None,
) -> None:
    """Log FSM state transition: fsm, from_state, to_state, event, optional slot."""
    extra = extra or {}
    if trace_id:
        extra["trace_id"] = trace_id
    _ensure_trace_id(extra)
    extra["fsm"] = fsm
    extra["from_state"] = _label(from_state)
    extra["to_state"] = _label(to_state)
    extra["event"] = _label(event)
    if slot is not None:
        extra["slot"] = slot
    logger.info(_format("fsm_transition", extra))


def log_bet_action(
    action: str,
    slot: int,
    ok: bool,
    bet_state: Any = None,
    amount: Optional[float] = None,
    extra: Optional[dict] = None,
) -> None:
    """Log a user bet action (place/cancel/cashout) and whether it was accepted."""
    extra = extra or {}
    _ensure_trace_id(extra)
    extra["action"] = action
    extra["slot"] = slot
    extra["ok"] = ok
    if bet_state is not None:
        extra["bet_state"] = _label(bet_state)
    if amount is not None:
        extra["amount"] = amount
    logger.info(_format("bet_action", extra))


def log_round_summary(
    round_id: Optional[int],
    crash: float,
    plays: int,
    history_len: int,
    extra: Optional[dict] = None,
) -> None:
    """Log a completed round."""
    extra = extra or {}
    _ensure_trace_id(extra)
    extra["round_id"] = round_id
    extra["crash"] = crash
    extra["plays"] = plays
    extra["history_len"] = history_len
    logger.info(_format("round_ended", extra))
