"""Bet guards: pure predicates over slot/round state plus bet limits from config.

Used by CrashSession before driving BetFSM. Limits come from
config.settings.get_bet_limits(); a None limit disables that check.
"""

from typing import Any, Dict, Optional

from aviator.core.state.dual import SLOTS
from aviator.core.state.enums import BetState, GameState
from aviator.core.state.models import BetPayload


def slot_ok(slot: Any) -> bool:
    return not isinstance(slot, bool) and slot in SLOTS


def can_place(bet_state: BetState) -> bool:
    return bet_state == BetState.IDLE


def can_cancel(bet_state: BetState) -> bool:
    """Only a queued bet can be cancelled; once sent it belongs to the server."""
    return bet_state == BetState.QUEUED


def can_cashout(bet_state: BetState) -> bool:
    return bet_state == BetState.PLAYING


def should_queue(game_state: GameState) -> bool:
    """Bets placed while the round is STARTING wait for IN_PROGRESS before being sent."""
    return game_state == GameState.STARTING


def amount_ok(payload: BetPayload, limits: Optional[Dict[str, Any]] = None) -> bool:
    """True when amount is positive and within [min_amount, max_amount]."""
    limits = limits or {}
    if payload.amount is None or payload.amount <= 0:
        return False
    lo = limits.get("min_amount")
    hi = limits.get("max_amount")
    if lo is not None and payload.amount < lo:
        return False
    if hi is not None and payload.amount > hi:
        return False
    return True


def auto_cashout_ok(payload: BetPayload, limits: Optional[Dict[str, Any]] = None) -> bool:
    """auto_cashout of 0 means manual cashout; otherwise it must reach min_auto_cashout."""
    limits = limits or {}
    if not payload.auto_cashout:
        return True
    floor = limits.get("min_auto_cashout")
    if floor is not None and payload.auto_cashout < floor:
        return False
    return payload.auto_cashout > 0


def payload_ok(payload: BetPayload, limits: Optional[Dict[str, Any]] = None) -> bool:
    return amount_ok(payload, limits) and auto_cashout_ok(payload, limits)
