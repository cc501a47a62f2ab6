"""Guards for the bet FSM (pure predicates)."""

from aviator.guards.bet_guard import (
    amount_ok,
    auto_cashout_ok,
    can_cancel,
    can_cashout,
    can_place,
    payload_ok,
    should_queue,
    slot_ok,
)

__all__ = [
    "amount_ok",
    "auto_cashout_ok",
    "can_cancel",
    "can_cashout",
    "can_place",
    "payload_ok",
    "should_queue",
    "slot_ok",
]
