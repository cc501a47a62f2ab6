"""Round/bet enums, dual-slot helpers and immutable payloads."""

from .enums import BetState, GameState
from .dual import SLOTS, Dual, Slot, check_slot, create_dual, merge_dual
from .models import BetPayload, GameHistoryItem, Play, SettledPlay

__all__ = [
    "BetState",
    "GameState",
    "SLOTS",
    "Dual",
    "Slot",
    "check_slot",
    "create_dual",
    "merge_dual",
    "BetPayload",
    "GameHistoryItem",
    "Play",
    "SettledPlay",
]
