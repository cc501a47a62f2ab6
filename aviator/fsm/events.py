"""Event enums for the round FSM, the per-slot bet FSM and decoded server messages."""

from enum import Enum


class RoundEvent(str, Enum):
    """Round lifecycle events (from server notifications)."""

    STARTING = "starting"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


class BetEvent(str, Enum):
    """Per-slot bet events: user actions, round promotion, server confirmations."""

    PLACE = "place"
    QUEUE = "queue"
    CANCEL = "cancel"
    ROUND_STARTED = "round_started"
    PLACEMENT_CONFIRMED = "placement_confirmed"
    PLACEMENT_FAILED = "placement_failed"
    CASHOUT = "cashout"
    CASHOUT_CONFIRMED = "cashout_confirmed"
    CASHOUT_FAILED = "cashout_failed"
    BUST = "bust"


class ServerEvent(str, Enum):
    """Names of decoded game-server messages handled by EventDispatcher."""

    INIT = "init"
    GAME_STARTING = "game_starting"
    GAME_STARTED = "game_started"
    GAME_CRASH = "game_crash"
    PLAYER_BET = "player_bet"
    PLAYER_CASHED_OUT = "cashed_out"
    PLACE_BET_SUCCESS = "place_bet_success"
    PLACE_BET_ERROR = "place_bet_error"
    CASHOUT_SUCCESS = "cashout_success"
    CASHOUT_ERROR = "cashout_error"
