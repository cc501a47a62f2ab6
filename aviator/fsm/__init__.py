"""FSM package: round lifecycle FSM and per-slot bet FSM. Guards live in aviator.guards."""

from aviator.core.state.enums import BetState, GameState
from aviator.fsm.bet_fsm import BetFSM, next_bet_state
from aviator.fsm.events import BetEvent, RoundEvent, ServerEvent
from aviator.fsm.round_fsm import RoundFSM, next_round_state

__all__ = [
    "BetState",
    "GameState",
    "BetFSM",
    "next_bet_state",
    "BetEvent",
    "RoundEvent",
    "ServerEvent",
    "RoundFSM",
    "next_round_state",
]
