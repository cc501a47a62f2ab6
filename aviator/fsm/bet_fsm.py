"""Per-slot bet FSM: IDLE -> QUEUED/PLACING -> PLAYING -> CASHING_OUT -> IDLE.

One table drives both slots. State lives in two dual atoms (bet state and
queued bet); every write is a slot-scoped merge, so slot i never perturbs
slot 1-i and listeners on the whole dual fire once per affected slot.

Transitions:
- IDLE -> QUEUED: QUEUE (place while round is STARTING)
- IDLE -> PLACING: PLACE (place while round is IN_PROGRESS or ENDED)
- QUEUED -> IDLE: CANCEL
- QUEUED -> PLACING: ROUND_STARTED (automatic)
- PLACING -> PLAYING: PLACEMENT_CONFIRMED
- PLACING -> IDLE: PLACEMENT_FAILED
- PLAYING -> CASHING_OUT: CASHOUT
- CASHING_OUT -> IDLE: CASHOUT_CONFIRMED
- CASHING_OUT -> PLAYING: CASHOUT_FAILED
- PLAYING/CASHING_OUT -> IDLE: BUST (no payout)
"""

import logging
from typing import Callable, Dict, Optional

from aviator.core.atoms import Atom
from aviator.core.errors import InvalidTransition
from aviator.core.state.dual import Dual, check_slot, merge_dual
from aviator.core.state.enums import BetState
from aviator.core.state.models import BetPayload
from aviator.core.store import Store
from aviator.fsm.events import BetEvent

logger = logging.getLogger(__name__)

_TRANSITIONS: Dict[tuple, BetState] = {
    (BetState.IDLE, BetEvent.QUEUE): BetState.QUEUED,
    (BetState.IDLE, BetEvent.PLACE): BetState.PLACING,
    (BetState.QUEUED, BetEvent.CANCEL): BetState.IDLE,
    (BetState.QUEUED, BetEvent.ROUND_STARTED): BetState.PLACING,
    (BetState.PLACING, BetEvent.PLACEMENT_CONFIRMED): BetState.PLAYING,
    (BetState.PLACING, BetEvent.PLACEMENT_FAILED): BetState.IDLE,
    (BetState.PLAYING, BetEvent.CASHOUT): BetState.CASHING_OUT,
    (BetState.CASHING_OUT, BetEvent.CASHOUT_CONFIRMED): BetState.IDLE,
    (BetState.CASHING_OUT, BetEvent.CASHOUT_FAILED): BetState.PLAYING,
    (BetState.PLAYING, BetEvent.BUST): BetState.IDLE,
    (BetState.CASHING_OUT, BetEvent.BUST): BetState.IDLE,
}


def next_bet_state(state: BetState, event: BetEvent) -> Optional[BetState]:
    """Target state for (state, event), or None when the event is not valid in state."""
    return _TRANSITIONS.get((state, event))


class BetFSM:
    """Guards and applies per-slot transitions on the bet-state and queued-bet duals."""

    def __init__(
        self,
        store: Store,
        bet_state: Atom[Dual[BetState]],
        next_bet: Atom[Dual[Optional[BetPayload]]],
        on_transition: Optional[Callable[[int, BetState, BetState, BetEvent], None]] = None,
    ):
        self._store = store
        self._bet_state = bet_state
        self._next_bet = next_bet
        self._on_transition = on_transition

    def state(self, slot: int) -> BetState:
        return self._store.get(self._bet_state)[check_slot(slot)]

    def queued(self, slot: int) -> Optional[BetPayload]:
        return self._store.get(self._next_bet)[check_slot(slot)]

    def can_apply(self, slot: int, event: BetEvent) -> bool:
        return next_bet_state(self.state(slot), event) is not None

    def apply(self, slot: int, event: BetEvent, queued: Optional[BetPayload] = None) -> bool:
        """
        Apply event to slot if valid; returns False with no mutation otherwise.
        The queued bet is set to `queued` on entry to QUEUED and cleared on every
        other transition.
        """
        from_state = self.state(slot)
        to_state = next_bet_state(from_state, event)
        if to_state is None:
            logger.debug(
                "BetFSM slot=%s rejected %s in %s",
                slot,
                event.value,
                from_state.name,
            )
            return False
        self._write(self._next_bet, slot, queued if to_state == BetState.QUEUED else None)
        self._write(self._bet_state, slot, to_state)
        logger.debug("BetFSM slot=%s %s -> %s on %s", slot, from_state.name, to_state.name, event.value)
        if self._on_transition:
            try:
                self._on_transition(slot, from_state, to_state, event)
            except Exception as e:
                logger.debug("on_transition callback error: %s", e)
        return True

    def require(self, slot: int, event: BetEvent, queued: Optional[BetPayload] = None) -> BetState:
        """Strict variant of apply(): raises InvalidTransition instead of returning False."""
        if not self.apply(slot, event, queued):
            raise InvalidTransition(self.state(slot), event, slot)
        return self.state(slot)

    def _write(self, atom: Atom, slot: int, value) -> None:
        self._store.set(atom, merge_dual(slot, value)(self._store.get(atom)))
