"""Round FSM: ENDED -> STARTING -> IN_PROGRESS -> ENDED -> ... (cyclic, no terminal state).

The current state is read from and written to an atom, so the FSM holds no
state of its own and UI listeners see every transition.

Entry actions are owned by CrashSession (on_round_starting / on_round_in_progress /
on_round_ended):
- STARTING: clear play map, bump round id
- IN_PROGRESS: promote QUEUED slots to PLACING
- ENDED: append summary to round history, bust PLAYING slots
"""

import logging
from typing import Callable, Dict, Optional

from aviator.core.atoms import Atom
from aviator.core.errors import InvalidTransition
from aviator.core.state.enums import GameState
from aviator.core.store import Store
from aviator.fsm.events import RoundEvent

logger = logging.getLogger(__name__)

# (from_state, event) -> to_state
_TRANSITIONS: Dict[tuple, GameState] = {
    (GameState.ENDED, RoundEvent.STARTING): GameState.STARTING,
    (GameState.STARTING, RoundEvent.IN_PROGRESS): GameState.IN_PROGRESS,
    (GameState.IN_PROGRESS, RoundEvent.ENDED): GameState.ENDED,
}


def next_round_state(state: GameState, event: RoundEvent) -> Optional[GameState]:
    """Target state for (state, event), or None when the event is not valid in state."""
    return _TRANSITIONS.get((state, event))


class RoundFSM:
    """Guards and applies round transitions on the game-state atom."""

    def __init__(
        self,
        store: Store,
        game_state: Atom[GameState],
        on_transition: Optional[Callable[[GameState, GameState, RoundEvent], None]] = None,
    ):
        self._store = store
        self._atom = game_state
        self._on_transition = on_transition

    @property
    def state(self) -> GameState:
        return self._store.get(self._atom)

    def can_apply(self, event: RoundEvent) -> bool:
        return next_round_state(self.state, event) is not None

    def apply(self, event: RoundEvent) -> bool:
        """Apply event if valid. Returns False (no mutation) on duplicate or out-of-order events."""
        from_state = self.state
        to_state = next_round_state(from_state, event)
        if to_state is None:
            logger.warning(
                "Invalid round transition: %s on %s",
                from_state.name,
                event.value,
            )
            return False
        self._store.set(self._atom, to_state)
        logger.debug("RoundFSM %s -> %s on %s", from_state.name, to_state.name, event.value)
        if self._on_transition:
            try:
                self._on_transition(from_state, to_state, event)
            except Exception as e:
                logger.debug("on_transition callback error: %s", e)
        return True

    def require(self, event: RoundEvent) -> GameState:
        """Strict variant of apply(): raises InvalidTransition instead of returning False."""
        if not self.apply(event):
            raise InvalidTransition(self.state, event)
        return self.state

    def sync(self, state: GameState) -> None:
        """Adopt the server's state without guard checks (initial snapshot only)."""
        self._store.set(self._atom, GameState(state))
