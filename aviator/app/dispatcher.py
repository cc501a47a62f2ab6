"""Routes decoded game-server messages to CrashSession intakes.

Messages are plain dicts with an "event" key naming a ServerEvent plus the
event's fields, already decoded by the network layer:

- init: game_state, round_id, plays, history, start_time
- game_starting: id, start_time
- game_started: start_time
- game_crash: id, crash, hash, start_time
- player_bet: fields of Play (user_id, game_id, idx, bet, ...)
- cashed_out: user_id, idx, stopped_at, game_id
- place_bet_success: idx, play (optional)
- place_bet_error: idx, reason
- cashout_success: idx, stopped_at
- cashout_error: idx
"""

import logging
from typing import Any, Callable, Dict, Iterable, Mapping

from aviator.app.crash_session import CrashSession
from aviator.core.errors import UnknownEvent
from aviator.fsm.events import ServerEvent

logger = logging.getLogger(__name__)

Handler = Callable[[Mapping[str, Any]], Any]


class EventDispatcher:
    """Handler table: ServerEvent -> session intake."""

    def __init__(self, session: CrashSession):
        self.session = session
        self._handlers: Dict[ServerEvent, Handler] = self._get_event_handlers()

    def _get_event_handlers(self) -> Dict[ServerEvent, Handler]:
        s = self.session
        return {
            ServerEvent.INIT: lambda m: s.on_init(
                m["game_state"],
                round_id=m.get("round_id"),
                plays=m.get("plays") or (),
                history=m.get("history") or (),
                start_time=m.get("start_time"),
            ),
            ServerEvent.GAME_STARTING: lambda m: s.on_round_starting(
                round_id=m.get("id"), start_time=m.get("start_time")
            ),
            ServerEvent.GAME_STARTED: lambda m: s.on_round_in_progress(start_time=m.get("start_time")),
            ServerEvent.GAME_CRASH: lambda m: s.on_round_ended(
                {"id": m["id"], "crash": m["crash"], "hash": m.get("hash", "")},
                start_time=m.get("start_time"),
            ),
            ServerEvent.PLAYER_BET: lambda m: s.on_play(m),
            ServerEvent.PLAYER_CASHED_OUT: lambda m: s.on_play_cashout(
                m["user_id"], m["idx"], m["stopped_at"], round_id=m.get("game_id")
            ),
            ServerEvent.PLACE_BET_SUCCESS: lambda m: s.on_placement_confirmed(m["idx"], m.get("play")),
            ServerEvent.PLACE_BET_ERROR: lambda m: s.on_placement_failed(m["idx"], m.get("reason", "")),
            ServerEvent.CASHOUT_SUCCESS: lambda m: s.on_cashout_confirmed(m["idx"], m["stopped_at"]),
            ServerEvent.CASHOUT_ERROR: lambda m: s.on_cashout_failed(m["idx"]),
        }

    def handles(self, event: Any) -> bool:
        try:
            return ServerEvent(event) in self._handlers
        except ValueError:
            return False

    def dispatch(self, message: Mapping[str, Any]) -> Any:
        """Route one message; returns the intake's result. Raises UnknownEvent for unhandled names."""
        name = message.get("event")
        try:
            event = ServerEvent(name)
        except ValueError:
            raise UnknownEvent(name) from None
        handler = self._handlers.get(event)
        if handler is None:
            raise UnknownEvent(name)
        result = handler(message)
        logger.debug("Dispatched %s -> %s", event.value, result)
        return result

    def dispatch_all(self, messages: Iterable[Mapping[str, Any]]) -> int:
        """Route messages in order, skipping unknown events. Returns the number handled."""
        handled = 0
        for message in messages:
            try:
                self.dispatch(message)
            except UnknownEvent as e:
                logger.warning("Skipping message: %s", e)
                continue
            handled += 1
        return handled
