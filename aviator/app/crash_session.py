"""Crash game session: round FSM + dual-slot bet FSM over one injected store.

The session is the only writer of its atoms. Network handlers call the round
and confirmation intakes; user-action handlers call place_bet / cancel_bet /
cashout. Guard violations are absorbed here: the call returns False, nothing is
written, and the rejection is logged and counted.
"""

import logging
import time
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from aviator.app.gateway import BetGateway, NullGateway
from aviator.config.settings import get_bet_limits, get_session_config, get_store_config
from aviator.core.atoms import Atom, AtomFactory
from aviator.core.logging_utils import log_bet_action, log_fsm_transition, log_round_summary
from aviator.core.metrics import Metrics
from aviator.core.state.dual import SLOTS, Dual, create_dual, merge_dual
from aviator.core.state.enums import BetState, GameState
from aviator.core.state.models import BetPayload, GameHistoryItem, Play, SettledPlay
from aviator.core.store import Store
from aviator.fsm.bet_fsm import BetFSM
from aviator.fsm.events import BetEvent, RoundEvent
from aviator.fsm.round_fsm import RoundFSM
from aviator.guards.bet_guard import (
    can_cancel,
    can_cashout,
    can_place,
    payload_ok,
    should_queue,
    slot_ok,
)

logger = logging.getLogger(__name__)

# round id -> user id -> (slot 0 play, slot 1 play)
PlayMap = Mapping[int, Mapping[int, Dual[Optional[Play]]]]


def _count_plays(round_plays: Mapping[int, Dual[Optional[Play]]]) -> int:
    return sum(1 for dual in round_plays.values() for p in dual if p is not None)


class CrashSession:
    """One game session: global round lifecycle plus two independent betting slots."""

    def __init__(
        self,
        store: Optional[Store] = None,
        config: Optional[Dict[str, Any]] = None,
        gateway: Optional[BetGateway] = None,
        metrics: Optional[Metrics] = None,
        clock: Callable[[], float] = time.time,
    ):
        # 1. Config
        self.config = config or {}
        session_cfg = get_session_config(self.config)
        self._currency = session_cfg["currency"]
        self._user_id = session_cfg["user_id"]
        self._limits = get_bet_limits(self.config)
        self._clock = clock

        # 2. Store, metrics, gateway
        self.metrics = metrics or Metrics()
        if store is None:
            store = Store(
                isolate_listener_errors=get_store_config(self.config)["isolate_listener_errors"],
                metrics=self.metrics,
            )
        self._store = store
        self._atoms = AtomFactory(store)
        self.gateway: BetGateway = gateway or NullGateway()

        # 3. Atoms
        atoms = self._atoms
        self.rounds: Atom[Tuple[GameHistoryItem, ...]] = atoms.create_atom((), name="rounds")
        self.user_bets: Atom[Tuple[SettledPlay, ...]] = atoms.create_atom((), name="user_bets")
        self.initialized: Atom[bool] = atoms.create_atom(False, name="initialized")
        # Client-side time of the last round transition
        self.start_time: Atom[float] = atoms.create_atom(0.0, name="start_time")
        self.game_state: Atom[GameState] = atoms.create_atom(GameState.ENDED, name="game_state")
        self.round_id: Atom[Optional[int]] = atoms.create_atom(None, name="round_id")
        self.bet_state: Atom[Dual[BetState]] = atoms.create_atom(
            create_dual(BetState.IDLE), shallow=True, name="bet_state"
        )
        # Queued bet: saved while the round is STARTING, cleared on send or cancel
        self.next_bet: Atom[Dual[Optional[BetPayload]]] = atoms.create_atom(
            create_dual(None), shallow=True, name="next_bet"
        )
        # Bet sent to the server; kept from PLACING until the slot returns to IDLE
        self.active_bet: Atom[Dual[Optional[BetPayload]]] = atoms.create_atom(
            create_dual(None), shallow=True, name="active_bet"
        )
        # Cleared on game_starting, settled into user_bets on game_crash
        self.play_map: Atom[PlayMap] = atoms.create_atom({}, shallow=True, name="play_map")
        self.play_count: Atom[int] = atoms.create_atom(0, name="play_count")

        # 4. FSMs
        self._round_fsm = RoundFSM(store, self.game_state, on_transition=self._on_round_transition)
        self._bet_fsm = BetFSM(store, self.bet_state, self.next_bet, on_transition=self._on_bet_transition)

    # ------------------------------------------------------------------ reads

    @property
    def store(self) -> Store:
        return self._store

    @property
    def atoms(self) -> AtomFactory:
        return self._atoms

    @property
    def user_id(self) -> Optional[int]:
        return self._user_id

    def get(self, atom: Atom) -> Any:
        return self._store.get(atom)

    def bet_states(self) -> Dual[BetState]:
        return self._store.get(self.bet_state)

    def round_plays(self, round_id: Optional[int] = None) -> Mapping[int, Dual[Optional[Play]]]:
        key = self._round_key(round_id)
        return self._store.get(self.play_map).get(key, {})

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data view of the session for status endpoints and logs."""
        get = self._store.get
        return {
            "initialized": get(self.initialized),
            "game_state": get(self.game_state).name,
            "round_id": get(self.round_id),
            "start_time": get(self.start_time),
            "bet_state": [s.name for s in get(self.bet_state)],
            "next_bet": [p.to_dict() if p else None for p in get(self.next_bet)],
            "active_bet": [p.to_dict() if p else None for p in get(self.active_bet)],
            "play_count": get(self.play_count),
            "history_len": len(get(self.rounds)),
            "user_bets": len(get(self.user_bets)),
        }

    # ------------------------------------------------------------ user actions

    def place_bet(self, slot: int, payload: BetPayload) -> bool:
        """
        IDLE -> QUEUED while the round is STARTING, else IDLE -> PLACING (request
        sent at once). Rejected when the slot is busy or the payload is out of limits.
        """
        if not slot_ok(slot):
            return self._reject("place", slot, None)
        state = self._bet_fsm.state(slot)
        if not can_place(state):
            return self._reject("place", slot, state)
        payload = payload.for_slot(slot, payload.currency or self._currency)
        if not payload_ok(payload, self._limits):
            return self._reject("place", slot, state, amount=payload.amount)

        if should_queue(self._store.get(self.game_state)):
            self._bet_fsm.apply(slot, BetEvent.QUEUE, queued=payload)
            self.metrics.inc_bets_queued()
        else:
            self._bet_fsm.apply(slot, BetEvent.PLACE)
            if not self._send_bet(slot, payload):
                return False
        log_bet_action("place", slot, True, self._bet_fsm.state(slot), payload.amount)
        return True

    def cancel_bet(self, slot: int) -> bool:
        """QUEUED -> IDLE, clearing the queued bet. False (no mutation) in any other state."""
        if not slot_ok(slot):
            return self._reject("cancel", slot, None)
        state = self._bet_fsm.state(slot)
        if not can_cancel(state):
            return self._reject("cancel", slot, state)
        self._bet_fsm.apply(slot, BetEvent.CANCEL)
        self.metrics.inc_bets_cancelled()
        log_bet_action("cancel", slot, True, BetState.IDLE)
        return True

    def cashout(self, slot: int) -> bool:
        """PLAYING -> CASHING_OUT and send the cashout request."""
        if not slot_ok(slot):
            return self._reject("cashout", slot, None)
        state = self._bet_fsm.state(slot)
        if not can_cashout(state):
            return self._reject("cashout", slot, state)
        self._bet_fsm.apply(slot, BetEvent.CASHOUT)
        try:
            self.gateway.send_cashout(slot)
        except Exception as e:
            logger.warning("Cashout request for slot %s not sent: %s", slot, e)
            self._bet_fsm.apply(slot, BetEvent.CASHOUT_FAILED)
            log_bet_action("cashout", slot, False, self._bet_fsm.state(slot))
            return False
        log_bet_action("cashout", slot, True, BetState.CASHING_OUT)
        return True

    # ------------------------------------------------------------ round intake

    def on_round_starting(self, round_id: Optional[int] = None, start_time: Optional[float] = None) -> bool:
        """ENDED -> STARTING: new round id, empty play map."""
        previous_id = self._store.get(self.round_id)
        if not self._round_fsm.apply(RoundEvent.STARTING):
            return False
        if round_id is None and previous_id is not None:
            round_id = previous_id + 1
        self._store.set(self.round_id, round_id)
        self._atoms.reset_value(self.play_map)
        self._atoms.reset_value(self.play_count)
        self._store.set(self.start_time, self._now(start_time))
        return True

    def on_round_in_progress(self, start_time: Optional[float] = None) -> bool:
        """STARTING -> IN_PROGRESS: every QUEUED slot moves to PLACING and its bet is sent."""
        if not self._round_fsm.apply(RoundEvent.IN_PROGRESS):
            return False
        self._store.set(self.start_time, self._now(start_time))
        for slot in SLOTS:
            payload = self._bet_fsm.queued(slot)
            if self._bet_fsm.apply(slot, BetEvent.ROUND_STARTED):
                self._send_bet(slot, payload)
        return True

    def on_round_ended(
        self,
        summary: Union[GameHistoryItem, Mapping[str, Any]],
        start_time: Optional[float] = None,
    ) -> bool:
        """IN_PROGRESS -> ENDED: bust PLAYING slots, append summary to history, settle own plays."""
        if isinstance(summary, Mapping):
            summary = GameHistoryItem.from_dict(summary)
        if not self._round_fsm.apply(RoundEvent.ENDED):
            return False
        self._store.set(self.start_time, self._now(start_time))
        for slot in SLOTS:
            if self._bet_fsm.state(slot) == BetState.PLAYING:
                self.on_bust(slot)
        self._atoms.set_value(self.rounds, lambda rounds: rounds + (summary,))
        self._settle_own_plays(summary)
        self.metrics.inc_rounds()
        log_round_summary(
            self._store.get(self.round_id),
            summary.crash,
            self._store.get(self.play_count),
            len(self._store.get(self.rounds)),
        )
        return True

    def on_init(
        self,
        game_state: Union[GameState, int],
        round_id: Optional[int] = None,
        plays: Iterable[Union[Play, Mapping[str, Any]]] = (),
        history: Iterable[Union[GameHistoryItem, Mapping[str, Any]]] = (),
        start_time: Optional[float] = None,
    ) -> None:
        """Adopt the server's snapshot on (re)connect. Bet slots are left untouched."""
        self._round_fsm.sync(GameState(game_state))
        self._store.set(self.round_id, round_id)
        self._store.set(self.start_time, self._now(start_time))
        self._atoms.reset_value(self.play_map)
        self._atoms.reset_value(self.play_count)
        for play in plays:
            self.on_play(play)
        items = tuple(h if isinstance(h, GameHistoryItem) else GameHistoryItem.from_dict(h) for h in history)
        if items:
            self._store.set(self.rounds, items)
        self._store.set(self.initialized, True)

    # ----------------------------------------------------- confirmation intake

    def on_placement_confirmed(self, slot: int, play: Optional[Union[Play, Mapping[str, Any]]] = None) -> bool:
        """PLACING -> PLAYING. Records the user's play (server copy if given)."""
        if not slot_ok(slot) or not self._bet_fsm.apply(slot, BetEvent.PLACEMENT_CONFIRMED):
            return self._reject("placement_confirmed", slot, self._state_or_none(slot))
        if play is None:
            play = self._own_play(slot)
        if play is not None:
            self.on_play(play)
        return True

    def on_placement_failed(self, slot: int, reason: str = "") -> bool:
        """PLACING -> IDLE (server rejected the bet)."""
        if not slot_ok(slot) or not self._bet_fsm.apply(slot, BetEvent.PLACEMENT_FAILED):
            return self._reject("placement_failed", slot, self._state_or_none(slot))
        logger.info("Bet on slot %s rejected by server: %s", slot, reason or "no reason")
        self._clear_active(slot)
        return True

    def on_cashout_confirmed(self, slot: int, stopped_at: float) -> bool:
        """CASHING_OUT -> IDLE; stamps stopped_at on the user's play for this round."""
        if not slot_ok(slot) or not self._bet_fsm.apply(slot, BetEvent.CASHOUT_CONFIRMED):
            return self._reject("cashout_confirmed", slot, self._state_or_none(slot))
        self.metrics.inc_cashouts()
        if self._user_id is not None and self.on_play_cashout(self._user_id, slot, stopped_at):
            if self._store.get(self.game_state) == GameState.ENDED:
                # Round already settled: replace the recorded play
                self._resettle_own_play(slot)
        self._clear_active(slot)
        return True

    def on_cashout_failed(self, slot: int) -> bool:
        """CASHING_OUT -> PLAYING, or -> IDLE (bust) when the round already ended."""
        if not slot_ok(slot):
            return self._reject("cashout_failed", slot, None)
        if self._store.get(self.game_state) == GameState.ENDED:
            return self.on_bust(slot)
        if not self._bet_fsm.apply(slot, BetEvent.CASHOUT_FAILED):
            return self._reject("cashout_failed", slot, self._bet_fsm.state(slot))
        return True

    def on_bust(self, slot: int) -> bool:
        """PLAYING/CASHING_OUT -> IDLE with no payout."""
        if not slot_ok(slot) or not self._bet_fsm.apply(slot, BetEvent.BUST):
            return self._reject("bust", slot, self._state_or_none(slot))
        self.metrics.inc_busts()
        self._clear_active(slot)
        return True

    # ------------------------------------------------------------ play intake

    def on_play(self, play: Union[Play, Mapping[str, Any]]) -> bool:
        """Record a participant's play under its round (play.game_id) and slot."""
        if isinstance(play, Mapping):
            play = Play.from_dict(play)
        if not slot_ok(play.idx):
            logger.warning("Ignoring play with invalid idx=%s user_id=%s", play.idx, play.user_id)
            return False
        self._write_play(play.game_id, play.user_id, play.idx, play)
        return True

    def on_play_cashout(
        self,
        user_id: int,
        idx: int,
        stopped_at: float,
        round_id: Optional[int] = None,
    ) -> bool:
        """Set stopped_at on an existing play. False if the play is unknown."""
        key = self._round_key(round_id)
        dual = self._store.get(self.play_map).get(key, {}).get(user_id)
        if not slot_ok(idx) or dual is None or dual[idx] is None:
            return False
        self._write_play(key, user_id, idx, replace(dual[idx], stopped_at=stopped_at))
        return True

    # --------------------------------------------------------------- internals

    def _send_bet(self, slot: int, payload: Optional[BetPayload]) -> bool:
        if payload is None:
            logger.warning("Slot %s entered PLACING without a payload", slot)
            return False
        self._atoms.set_value(self.active_bet, merge_dual(slot, payload))
        try:
            self.gateway.send_bet(payload)
        except Exception as e:
            logger.warning("Bet request for slot %s not sent: %s", slot, e)
            self.on_placement_failed(slot, reason=str(e))
            return False
        self.metrics.inc_bets_placed()
        return True

    def _clear_active(self, slot: int) -> None:
        self._atoms.set_value(self.active_bet, merge_dual(slot, None))

    def _own_play(self, slot: int) -> Optional[Play]:
        payload = self._store.get(self.active_bet)[slot]
        if payload is None or self._user_id is None:
            return None
        return Play(
            user_id=self._user_id,
            game_id=self._round_key(None),
            idx=slot,
            bet=payload.amount,
            currency=payload.currency,
            created_at=self._clock(),
        )

    def _write_play(self, round_key: int, user_id: int, idx: int, play: Play) -> None:
        def update(current: PlayMap) -> PlayMap:
            round_plays = current.get(round_key, {})
            user_dual = round_plays.get(user_id, create_dual(None))
            return {**current, round_key: {**round_plays, user_id: merge_dual(idx, play)(user_dual)}}

        self._atoms.set_value(self.play_map, update)
        self._store.set(self.play_count, _count_plays(self.round_plays()))

    def _settle_own_plays(self, summary: GameHistoryItem) -> None:
        if self._user_id is None:
            return
        dual = self.round_plays().get(self._user_id)
        if dual is None:
            return
        settled: List[SettledPlay] = [SettledPlay(play=p, crash=summary.crash) for p in dual if p is not None]
        if settled:
            self._atoms.set_value(self.user_bets, lambda bets: bets + tuple(settled))

    def _resettle_own_play(self, slot: int) -> None:
        play = self.round_plays().get(self._user_id, create_dual(None))[slot]
        if play is None:
            return
        key = (play.game_id, play.user_id, play.idx)

        def update(bets: Tuple[SettledPlay, ...]) -> Tuple[SettledPlay, ...]:
            # Newest matching entry only; rounds without ids share key 0
            for i in range(len(bets) - 1, -1, -1):
                s = bets[i]
                if (s.play.game_id, s.play.user_id, s.play.idx) == key:
                    return bets[:i] + (replace(s, play=play),) + bets[i + 1 :]
            return bets

        self._atoms.set_value(self.user_bets, update)

    def _round_key(self, round_id: Optional[int]) -> int:
        if round_id is not None:
            return round_id
        current = self._store.get(self.round_id)
        return current if current is not None else 0

    def _state_or_none(self, slot: Any) -> Optional[BetState]:
        return self._bet_fsm.state(slot) if slot_ok(slot) else None

    def _now(self, ts: Optional[float]) -> float:
        return ts if ts is not None else self._clock()

    def _reject(self, action: str, slot: Any, state: Optional[BetState], amount: Optional[float] = None) -> bool:
        self.metrics.inc_rejected()
        log_bet_action(action, slot, False, state, amount)
        return False

    def _on_round_transition(self, from_state: GameState, to_state: GameState, event: RoundEvent) -> None:
        log_fsm_transition("round", from_state, to_state, event)

    def _on_bet_transition(self, slot: int, from_state: BetState, to_state: BetState, event: BetEvent) -> None:
        log_fsm_transition("bet", from_state, to_state, event, slot=slot)
