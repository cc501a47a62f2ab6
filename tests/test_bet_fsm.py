"""Bet FSM transition table and slot-scoped writes."""

import pytest

from aviator.core.atoms import AtomFactory
from aviator.core.errors import InvalidSlot, InvalidTransition
from aviator.core.state.dual import create_dual, merge_dual
from aviator.core.state.enums import BetState
from aviator.core.state.models import BetPayload
from aviator.core.store import Store
from aviator.fsm.bet_fsm import BetFSM, next_bet_state
from aviator.fsm.events import BetEvent


def _fsm(on_transition=None):
    store = Store()
    atoms = AtomFactory(store)
    bet_state = atoms.create_atom(create_dual(BetState.IDLE), shallow=True)
    next_bet = atoms.create_atom(create_dual(None), shallow=True)
    return store, bet_state, next_bet, BetFSM(store, bet_state, next_bet, on_transition=on_transition)


class TestTransitionTable:
    @pytest.mark.parametrize(
        "state,event,expected",
        [
            (BetState.IDLE, BetEvent.QUEUE, BetState.QUEUED),
            (BetState.IDLE, BetEvent.PLACE, BetState.PLACING),
            (BetState.QUEUED, BetEvent.CANCEL, BetState.IDLE),
            (BetState.QUEUED, BetEvent.ROUND_STARTED, BetState.PLACING),
            (BetState.PLACING, BetEvent.PLACEMENT_CONFIRMED, BetState.PLAYING),
            (BetState.PLACING, BetEvent.PLACEMENT_FAILED, BetState.IDLE),
            (BetState.PLAYING, BetEvent.CASHOUT, BetState.CASHING_OUT),
            (BetState.CASHING_OUT, BetEvent.CASHOUT_CONFIRMED, BetState.IDLE),
            (BetState.CASHING_OUT, BetEvent.CASHOUT_FAILED, BetState.PLAYING),
            (BetState.PLAYING, BetEvent.BUST, BetState.IDLE),
            (BetState.CASHING_OUT, BetEvent.BUST, BetState.IDLE),
        ],
    )
    def test_valid_transitions(self, state, event, expected):
        assert next_bet_state(state, event) == expected

    @pytest.mark.parametrize(
        "state,event",
        [
            (BetState.IDLE, BetEvent.CANCEL),
            (BetState.PLACING, BetEvent.CANCEL),
            (BetState.PLAYING, BetEvent.CANCEL),
            (BetState.QUEUED, BetEvent.PLACE),
            (BetState.PLAYING, BetEvent.PLACE),
            (BetState.IDLE, BetEvent.CASHOUT),
            (BetState.PLACING, BetEvent.CASHOUT),
            (BetState.IDLE, BetEvent.BUST),
            (BetState.IDLE, BetEvent.ROUND_STARTED),
        ],
    )
    def test_invalid_transitions(self, state, event):
        assert next_bet_state(state, event) is None


class TestApply:
    def test_queue_stores_payload_for_slot(self):
        store, bet_state, next_bet, fsm = _fsm()
        payload = BetPayload(amount=100, idx=0)
        assert fsm.apply(0, BetEvent.QUEUE, queued=payload) is True
        assert store.get(bet_state) == (BetState.QUEUED, BetState.IDLE)
        assert store.get(next_bet) == (payload, None)

    def test_leaving_queued_clears_payload(self):
        store, bet_state, next_bet, fsm = _fsm()
        fsm.apply(1, BetEvent.QUEUE, queued=BetPayload(amount=5, idx=1))
        fsm.apply(1, BetEvent.ROUND_STARTED)
        assert store.get(bet_state) == (BetState.IDLE, BetState.PLACING)
        assert store.get(next_bet) == (None, None)

    def test_rejected_event_does_not_write(self):
        store, bet_state, next_bet, fsm = _fsm()
        before = store.get(bet_state)
        calls = []
        store.sub(bet_state, lambda new, prev: calls.append(new))
        assert fsm.apply(0, BetEvent.CANCEL) is False
        assert store.get(bet_state) is before
        assert calls == []

    def test_write_on_slot_zero_keeps_slot_one_identity(self):
        store, bet_state, next_bet, fsm = _fsm()
        queued_1 = BetPayload(amount=7, idx=1)
        fsm.apply(1, BetEvent.QUEUE, queued=queued_1)
        fsm.apply(0, BetEvent.PLACE)
        assert store.get(next_bet)[1] is queued_1
        assert store.get(bet_state)[1] is BetState.QUEUED

    def test_one_notification_per_affected_slot(self):
        store, bet_state, next_bet, fsm = _fsm()
        calls = []
        store.sub(bet_state, lambda new, prev: calls.append((new, prev)))
        fsm.apply(0, BetEvent.PLACE)
        assert calls == [((BetState.PLACING, BetState.IDLE), (BetState.IDLE, BetState.IDLE))]

    def test_on_transition_callback(self):
        seen = []
        _, _, _, fsm = _fsm(on_transition=lambda *args: seen.append(args))
        fsm.apply(1, BetEvent.PLACE)
        assert seen == [(1, BetState.IDLE, BetState.PLACING, BetEvent.PLACE)]

    def test_on_transition_error_is_swallowed(self):
        def boom(*args):
            raise RuntimeError("callback failed")

        store, bet_state, _, fsm = _fsm(on_transition=boom)
        assert fsm.apply(0, BetEvent.PLACE) is True
        assert store.get(bet_state)[0] == BetState.PLACING

    def test_require_raises_on_invalid(self):
        _, _, _, fsm = _fsm()
        with pytest.raises(InvalidTransition) as exc:
            fsm.require(0, BetEvent.CASHOUT)
        assert exc.value.slot == 0

    def test_invalid_slot_raises(self):
        _, _, _, fsm = _fsm()
        with pytest.raises(InvalidSlot):
            fsm.state(2)


class TestMergeDual:
    def test_merge_keeps_other_element(self):
        other = object()
        merged = merge_dual(0, "x")(("old", other))
        assert merged == ("x", other)
        assert merged[1] is other

    def test_merge_rejects_bad_slot(self):
        with pytest.raises(InvalidSlot):
            merge_dual(3, "x")
