"""BindingPort / AtomView: read-then-subscribe mount semantics for UI layers."""

import gc
import weakref

from aviator.binding.port import BindingPort
from aviator.core.state.enums import BetState
from aviator.core.state.models import BetPayload


class TestBindingPort:
    def test_read_and_subscribe(self, store, atoms):
        atom = atoms.create_atom("a")
        port = BindingPort(store)
        seen = []
        unsub = port.subscribe(atom, lambda new, prev: seen.append((new, prev)))
        atoms.set_value(atom, "b")
        unsub()
        atoms.set_value(atom, "c")
        assert port.read(atom) == "c"
        assert seen == [("b", "a")]


class TestAtomView:
    def test_mount_reads_current_value(self, store, atoms):
        atom = atoms.create_atom(1)
        atoms.set_value(atom, 2)
        view = BindingPort(store).view(atom)
        assert view.mounted is False
        view.mount()
        assert view.mounted is True
        assert view.value == 2

    def test_changes_update_local_copy_and_redraw(self, store, atoms):
        atom = atoms.create_atom(0)
        redraws = []
        view = BindingPort(store).view(atom, redraw=redraws.append).mount()
        atoms.set_value(atom, 5)
        atoms.set_value(atom, 5)
        assert view.value == 5
        assert redraws == [5]

    def test_mount_twice_subscribes_once(self, store, atoms):
        atom = atoms.create_atom(0)
        view = BindingPort(store).view(atom)
        view.mount()
        view.mount()
        assert store.listener_count(atom) == 1

    def test_unmount_is_idempotent(self, store, atoms):
        atom = atoms.create_atom(0)
        redraws = []
        view = BindingPort(store).view(atom, redraw=redraws.append).mount()
        view.unmount()
        view.unmount()
        atoms.set_value(atom, 1)
        assert redraws == []
        assert view.value == 0
        assert store.listener_count(atom) == 0

    def test_dropped_mounted_view_releases_atom(self, store, atoms):
        atom = atoms.create_atom(0)
        BindingPort(store).view(atom).mount()
        ref = weakref.ref(atom)
        del atom
        gc.collect()
        assert ref() is None
        assert len(store) == 0

    def test_context_manager(self, store, atoms):
        atom = atoms.create_atom("x")
        with BindingPort(store).view(atom) as view:
            atoms.set_value(atom, "y")
            assert view.value == "y"
        assert view.mounted is False
        assert store.listener_count(atom) == 0

    def test_view_over_session_bet_state(self, session):
        redraws = []
        port = BindingPort(session.store)
        with port.view(session.bet_state, redraw=redraws.append) as view:
            session.on_round_starting()
            session.place_bet(1, BetPayload(amount=10))
            session.cancel_bet(0)
            assert view.value == (BetState.IDLE, BetState.QUEUED)
        assert redraws == [(BetState.IDLE, BetState.QUEUED)]
