"""Binding port for UI layers: synchronous reads, change subscriptions and mount/unmount glue."""

from typing import Any, Callable, Generic, Optional, TypeVar

from aviator.core.atoms import Atom
from aviator.core.store import Store, Unsubscribe

T = TypeVar("T")


class BindingPort:
    """Read/subscribe surface over one store. UI code never writes through it."""

    def __init__(self, store: Store):
        self._store = store

    def read(self, atom: Atom[T]) -> T:
        return self._store.get(atom)

    def subscribe(self, atom: Atom[T], on_change: Callable[[T, T], None]) -> Unsubscribe:
        return self._store.sub(atom, on_change)

    def view(self, atom: Atom[T], redraw: Optional[Callable[[T], None]] = None) -> "AtomView[T]":
        return AtomView(self, atom, redraw)


class AtomView(Generic[T]):
    """
    Local copy of one atom for a UI component.

    mount(): read the current value, then subscribe; each change replaces the
    local copy and calls redraw(value). unmount(): unsubscribe (idempotent).
    Also usable as a context manager.
    """

    def __init__(self, port: BindingPort, atom: Atom[T], redraw: Optional[Callable[[T], None]] = None):
        self._port = port
        self._atom = atom
        self._redraw = redraw
        self._value: Any = None
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def value(self) -> T:
        return self._value

    @property
    def mounted(self) -> bool:
        return self._unsubscribe is not None

    def mount(self) -> "AtomView[T]":
        if self._unsubscribe is not None:
            return self
        self._value = self._port.read(self._atom)
        self._unsubscribe = self._port.subscribe(self._atom, self._on_change)
        return self

    def unmount(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def _on_change(self, value: T, previous: T) -> None:
        self._value = value
        if self._redraw is not None:
            self._redraw(value)

    def __enter__(self) -> "AtomView[T]":
        return self.mount()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unmount()
