"""Atom store: identity-keyed values and listeners with equality-gated writes.

Values live in a weak-keyed table, so an entry is dropped as soon as its atom
is unreachable everywhere else. Listener registrations are kept on the atom
(Atom._listeners, keyed weakly by store), so a listener that refers back to
its atom never pins it. The store never keeps an atom alive; callers own their
atoms.

Notification model:
- set() compares against the stored value with atom.is_equal; equal -> no-op.
- Listeners run synchronously, in registration order, with (new, previous).
- A set() issued while notifications are being delivered (i.e. from inside a
  listener) stores its value at once but queues its notifications; the
  outermost set() drains the queue before returning (queue-and-drain).
- Listener exceptions are logged and counted when isolate_listener_errors is
  on (default); remaining listeners still run. When off, the first exception
  propagates and pending notifications are dropped.
"""

import logging
import weakref
from collections import deque
from typing import Any, Callable, Optional

from aviator.core.errors import UnknownAtom
from aviator.core.metrics import Metrics

logger = logging.getLogger(__name__)

Listener = Callable[[Any, Any], None]
Unsubscribe = Callable[[], None]


class Store:
    """Independent universe of atom values. Construct one per session and inject it."""

    def __init__(self, isolate_listener_errors: bool = True, metrics: Optional[Metrics] = None):
        self._values: "weakref.WeakKeyDictionary[Any, Any]" = weakref.WeakKeyDictionary()
        self._pending: deque = deque()
        self._dispatching = False
        self._isolate = isolate_listener_errors
        self._metrics = metrics

    def __contains__(self, atom: Any) -> bool:
        return atom in self._values

    def __len__(self) -> int:
        return len(self._values)

    @property
    def isolate_listener_errors(self) -> bool:
        return self._isolate

    def get(self, atom: Any) -> Any:
        """Current value. Raises UnknownAtom if the atom was never seeded."""
        try:
            return self._values[atom]
        except KeyError:
            raise UnknownAtom(atom) from None

    def set(self, atom: Any, value: Any) -> None:
        """Store value unless atom.is_equal(previous, value); notify listeners on change."""
        if atom in self._values:
            previous = self._values[atom]
            if atom.is_equal(previous, value):
                return
        else:
            previous = None
        self._values[atom] = value

        registrations = atom._listeners.get(self)
        if not registrations:
            return
        self._pending.append((atom, registrations, tuple(registrations), value, previous))
        if self._dispatching:
            return
        self._drain()

    def sub(self, atom: Any, listener: Listener) -> Unsubscribe:
        """
        Register listener(new, previous) for atom. Returns a capability removing
        exactly this registration; calling it again is a no-op.
        """
        registrations = atom._listeners.get(self)
        if registrations is None:
            registrations = {}
            atom._listeners[self] = registrations
        token = object()
        registrations[token] = listener
        atom_ref = weakref.ref(atom)
        store_ref = weakref.ref(self)

        def unsubscribe() -> None:
            if registrations.pop(token, None) is None:
                return
            if not registrations:
                owner, store = atom_ref(), store_ref()
                if owner is not None and store is not None and owner._listeners.get(store) is registrations:
                    del owner._listeners[store]

        return unsubscribe

    def listener_count(self, atom: Any) -> int:
        return len(atom._listeners.get(self) or ())

    def _drain(self) -> None:
        self._dispatching = True
        try:
            while self._pending:
                atom, registrations, tokens, value, previous = self._pending.popleft()
                for token in tokens:
                    # Skip registrations removed after this notification was queued
                    listener = registrations.get(token)
                    if listener is not None:
                        self._notify(atom, listener, value, previous)
        finally:
            self._dispatching = False
            self._pending.clear()

    def _notify(self, atom: Any, listener: Listener, value: Any, previous: Any) -> None:
        if self._metrics is not None:
            self._metrics.inc_notifications()
        if not self._isolate:
            listener(value, previous)
            return
        try:
            listener(value, previous)
        except Exception:
            logger.warning("Listener %r failed on %r", listener, atom, exc_info=True)
            if self._metrics is not None:
                self._metrics.inc_listener_errors()
