"""Atoms (identity-keyed descriptors) and the factory that seeds them into a store."""

import weakref
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

from aviator.core.equality import is_identical, shallow_equal
from aviator.core.store import Listener, Store, Unsubscribe

T = TypeVar("T")


class _Reset:
    """Sentinel type for RESET."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "RESET"


# Passed to AtomFactory.set_value to restore the atom's initial value
RESET = _Reset()


@dataclass(frozen=True, eq=False)
class Atom(Generic[T]):
    """
    Immutable descriptor: initial value plus equality predicate.

    eq=False keeps object identity as the hash and equality, so two atoms with
    the same contents are distinct store entries.

    _listeners maps each store to this atom's registrations in it; the only
    path from a store to those listeners runs through the atom.
    """

    initial: T
    is_equal: Callable[[T, T], bool] = field(default=is_identical)
    name: str = ""
    _listeners: "weakref.WeakKeyDictionary[Store, dict]" = field(
        default_factory=weakref.WeakKeyDictionary, init=False, repr=False, compare=False
    )

    def __repr__(self) -> str:
        label = self.name or hex(id(self))
        return f"Atom({label})"


class AtomFactory:
    """Creates atoms bound to one store and wraps the store's read/write/subscribe."""

    def __init__(self, store: Store):
        self._store = store

    @property
    def store(self) -> Store:
        return self._store

    def create_atom(self, initial: T, shallow: bool = False, name: str = "") -> Atom[T]:
        """Build an atom with identity (default) or shallow equality and seed the store with initial."""
        atom = Atom(initial=initial, is_equal=shallow_equal if shallow else is_identical, name=name)
        self._store.set(atom, initial)
        return atom

    def get_value(self, atom: Atom[T]) -> T:
        return self._store.get(atom)

    def set_value(self, atom: Atom[T], value: Any) -> None:
        """
        Write value. A callable is treated as an updater called with the current
        value; RESET restores atom.initial.
        """
        if value is RESET:
            new_value = atom.initial
        elif callable(value):
            new_value = value(self._store.get(atom))
        else:
            new_value = value
        self._store.set(atom, new_value)

    def reset_value(self, atom: Atom[T]) -> None:
        self.set_value(atom, RESET)

    def sub(self, atom: Atom[T], listener: Listener) -> Unsubscribe:
        return self._store.sub(atom, listener)
