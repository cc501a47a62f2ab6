"""Atom store, atom factory, equality strategies and shared utilities."""

from aviator.core.atoms import RESET, Atom, AtomFactory
from aviator.core.equality import is_identical, shallow_equal
from aviator.core.errors import AviatorError, InvalidSlot, InvalidTransition, UnknownAtom, UnknownEvent
from aviator.core.metrics import Metrics
from aviator.core.store import Store

__all__ = [
    "RESET",
    "Atom",
    "AtomFactory",
    "is_identical",
    "shallow_equal",
    "AviatorError",
    "InvalidSlot",
    "InvalidTransition",
    "UnknownAtom",
    "UnknownEvent",
    "Metrics",
    "Store",
]
