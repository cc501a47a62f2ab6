"""Dual values: two independently updatable per-slot components in one atom."""

from typing import Callable, Literal, Tuple, TypeVar

from aviator.core.errors import InvalidSlot

T = TypeVar("T")

Slot = Literal[0, 1]
Dual = Tuple[T, T]

SLOTS: Tuple[Slot, Slot] = (0, 1)


def check_slot(slot: int) -> Slot:
    """Return slot unchanged if it is 0 or 1, else raise InvalidSlot."""
    if isinstance(slot, bool) or slot not in SLOTS:
        raise InvalidSlot(slot)
    return slot


def create_dual(value: T) -> Dual[T]:
    return (value, value)


def merge_dual(slot: int, value: T) -> Callable[[Dual[T]], Dual[T]]:
    """
    Updater writing value at slot. The other element is carried over by
    reference, so shallow equality on the whole dual only fires when slot changes.
    """
    check_slot(slot)

    def apply(current: Dual[T]) -> Dual[T]:
        if slot == 0:
            return (value, current[1])
        return (current[0], value)

    return apply
