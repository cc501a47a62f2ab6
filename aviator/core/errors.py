"""Exception types shared by the store, the FSMs and the event dispatcher."""


class AviatorError(Exception):
    """Base class for all aviator-state errors."""

    pass


class UnknownAtom(AviatorError):
    """Atom read before it was seeded. Indicates a construction bug."""

    def __init__(self, atom):
        self.atom = atom
        super().__init__(f"Atom {atom!r} has no value in this store")


class InvalidTransition(AviatorError):
    """Guard violation: the requested transition is not allowed from the current state."""

    def __init__(self, from_state, event, slot=None):
        self.from_state = from_state
        self.event = event
        self.slot = slot
        where = f" slot={slot}" if slot is not None else ""
        super().__init__(f"No transition from {from_state!s} on {event!s}{where}")


class InvalidSlot(InvalidTransition):
    """Slot index outside {0, 1}."""

    def __init__(self, slot):
        self.from_state = None
        self.event = None
        self.slot = slot
        AviatorError.__init__(self, f"Invalid slot {slot!r} (expected 0 or 1)")


class UnknownEvent(AviatorError):
    """Server message with no registered handler."""

    def __init__(self, event):
        self.event = event
        super().__init__(f"No handler for event {event!r}")
