"""aviator-state: atom store and dual-slot bet/game state machine for a live crash betting client."""

from aviator.app.crash_session import CrashSession
from aviator.app.dispatcher import EventDispatcher
from aviator.binding.port import AtomView, BindingPort
from aviator.core.atoms import RESET, Atom, AtomFactory
from aviator.core.store import Store

__all__ = [
    "CrashSession",
    "EventDispatcher",
    "AtomView",
    "BindingPort",
    "RESET",
    "Atom",
    "AtomFactory",
    "Store",
]
