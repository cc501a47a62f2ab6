"""Crash game session, outbound gateway and server-message dispatcher."""

from aviator.app.crash_session import CrashSession
from aviator.app.dispatcher import EventDispatcher
from aviator.app.gateway import BetGateway, NullGateway

__all__ = ["CrashSession", "EventDispatcher", "BetGateway", "NullGateway"]
