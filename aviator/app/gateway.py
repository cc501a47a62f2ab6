"""BetGateway abstract interface: outbound bet/cashout requests to the game server.

The session calls the gateway synchronously when a slot enters PLACING or
CASHING_OUT; the network layer answers later through the session's
confirmation entry points (on_placement_confirmed, on_cashout_confirmed, ...).
"""

from abc import ABC, abstractmethod
from typing import List, Tuple

from aviator.core.state.models import BetPayload


class BetGateway(ABC):
    """Sink for requests leaving the client. Implementations own transport concerns."""

    @abstractmethod
    def send_bet(self, payload: BetPayload) -> None:
        """Send a bet request for payload.idx. Raise if the request could not be sent."""
        ...

    @abstractmethod
    def send_cashout(self, slot: int) -> None:
        """Send a cashout request for slot. Raise if the request could not be sent."""
        ...


class NullGateway(BetGateway):
    """Records requests in memory; used offline, in replays and in tests."""

    def __init__(self):
        self.sent: List[Tuple[str, object]] = []

    def send_bet(self, payload: BetPayload) -> None:
        self.sent.append(("bet", payload))

    def send_cashout(self, slot: int) -> None:
        self.sent.append(("cashout", slot))

    def clear(self) -> None:
        self.sent.clear()
