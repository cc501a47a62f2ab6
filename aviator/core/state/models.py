"""Immutable payloads flowing through the session: bets, plays, round summaries."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional, Union

# Server timestamps arrive as ISO strings, datetimes or epoch numbers
Timestamp = Union[str, float, int, Any]


@dataclass(frozen=True)
class BetPayload:
    """Bet request for one slot. auto_cashout=0 disables automatic cashout."""

    amount: float
    idx: int = 0
    currency: str = ""
    auto_cashout: float = 0.0

    def for_slot(self, idx: int, currency: Optional[str] = None) -> "BetPayload":
        return replace(self, idx=idx, currency=currency or self.currency)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "idx": self.idx,
            "currency": self.currency,
            "autoCashout": self.auto_cashout,
        }


@dataclass(frozen=True)
class Play:
    """A participant's bet for one round and slot."""

    user_id: int
    game_id: int
    idx: int
    bet: float
    xid: int = 0
    currency: str = ""
    username: str = ""
    created_at: Optional[Timestamp] = None
    stopped_at: Optional[float] = None  # Set only when the play cashed out before bust

    @property
    def won(self) -> bool:
        return self.stopped_at is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Play":
        return cls(
            user_id=int(data["user_id"]),
            game_id=int(data["game_id"]),
            idx=int(data.get("idx", 0)),
            bet=float(data.get("bet", 0.0)),
            xid=int(data.get("xid", 0)),
            currency=str(data.get("currency", "")),
            username=str(data.get("username", "")),
            created_at=data.get("created_at"),
            stopped_at=data.get("stopped_at"),
        )


@dataclass(frozen=True)
class SettledPlay:
    """The local user's play once its round busted, with the crash point attached."""

    play: Play
    crash: float

    @property
    def payout(self) -> float:
        if self.play.stopped_at is None:
            return 0.0
        return self.play.bet * self.play.stopped_at


@dataclass(frozen=True)
class GameHistoryItem:
    """Summary of a completed round."""

    id: int
    crash: float
    hash: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameHistoryItem":
        return cls(id=int(data["id"]), crash=float(data["crash"]), hash=str(data.get("hash", "")))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "hash": self.hash, "crash": self.crash}
