"""Observable records emitted by successful market operations."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class TradeDirection(str, Enum):
    """Whether units were minted to a buyer or burned from a seller."""

    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class PoolCreated:
    pool_id: int
    creator: str
    payment_asset: str
    curve_a: int
    curve_b: int
    revenue_share_percent: int


@dataclass(frozen=True)
class Traded:
    """A settled buy or sell.

    ``gross`` is the curve price, ``net`` is what the trader paid (buy:
    price + fees) or received (sell: price - fees).
    """

    pool_id: int
    actor: str
    direction: TradeDirection
    amount: int
    gross: int
    net: int
    protocol_fee: int
    creator_fee: int
    new_reserve: int
    new_supply: int

    @property
    def total_fees(self) -> int:
        return self.protocol_fee + self.creator_fee


@dataclass(frozen=True)
class BonusAdded:
    pool_id: int
    funder: str
    amount: int
    new_reserve: int
    coef_num: int
    coef_den: int


@dataclass(frozen=True)
class PremintSettled:
    pool_id: int
    preminter: str


@dataclass(frozen=True)
class RevenueShareUpdated:
    pool_id: int
    revenue_share_percent: int


MarketEvent = PoolCreated | Traded | BonusAdded | PremintSettled | RevenueShareUpdated


def event_name(event: MarketEvent) -> str:
    """Snake-case name used for log lines and serialized records."""
    return {
        PoolCreated: "pool_created",
        Traded: "traded",
        BonusAdded: "bonus_added",
        PremintSettled: "premint_settled",
        RevenueShareUpdated: "revenue_share_updated",
    }[type(event)]


def event_to_dict(event: MarketEvent) -> dict[str, Any]:
    """Serialize an event with its name; enums become their values."""
    data = asdict(event)
    for key, value in data.items():
        if isinstance(value, Enum):
            data[key] = value.value
    return {"event": event_name(event), **data}


class EventLog:
    """Append-only record of market events, in settlement order."""

    def __init__(self) -> None:
        self._events: list[MarketEvent] = []

    def append(self, event: MarketEvent) -> None:
        self._events.append(event)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[MarketEvent]:
        return iter(self._events)

    def for_pool(self, pool_id: int) -> list[MarketEvent]:
        """Events of a single pool."""
        return [e for e in self._events if e.pool_id == pool_id]

    def of_type(self, kind: type) -> list[MarketEvent]:
        return [e for e in self._events if isinstance(e, kind)]

    @property
    def last(self) -> MarketEvent | None:
        return self._events[-1] if self._events else None
