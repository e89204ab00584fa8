"""Data models for the badge market."""

from badge_amm.models.events import (
    BonusAdded,
    EventLog,
    MarketEvent,
    PoolCreated,
    PremintSettled,
    RevenueShareUpdated,
    Traded,
    TradeDirection,
)
from badge_amm.models.pool import Pool
from badge_amm.models.types import Address, Uint256, normalize_identity

__all__ = [
    # Types
    "Address",
    "Uint256",
    "normalize_identity",
    # State
    "Pool",
    # Events
    "EventLog",
    "MarketEvent",
    "PoolCreated",
    "Traded",
    "TradeDirection",
    "BonusAdded",
    "PremintSettled",
    "RevenueShareUpdated",
]
