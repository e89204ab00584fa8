"""Collaborator implementations for the badge market."""

from badge_amm.adapters.memory import (
    MARKET_CUSTODY,
    InMemoryLedger,
    InMemoryValueTransfer,
    StaticAssetMetadata,
    StaticTierOracle,
)

__all__ = [
    "MARKET_CUSTODY",
    "InMemoryLedger",
    "InMemoryValueTransfer",
    "StaticAssetMetadata",
    "StaticTierOracle",
]
