"""Badge market: the root component wiring configuration, gates, pools and settlement.

BadgeMarket is the entry point for everything the market exposes:
pool creation, buys, sells, bonus injections, read-only quotes and the
owner configuration surface (via ``config``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from badge_amm.adapters import (
    InMemoryLedger,
    InMemoryValueTransfer,
    StaticAssetMetadata,
    StaticTierOracle,
)
from badge_amm.config import MarketConfig
from badge_amm.gates import GateKeeper
from badge_amm.models.events import EventLog, PoolCreated, RevenueShareUpdated
from badge_amm.pools import PoolRegistry
from badge_amm.settlement import TradeSettlement

if TYPE_CHECKING:
    from badge_amm.interfaces import AssetMetadata, Ledger, TierOracle, ValueTransfer
    from badge_amm.models.events import BonusAdded, Traded
    from badge_amm.models.pool import Pool
    from badge_amm.pricing import Quote

logger = structlog.get_logger()


class BadgeMarket:
    """Per-creator bonding-curve markets for badge units.

    Collaborators default to in-memory implementations so a market can be
    built with no arguments for tests and local runs.

    Args:
        config: Market configuration. A fresh MarketConfig if not provided.
        ledger: Unit ledger
        transfers: Payment-asset transfer collaborator
        tier_oracle: Membership tier oracle
        asset_metadata: Payment-asset decimals source
    """

    def __init__(
        self,
        config: MarketConfig | None = None,
        ledger: Ledger | None = None,
        transfers: ValueTransfer | None = None,
        tier_oracle: TierOracle | None = None,
        asset_metadata: AssetMetadata | None = None,
    ) -> None:
        self.config = config or MarketConfig()
        self.ledger = ledger if ledger is not None else InMemoryLedger()
        self.transfers = transfers if transfers is not None else InMemoryValueTransfer()
        self.tier_oracle = tier_oracle if tier_oracle is not None else StaticTierOracle()
        self.asset_metadata = (
            asset_metadata if asset_metadata is not None else StaticAssetMetadata()
        )
        self.events = EventLog()

        self.gatekeeper = GateKeeper(self.config, self.tier_oracle)
        self.registry = PoolRegistry(self.config, self.gatekeeper, self.asset_metadata)
        self.settlement = TradeSettlement(
            self.config,
            self.registry,
            self.gatekeeper,
            self.ledger,
            self.transfers,
            self.events,
        )

    # --- Pools ---

    def create_pool(
        self,
        creator: str,
        payment_asset: str,
        curve_a: int,
        curve_b: int,
        revenue_share_percent: int = 0,
    ) -> Pool:
        """Create the creator's pool. See PoolRegistry.create_pool."""
        self.settlement.require_not_paused()
        pool = self.registry.create_pool(
            creator, payment_asset, curve_a, curve_b, revenue_share_percent
        )
        self.events.append(
            PoolCreated(
                pool_id=pool.pool_id,
                creator=pool.creator,
                payment_asset=pool.payment_asset,
                curve_a=pool.curve_a,
                curve_b=pool.curve_b,
                revenue_share_percent=pool.revenue_share_percent,
            )
        )
        return pool

    def get_pool(self, pool_id: int) -> Pool:
        return self.registry.get(pool_id)

    def supply_of(self, pool_id: int) -> int:
        self.registry.get(pool_id)
        return self.ledger.total_supply(pool_id)

    def balance_of(self, holder: str, pool_id: int) -> int:
        return self.ledger.balance_of(holder, pool_id)

    def set_revenue_share(self, pool_id: int, revenue_share_percent: int) -> Pool:
        with self.settlement.pool_lock(pool_id):
            pool = self.registry.set_revenue_share(pool_id, revenue_share_percent)
        self.events.append(
            RevenueShareUpdated(pool_id=pool_id, revenue_share_percent=revenue_share_percent)
        )
        logger.info(
            "revenue_share_updated", pool_id=pool_id, revenue_share_percent=revenue_share_percent
        )
        return pool

    # --- Quotes ---

    def quote_buy(self, pool_id: int, amount: int) -> Quote:
        return self.settlement.quote_buy(pool_id, amount)

    def quote_sell(self, pool_id: int, amount: int) -> Quote:
        return self.settlement.quote_sell(pool_id, amount)

    # --- Trades ---

    def buy(
        self,
        buyer: str,
        pool_id: int,
        amount: int,
        max_cost: int,
        native_value: int = 0,
    ) -> Traded:
        return self.settlement.buy(buyer, pool_id, amount, max_cost, native_value)

    def sell(self, seller: str, pool_id: int, amount: int, min_proceeds: int = 0) -> Traded:
        return self.settlement.sell(seller, pool_id, amount, min_proceeds)

    def add_bonus(
        self,
        funder: str,
        pool_id: int,
        amount: int,
        native_value: int = 0,
    ) -> BonusAdded:
        return self.settlement.add_bonus(funder, pool_id, amount, native_value)


# Module-level default market (created lazily)
_default_market: BadgeMarket | None = None


def get_default_market() -> BadgeMarket:
    """Get the process-wide market used by the HTTP service."""
    global _default_market
    if _default_market is None:
        _default_market = BadgeMarket()
    return _default_market


def reset_default_market() -> None:
    """Drop the process-wide market (tests)."""
    global _default_market
    _default_market = None
