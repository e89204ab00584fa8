"""Pool registry: ownership, lifecycle and reserve accounting of pools.

The registry is the only place pool state changes:
- create_pool allocates a pool (one per creator, ever)
- settle_buy / settle_sell move the reserve
- inject_bonus rescales the curve coefficients
- mark_premint_settled opens a privileged pool to public trading

Eligibility checks go through GateKeeper; pricing and transfers live
elsewhere (badge_amm.pricing, badge_amm.settlement).
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING

import structlog

from badge_amm.errors import (
    DuplicateCreatorError,
    EmptyReserveError,
    InvalidAmountError,
    RevenueShareTooHighError,
    UnknownPoolError,
)
from badge_amm.models.pool import Pool
from badge_amm.models.types import normalize_identity
from badge_amm.safe_int import S

if TYPE_CHECKING:
    from badge_amm.config import MarketConfig
    from badge_amm.gates import GateKeeper
    from badge_amm.interfaces import AssetMetadata

logger = structlog.get_logger()


class PoolRegistry:
    """Registry of badge pools keyed by id, with a creator index.

    Args:
        config: Market configuration (revenue share ceiling)
        gatekeeper: Eligibility checks for pool creation
        asset_metadata: Source of payment-asset unit scales
    """

    def __init__(
        self,
        config: MarketConfig,
        gatekeeper: GateKeeper,
        asset_metadata: AssetMetadata,
    ) -> None:
        self.config = config
        self.gatekeeper = gatekeeper
        self.asset_metadata = asset_metadata
        self._pools: dict[int, Pool] = {}
        self._pool_by_creator: dict[str, int] = {}
        self._next_id = 1
        # Serializes id allocation and the one-pool-per-creator check
        self._create_lock = threading.Lock()

    # --- Lookup ---

    def get(self, pool_id: int) -> Pool:
        """Get a pool by id.

        Raises:
            UnknownPoolError: If no pool has this id
        """
        try:
            return self._pools[pool_id]
        except KeyError:
            raise UnknownPoolError(f"Unknown pool: {pool_id}") from None

    def pool_of(self, creator: str) -> Pool | None:
        """Get the pool a creator owns, if any."""
        pool_id = self._pool_by_creator.get(normalize_identity(creator))
        return self._pools[pool_id] if pool_id is not None else None

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._pools

    def __iter__(self) -> Iterator[Pool]:
        return iter(self._pools.values())

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    # --- Lifecycle ---

    def create_pool(
        self,
        creator: str,
        payment_asset: str,
        curve_a: int,
        curve_b: int,
        revenue_share_percent: int = 0,
    ) -> Pool:
        """Allocate a new pool for a creator.

        The payment asset's unit scale is captured now and never re-read.

        Raises:
            AuthorizationError: If the creator may not create pools
            DuplicateCreatorError: If the creator already owns a pool
            UnsupportedAssetError: If the payment asset is not allow-listed
            InvalidCurveConstantError: If a curve constant is rejected
            RevenueShareTooHighError: If the share exceeds the ceiling
        """
        creator = normalize_identity(creator)
        payment_asset = normalize_identity(payment_asset)

        with self._create_lock:
            self.gatekeeper.require_can_create(creator)
            if creator in self._pool_by_creator:
                raise DuplicateCreatorError(
                    f"Creator {creator} already owns pool {self._pool_by_creator[creator]}"
                )
            self.gatekeeper.require_asset_supported(payment_asset)
            self.gatekeeper.require_curve_constants(curve_a, curve_b)
            self._check_revenue_share(revenue_share_percent)

            pool = Pool(
                pool_id=self._next_id,
                creator=creator,
                payment_asset=payment_asset,
                unit_scale=self.asset_metadata.unit_scale_of(payment_asset),
                curve_a=curve_a,
                curve_b=curve_b,
                revenue_share_percent=revenue_share_percent,
                premint_settled=not self.gatekeeper.is_privileged_creator(creator),
            )
            self._pools[pool.pool_id] = pool
            self._pool_by_creator[creator] = pool.pool_id
            self._next_id += 1

        logger.info(
            "pool_created",
            pool_id=pool.pool_id,
            creator=creator[-8:],
            payment_asset=payment_asset[-8:],
            curve_a=curve_a,
            curve_b=curve_b,
            premint_settled=pool.premint_settled,
        )
        return pool

    def set_revenue_share(self, pool_id: int, revenue_share_percent: int) -> Pool:
        """Owner setter for a pool's revenue share.

        Raises:
            UnknownPoolError: If no pool has this id
            RevenueShareTooHighError: If the share exceeds the ceiling
        """
        pool = self.get(pool_id)
        self._check_revenue_share(revenue_share_percent)
        pool.revenue_share_percent = revenue_share_percent
        return pool

    def _check_revenue_share(self, percent: int) -> None:
        if percent < 0:
            raise RevenueShareTooHighError(f"Revenue share cannot be negative: {percent}")
        if percent > self.config.max_revenue_share_percent:
            raise RevenueShareTooHighError(
                f"Revenue share {percent}% exceeds {self.config.max_revenue_share_percent}%"
            )

    def mark_premint_settled(self, pool_id: int) -> bool:
        """Open a privileged pool to public trading.

        Returns:
            True if this call flipped the flag, False if it was already set
        """
        pool = self.get(pool_id)
        if pool.premint_settled:
            return False
        pool.premint_settled = True
        return True

    # --- Reserve accounting ---

    def settle_buy(self, pool_id: int, price: int) -> int:
        """Add a buy's price to the reserve. Returns the new reserve."""
        pool = self.get(pool_id)
        pool.reserve_balance = (S(pool.reserve_balance) + price).to_uint256()
        return pool.reserve_balance

    def settle_sell(self, pool_id: int, price: int) -> int:
        """Remove a sell's price from the reserve. Returns the new reserve.

        Raises:
            Underflow: If price exceeds the reserve
        """
        pool = self.get(pool_id)
        pool.reserve_balance = (S(pool.reserve_balance) - price).value
        return pool.reserve_balance

    def inject_bonus(self, pool_id: int, amount: int) -> Pool:
        """Rescale a pool's curve by adding bonus funds to its reserve.

        Sets coef_den = reserve and coef_num = reserve + amount, so every
        later price is scaled by (reserve + amount) / reserve relative to the
        base curve. Repeated bonuses compound through the reserve: each one
        overwrites the pair with a ratio taken from the reserve the earlier
        bonuses already grew.

        Raises:
            UnknownPoolError: If no pool has this id
            InvalidAmountError: If amount is zero
            EmptyReserveError: If the reserve is zero
        """
        pool = self.get(pool_id)
        if amount <= 0:
            raise InvalidAmountError(f"Bonus amount must be positive, got {amount}")
        if pool.reserve_balance == 0:
            raise EmptyReserveError(f"Pool {pool_id} has no reserve to rescale")

        new_reserve = (S(pool.reserve_balance) + amount).to_uint256()
        pool.coef_den = pool.reserve_balance
        pool.coef_num = new_reserve
        pool.reserve_balance = new_reserve
        return pool

    def restore(self, snapshot: Pool) -> None:
        """Put back a pool's state captured by Pool.snapshot()."""
        pool = self.get(snapshot.pool_id)
        pool.reserve_balance = snapshot.reserve_balance
        pool.coef_num = snapshot.coef_num
        pool.coef_den = snapshot.coef_den
        pool.premint_settled = snapshot.premint_settled
        pool.revenue_share_percent = snapshot.revenue_share_percent
