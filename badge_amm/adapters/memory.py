"""In-memory collaborators.

Used by the HTTP service, scripts and tests. Balances live in dicts guarded
by a lock; every call either completes or raises without changing anything.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Callable

import structlog

from badge_amm.constants import NATIVE_ASSET, NATIVE_UNIT_SCALE
from badge_amm.errors import InsufficientFundsError, NoProfileError, TransferRejectedError
from badge_amm.models.types import normalize_identity

logger = structlog.get_logger()

# Account that holds every pool's reserve and in-flight payments
MARKET_CUSTODY = "0x00000000000000000000000000000000000b4d9e"

PayoutHook = Callable[[str, str, int], None]


class InMemoryLedger:
    """Unit balances per (pool, holder) with mint/burn/transfer."""

    def __init__(self) -> None:
        self._balances: dict[tuple[int, str], int] = defaultdict(int)
        self._supply: dict[int, int] = defaultdict(int)
        self._lock = threading.Lock()

    def balance_of(self, holder: str, pool_id: int) -> int:
        return self._balances.get((pool_id, normalize_identity(holder)), 0)

    def total_supply(self, pool_id: int) -> int:
        return self._supply.get(pool_id, 0)

    def mint(self, holder: str, pool_id: int, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot mint negative amount: {amount}")
        with self._lock:
            self._balances[(pool_id, normalize_identity(holder))] += amount
            self._supply[pool_id] += amount

    def burn(self, holder: str, pool_id: int, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot burn negative amount: {amount}")
        key = (pool_id, normalize_identity(holder))
        with self._lock:
            held = self._balances.get(key, 0)
            if held < amount:
                raise InsufficientFundsError(
                    f"Holder has {held} units of pool {pool_id}, needs {amount}"
                )
            self._balances[key] = held - amount
            self._supply[pool_id] -= amount

    def transfer(self, sender: str, recipient: str, pool_id: int, amount: int) -> None:
        """Move units between holders; supply is unchanged."""
        self.burn(sender, pool_id, amount)
        self.mint(recipient, pool_id, amount)


class InMemoryValueTransfer:
    """Per-asset balances with a single market custody account.

    Attributes:
        rejected_assets: Fungible assets whose transfers are refused, to
            simulate a token that reverts.
        on_pay_out: Optional hook called after each pay_out, with
            (asset, recipient, amount). Models a recipient callback that can
            re-enter the market.
    """

    def __init__(
        self,
        balances: dict[tuple[str, str], int] | None = None,
        custody: str = MARKET_CUSTODY,
    ) -> None:
        self.custody = normalize_identity(custody)
        self._lock = threading.Lock()
        self._balances: dict[tuple[str, str], int] = defaultdict(int)
        for (asset, holder), amount in (balances or {}).items():
            self._balances[(normalize_identity(asset), normalize_identity(holder))] = amount
        self.rejected_assets: set[str] = set()
        self.on_pay_out: PayoutHook | None = None

    def balance_of(self, asset: str, holder: str) -> int:
        return self._balances.get((normalize_identity(asset), normalize_identity(holder)), 0)

    def fund(self, asset: str, holder: str, amount: int) -> None:
        """Credit a holder out of thin air (test and demo setup)."""
        with self._lock:
            self._balances[(normalize_identity(asset), normalize_identity(holder))] += amount

    def reject(self, asset: str) -> None:
        self.rejected_assets.add(normalize_identity(asset))

    def collect(self, asset: str, payer: str, amount: int) -> None:
        self._move(asset, payer, self.custody, amount)

    def pay_out(self, asset: str, recipient: str, amount: int) -> None:
        self._move(asset, self.custody, recipient, amount)
        if self.on_pay_out is None:
            return
        try:
            self.on_pay_out(normalize_identity(asset), normalize_identity(recipient), amount)
        except Exception:
            # Recipient callback failed: the payment does not happen
            self._move(asset, recipient, self.custody, amount)
            raise

    def refund(self, asset: str, payer: str, amount: int) -> None:
        self._move(asset, self.custody, payer, amount)

    def reclaim(self, asset: str, recipient: str, amount: int) -> None:
        self._move(asset, recipient, self.custody, amount)

    def _move(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        asset = normalize_identity(asset)
        sender = normalize_identity(sender)
        recipient = normalize_identity(recipient)
        if amount == 0:
            return
        if asset != NATIVE_ASSET and asset in self.rejected_assets:
            logger.debug("transfer_rejected", asset=asset[-8:], amount=amount)
            raise TransferRejectedError(f"Transfer of {amount} {asset} rejected")
        with self._lock:
            held = self._balances.get((asset, sender), 0)
            if held < amount:
                raise InsufficientFundsError(f"{sender} holds {held} of {asset}, needs {amount}")
            self._balances[(asset, sender)] = held - amount
            self._balances[(asset, recipient)] += amount


class StaticTierOracle:
    """Tier levels from a fixed mapping; unknown users have no profile."""

    def __init__(self, tiers: dict[str, int] | None = None) -> None:
        self._tiers = {normalize_identity(u): t for u, t in (tiers or {}).items()}

    def set_tier(self, user: str, tier: int) -> None:
        self._tiers[normalize_identity(user)] = tier

    def tier_of(self, user: str) -> int:
        try:
            return self._tiers[normalize_identity(user)]
        except KeyError:
            raise NoProfileError(f"No profile bound to {user}") from None


class StaticAssetMetadata:
    """Unit scales from a fixed decimals mapping; native is 18 decimals."""

    def __init__(self, decimals: dict[str, int] | None = None) -> None:
        self._decimals = {normalize_identity(a): d for a, d in (decimals or {}).items()}

    def set_decimals(self, asset: str, decimals: int) -> None:
        self._decimals[normalize_identity(asset)] = decimals

    def unit_scale_of(self, asset: str) -> int:
        asset = normalize_identity(asset)
        if asset == NATIVE_ASSET:
            return NATIVE_UNIT_SCALE
        return 10 ** self._decimals.get(asset, 18)
