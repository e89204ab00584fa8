"""Collaborators the market core depends on.

The core never tracks unit balances, moves funds, or resolves membership
tiers itself. These protocols describe what it needs; in-memory
implementations live in badge_amm.adapters.memory.
"""

from typing import Protocol


class Ledger(Protocol):
    """Multi-asset unit ledger; one asset id per pool."""

    def balance_of(self, holder: str, pool_id: int) -> int: ...

    def total_supply(self, pool_id: int) -> int: ...

    def mint(self, holder: str, pool_id: int, amount: int) -> None: ...

    def burn(self, holder: str, pool_id: int, amount: int) -> None:
        """Remove units from a holder.

        Raises:
            InsufficientFundsError: If the holder has fewer than amount units
        """
        ...


class ValueTransfer(Protocol):
    """Moves payment assets between third parties and market custody.

    collect and pay_out must fail atomically: on rejection nothing has moved
    and a TransferRejectedError (or InsufficientFundsError) is raised.
    refund and reclaim reverse an earlier collect or pay_out of the same
    operation and never invoke recipient callbacks.
    """

    def collect(self, asset: str, payer: str, amount: int) -> None: ...

    def pay_out(self, asset: str, recipient: str, amount: int) -> None: ...

    def refund(self, asset: str, payer: str, amount: int) -> None: ...

    def reclaim(self, asset: str, recipient: str, amount: int) -> None: ...


class TierOracle(Protocol):
    """External membership/reputation oracle."""

    def tier_of(self, user: str) -> int:
        """Return the user's tier level.

        Raises:
            NoProfileError: If no profile is bound to the user
        """
        ...


class AssetMetadata(Protocol):
    """Decimal metadata of payment assets, read only at pool creation."""

    def unit_scale_of(self, asset: str) -> int: ...
