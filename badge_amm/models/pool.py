"""Pool state for a single creator's badge market."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass
class Pool:
    """One creator's bonding-curve pool.

    ``creator``, ``payment_asset``, ``unit_scale`` and the curve constants are
    fixed at creation. ``reserve_balance`` moves with every buy, sell and
    bonus. ``coef_num``/``coef_den`` start at 1 and are only ever overwritten
    together by a bonus injection.

    Per-unit price of the i-th unit (1-based):
        (i^2 + curve_a) * coef_num * unit_scale / (curve_b * coef_den)
    """

    pool_id: int
    creator: str
    payment_asset: str
    unit_scale: int
    curve_a: int
    curve_b: int
    revenue_share_percent: int = 0
    reserve_balance: int = 0
    coef_num: int = 1
    coef_den: int = 1
    # False only for privileged creators until the premint trade happens
    premint_settled: bool = True

    def snapshot(self) -> Pool:
        """Return an independent copy used to roll back a failed operation."""
        return replace(self)
