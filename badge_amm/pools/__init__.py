"""Pool management package.

Provides PoolRegistry for creating pools and tracking their reserves and
curve coefficients.
"""

from badge_amm.pools.registry import PoolRegistry

__all__ = ["PoolRegistry"]
