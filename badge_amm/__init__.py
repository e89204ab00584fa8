"""Badge market: quadratic bonding-curve pools with bonus rescaling."""

from badge_amm.market import BadgeMarket, get_default_market

__version__ = "0.1.0"
__all__ = ["BadgeMarket", "get_default_market", "__version__"]
