"""Market constants and configuration defaults.

Centralizes the native asset sentinel and the default limits used when a
market is built without explicit configuration.
"""

from badge_amm.models.types import is_valid_address

# Sentinel identity for the chain's native value asset
NATIVE_ASSET = "0x0000000000000000000000000000000000000000"

# Native asset uses 18 decimals
NATIVE_UNIT_SCALE = 10**18

# Fee and revenue-share percentages are expressed against this base
PERCENT_BASE = 100

# Default fee split applied to every trade (percent of the gross price)
DEFAULT_PROTOCOL_FEE_PERCENT = 5
DEFAULT_CREATOR_FEE_PERCENT = 5

# Largest number of units a single buy or sell may move
DEFAULT_MAX_TRADE_AMOUNT = 100

# Ceiling for a pool's revenue share
DEFAULT_MAX_REVENUE_SHARE_PERCENT = 50

# Curve constants allowed out of the box (A, B)
DEFAULT_CURVE_A_VALUES = frozenset({210})
DEFAULT_CURVE_B_VALUES = frozenset({2100})


def _validate_identity(name: str, address: str) -> str:
    """Validate a well-known identity at import time.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


NATIVE_ASSET = _validate_identity("NATIVE_ASSET", NATIVE_ASSET)
