"""Test helpers module for shared test utilities.

- constants: Identities, assets and reference prices
- factories: Market, config and pool factory functions
"""

from tests.helpers.constants import (
    BUYER,
    BUYER_2,
    CREATOR,
    CREATOR_2,
    CURVE_A,
    CURVE_B,
    DENIED,
    FIRST_UNIT_FEE,
    FIRST_UNIT_PRICE,
    FIRST_UNIT_TOTAL,
    FUNDER,
    NATIVE,
    PREMINTER,
    PRIVILEGED_CREATOR,
    PROTOCOL,
    STARTING_BALANCE,
    TOKEN,
    TOKEN_DECIMALS,
)
from tests.helpers.factories import make_config, make_market, make_pool, make_transfers

__all__ = [
    # Constants
    "BUYER",
    "BUYER_2",
    "CREATOR",
    "CREATOR_2",
    "CURVE_A",
    "CURVE_B",
    "DENIED",
    "FIRST_UNIT_FEE",
    "FIRST_UNIT_PRICE",
    "FIRST_UNIT_TOTAL",
    "FUNDER",
    "NATIVE",
    "PREMINTER",
    "PRIVILEGED_CREATOR",
    "PROTOCOL",
    "STARTING_BALANCE",
    "TOKEN",
    "TOKEN_DECIMALS",
    # Factories
    "make_config",
    "make_market",
    "make_pool",
    "make_transfers",
]
