"""Pytest configuration and fixtures."""

import pytest

from badge_amm.market import BadgeMarket
from badge_amm.models.pool import Pool
from tests.helpers import (
    BUYER,
    CREATOR,
    CURVE_A,
    CURVE_B,
    NATIVE,
    PRIVILEGED_CREATOR,
    TOKEN,
    make_market,
)


@pytest.fixture
def market() -> BadgeMarket:
    """A market with default config and funded test identities."""
    return make_market()


@pytest.fixture
def native_pool(market: BadgeMarket) -> Pool:
    """A native-asset pool on the standard curve, open to public trading."""
    return market.create_pool(CREATOR, NATIVE, CURVE_A, CURVE_B)


@pytest.fixture
def token_pool(market: BadgeMarket) -> Pool:
    """A 6-decimal token pool on the standard curve."""
    return market.create_pool(CREATOR, TOKEN, CURVE_A, CURVE_B)


@pytest.fixture
def privileged_pool(market: BadgeMarket) -> Pool:
    """A pool whose creator is privileged, so it awaits a premint."""
    return market.create_pool(PRIVILEGED_CREATOR, NATIVE, CURVE_A, CURVE_B)


@pytest.fixture
def stocked_native_pool(market: BadgeMarket, native_pool: Pool) -> Pool:
    """Native pool where BUYER has bought 5 units one at a time."""
    for _ in range(5):
        quote = market.quote_buy(native_pool.pool_id, 1)
        market.buy(BUYER, native_pool.pool_id, 1, quote.total_cost, native_value=quote.total_cost)
    return native_pool
