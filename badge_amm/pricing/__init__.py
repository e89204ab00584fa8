"""Bonding-curve pricing for badge pools.

Usage:
    from badge_amm.pricing import quote_buy

    quote = quote_buy(pool, supply, amount, protocol_fee_percent=5, creator_fee_percent=5)
    total = quote.total_cost
"""

from badge_amm.pricing.engine import (
    Quote,
    buy_price,
    fee_split,
    price_denominator,
    price_range,
    quote_buy,
    quote_sell,
    sell_price,
    sum_of_squares,
)

__all__ = [
    "Quote",
    "buy_price",
    "sell_price",
    "fee_split",
    "price_range",
    "price_denominator",
    "quote_buy",
    "quote_sell",
    "sum_of_squares",
]
