"""Bonding-curve pricing for badge pools.

The i-th unit of a pool (1-based) costs

    (i^2 + curve_a) * coef_num * unit_scale / (curve_b * coef_den)

in the smallest unit of the payment asset. Buying or selling ``count`` units
sums that over consecutive i using the closed form for sums of squares, so no
iteration is needed and the numerator is exact.

Rounding is always in favor of the pool and the fee recipients:
- buy prices round up
- sell prices round down
- each fee rounds up on its own

Everything here is pure; callers supply the current supply.
"""

from __future__ import annotations

from dataclasses import dataclass

from badge_amm.constants import PERCENT_BASE
from badge_amm.errors import InvalidAmountError, InvalidParameterError
from badge_amm.models.pool import Pool
from badge_amm.safe_int import S, SafeInt, Underflow


@dataclass(frozen=True)
class Quote:
    """Price of a trade and the fees charged on it.

    Attributes:
        price: Curve price (gross), rounded per trade direction
        protocol_fee: Fee owed to the protocol fee recipient
        creator_fee: Fee owed to the pool creator
    """

    price: int
    protocol_fee: int
    creator_fee: int

    @property
    def total_fees(self) -> int:
        return self.protocol_fee + self.creator_fee

    @property
    def total_cost(self) -> int:
        """What a buyer pays: price plus both fees."""
        return self.price + self.total_fees

    @property
    def net_proceeds(self) -> int:
        """What a seller receives: price minus both fees.

        Raises:
            InvalidParameterError: If rounded-up fees exceed the price
        """
        try:
            return (S(self.price) - self.total_fees).value
        except Underflow as err:
            raise InvalidParameterError(
                f"Fees {self.total_fees} exceed sale price {self.price}"
            ) from err


def sum_of_squares(n: int) -> SafeInt:
    """Return 1^2 + 2^2 + ... + n^2 = n(n+1)(2n+1)/6.

    n(n+1)(2n+1) is always divisible by 6, so the division is exact.
    """
    sn = S(n)
    return (sn * (sn + 1) * (sn * 2 + 1)) // 6


def price_range(pool: Pool, from_supply: int, count: int) -> SafeInt:
    """Scaled numerator of the price of units from_supply+1 .. from_supply+count.

    Returns:
        (sum of i^2 + count * curve_a) * coef_num * unit_scale, to be divided
        by price_denominator(pool) with the caller's rounding direction.
    """
    if from_supply < 0 or count < 0:
        raise InvalidAmountError(f"Negative supply or count: {from_supply}, {count}")
    squares = sum_of_squares(from_supply + count) - sum_of_squares(from_supply)
    integral = squares + S(count) * pool.curve_a
    return integral * pool.coef_num * pool.unit_scale


def price_denominator(pool: Pool) -> SafeInt:
    return S(pool.curve_b) * pool.coef_den


def buy_price(pool: Pool, supply: int, amount: int) -> int:
    """Price of minting ``amount`` units on top of ``supply``, rounded up."""
    numerator = price_range(pool, supply, amount)
    return numerator.ceiling_div(price_denominator(pool)).to_uint256()


def sell_price(pool: Pool, supply: int, amount: int) -> int:
    """Price of burning the top ``amount`` units of ``supply``, rounded down.

    Raises:
        InvalidAmountError: If amount exceeds supply
    """
    if amount > supply:
        raise InvalidAmountError(f"Cannot sell {amount} units, supply is {supply}")
    numerator = price_range(pool, supply - amount, amount)
    return (numerator // price_denominator(pool)).to_uint256()


def fee_split(
    gross_amount: int, protocol_fee_percent: int, creator_fee_percent: int
) -> tuple[int, int]:
    """Split fees off a gross amount.

    Each fee is ceil(gross * percent / 100), computed independently from the
    same gross amount. The pair may exceed a single combined rounding by up
    to 2 units.

    Returns:
        (protocol_fee, creator_fee)
    """
    gross = S(gross_amount)
    protocol_fee = gross.mul_div_up(protocol_fee_percent, PERCENT_BASE)
    creator_fee = gross.mul_div_up(creator_fee_percent, PERCENT_BASE)
    return protocol_fee.to_uint256(), creator_fee.to_uint256()


def quote_buy(
    pool: Pool,
    supply: int,
    amount: int,
    protocol_fee_percent: int,
    creator_fee_percent: int,
) -> Quote:
    """Quote a buy of ``amount`` units at the given supply."""
    price = buy_price(pool, supply, amount)
    protocol_fee, creator_fee = fee_split(price, protocol_fee_percent, creator_fee_percent)
    return Quote(price=price, protocol_fee=protocol_fee, creator_fee=creator_fee)


def quote_sell(
    pool: Pool,
    supply: int,
    amount: int,
    protocol_fee_percent: int,
    creator_fee_percent: int,
) -> Quote:
    """Quote a sell of ``amount`` units at the given supply.

    Raises:
        InvalidAmountError: If amount exceeds supply
    """
    price = sell_price(pool, supply, amount)
    protocol_fee, creator_fee = fee_split(price, protocol_fee_percent, creator_fee_percent)
    return Quote(price=price, protocol_fee=protocol_fee, creator_fee=creator_fee)
