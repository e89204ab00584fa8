"""Tests that failed operations leave no trace and pools reject re-entry."""

import pytest

from badge_amm.adapters import MARKET_CUSTODY
from badge_amm.errors import ReentrantCallError, TransferRejectedError, UnknownPoolError
from badge_amm.models import PoolCreated, Traded
from tests.helpers import (
    BUYER,
    BUYER_2,
    CREATOR,
    CREATOR_2,
    CURVE_A,
    CURVE_B,
    FIRST_UNIT_TOTAL,
    FUNDER,
    NATIVE,
    PREMINTER,
    PROTOCOL,
    STARTING_BALANCE,
    TOKEN,
    make_market,
)


class PayoutRefused(Exception):
    pass


def refuse_payouts_to(recipient):
    def hook(asset, paid_to, amount):
        if paid_to == recipient:
            raise PayoutRefused(paid_to)

    return hook


class TestRollback:
    def test_rejected_token_transfer(self, market, token_pool):
        market.transfers.reject(TOKEN)
        events_before = len(market.events)

        with pytest.raises(TransferRejectedError):
            market.buy(BUYER, token_pool.pool_id, 1, 10**6)

        assert market.supply_of(token_pool.pool_id) == 0
        assert market.balance_of(BUYER, token_pool.pool_id) == 0
        assert token_pool.reserve_balance == 0
        assert len(market.events) == events_before

    def test_failed_fee_payout_on_buy(self, market, native_pool):
        """A refused fee payment undoes the mint, reserve and collected value."""
        market.transfers.on_pay_out = refuse_payouts_to(PROTOCOL)

        with pytest.raises(PayoutRefused):
            market.buy(BUYER, native_pool.pool_id, 1, FIRST_UNIT_TOTAL, FIRST_UNIT_TOTAL)

        assert market.supply_of(native_pool.pool_id) == 0
        assert native_pool.reserve_balance == 0
        assert market.transfers.balance_of(NATIVE, BUYER) == STARTING_BALANCE
        assert market.transfers.balance_of(NATIVE, MARKET_CUSTODY) == 0
        assert market.events.of_type(Traded) == []

    def test_failed_creator_fee_after_protocol_fee(self, market, native_pool):
        """The protocol fee already paid is clawed back too."""
        market.transfers.on_pay_out = refuse_payouts_to(native_pool.creator)

        with pytest.raises(PayoutRefused):
            market.buy(BUYER, native_pool.pool_id, 1, FIRST_UNIT_TOTAL, FIRST_UNIT_TOTAL)

        assert market.transfers.balance_of(NATIVE, PROTOCOL) == 0
        assert market.transfers.balance_of(NATIVE, BUYER) == STARTING_BALANCE

    def test_failed_proceeds_on_sell(self, market, stocked_native_pool):
        pool_id = stocked_native_pool.pool_id
        reserve = stocked_native_pool.reserve_balance
        balance = market.transfers.balance_of(NATIVE, BUYER)
        market.transfers.on_pay_out = refuse_payouts_to(BUYER)

        with pytest.raises(PayoutRefused):
            market.sell(BUYER, pool_id, 2)

        assert market.balance_of(BUYER, pool_id) == 5
        assert market.supply_of(pool_id) == 5
        assert stocked_native_pool.reserve_balance == reserve
        assert market.transfers.balance_of(NATIVE, BUYER) == balance

    def test_failed_premint_keeps_pool_closed(self, market, privileged_pool):
        market.transfers.on_pay_out = refuse_payouts_to(PROTOCOL)

        with pytest.raises(PayoutRefused):
            market.buy(PREMINTER, privileged_pool.pool_id, 1, FIRST_UNIT_TOTAL, FIRST_UNIT_TOTAL)

        assert privileged_pool.premint_settled is False
        assert isinstance(market.events.for_pool(privileged_pool.pool_id)[-1], PoolCreated)

    def test_failed_bonus_refund(self, market, stocked_native_pool):
        pool = stocked_native_pool
        snapshot = pool.snapshot()
        market.transfers.on_pay_out = refuse_payouts_to(FUNDER)

        with pytest.raises(PayoutRefused):
            market.add_bonus(FUNDER, pool.pool_id, 100, native_value=150)

        assert (pool.coef_num, pool.coef_den, pool.reserve_balance) == (
            snapshot.coef_num,
            snapshot.coef_den,
            snapshot.reserve_balance,
        )
        assert market.transfers.balance_of(NATIVE, FUNDER) == STARTING_BALANCE


class TestReentrancy:
    def test_sell_during_buy_payout_rejected(self, market, stocked_native_pool):
        """A recipient re-entering the pool it is being paid by is refused."""
        pool_id = stocked_native_pool.pool_id
        caught = []

        def reenter(asset, recipient, amount):
            if recipient != BUYER or caught:
                return
            try:
                market.sell(BUYER, pool_id, 1)
            except ReentrantCallError as err:
                caught.append(err)

        market.transfers.on_pay_out = reenter
        quote = market.quote_buy(pool_id, 1)
        market.buy(BUYER, pool_id, 1, quote.total_cost, quote.total_cost + 1)

        assert len(caught) == 1
        assert market.balance_of(BUYER, pool_id) == 6

    def test_reentrant_failure_propagates(self, market, stocked_native_pool):
        """If the recipient lets the rejection escape, the outer trade is undone."""
        pool_id = stocked_native_pool.pool_id
        reserve = stocked_native_pool.reserve_balance

        def reenter(asset, recipient, amount):
            if recipient == BUYER:
                market.sell(BUYER, pool_id, 1)

        market.transfers.on_pay_out = reenter
        with pytest.raises(ReentrantCallError):
            market.sell(BUYER, pool_id, 1)

        assert market.balance_of(BUYER, pool_id) == 5
        assert stocked_native_pool.reserve_balance == reserve

    def test_other_pool_not_blocked(self, market, stocked_native_pool):
        """Settlement on one pool does not lock out another."""
        other = market.create_pool(CREATOR_2, NATIVE, 210, 2100)
        nested = []

        def buy_elsewhere(asset, recipient, amount):
            if recipient == BUYER and not nested:
                traded = market.buy(BUYER, other.pool_id, 1, FIRST_UNIT_TOTAL, FIRST_UNIT_TOTAL)
                nested.append(traded)

        market.transfers.on_pay_out = buy_elsewhere
        market.sell(BUYER, stocked_native_pool.pool_id, 1)

        assert len(nested) == 1
        assert market.supply_of(other.pool_id) == 1
        assert market.supply_of(stocked_native_pool.pool_id) == 4


class TestPartialUndo:
    def test_spent_proceeds_do_not_block_restore(self):
        """A seller who spends its proceeds elsewhere before a fee is refused.

        Clawing the proceeds back fails, but the burned units and the
        reduced reserve are still restored and the original error surfaces.
        """
        market = make_market(bonus_funders={FUNDER, BUYER})
        pool = market.create_pool(CREATOR, NATIVE, CURVE_A, CURVE_B)
        for _ in range(5):
            quote = market.quote_buy(pool.pool_id, 1)
            market.buy(BUYER, pool.pool_id, 1, quote.total_cost, quote.total_cost)
        other = market.create_pool(CREATOR_2, NATIVE, CURVE_A, CURVE_B)
        market.buy(BUYER_2, other.pool_id, 1, FIRST_UNIT_TOTAL, FIRST_UNIT_TOTAL)
        reserve = pool.reserve_balance
        spent = []

        def spend_then_refuse(asset, paid_to, amount):
            if paid_to == PROTOCOL:
                raise PayoutRefused(paid_to)
            if paid_to == BUYER and not spent:
                balance = market.transfers.balance_of(NATIVE, BUYER)
                spent.append(market.add_bonus(BUYER, other.pool_id, balance, balance))

        market.transfers.on_pay_out = spend_then_refuse
        with pytest.raises(PayoutRefused):
            market.sell(BUYER, pool.pool_id, 1)

        assert len(spent) == 1
        assert market.transfers.balance_of(NATIVE, BUYER) == 0
        assert market.balance_of(BUYER, pool.pool_id) == 5
        assert market.supply_of(pool.pool_id) == 5
        assert pool.reserve_balance == reserve
        assert market.events.of_type(Traded)[-1].pool_id == other.pool_id


class TestPoolLocks:
    def test_unknown_pool_allocates_no_lock(self, market, native_pool):
        for pool_id in range(100, 600):
            with pytest.raises(UnknownPoolError):
                market.quote_buy(pool_id, 1)
        with pytest.raises(UnknownPoolError):
            market.set_revenue_share(999, 10)

        market.quote_buy(native_pool.pool_id, 1)
        assert list(market.settlement._pool_locks) == [native_pool.pool_id]
