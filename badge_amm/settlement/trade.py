"""Trade settlement: buy, sell and bonus injection.

Each operation runs as one unit under its pool's lock:

1. validate (pause, amount bounds, pool, premint, gates)
2. quote via badge_amm.pricing at the ledger's current supply
3. enforce the caller's slippage bound and payment rules
4. mutate internal state: ledger mint/burn, then pool reserve
5. move value through the ValueTransfer collaborator
6. record the event

Internal state is fully updated before any outbound transfer, and a pool
that is mid-settlement rejects re-entry with ReentrantCallError. If any
step raises, every change made so far is undone before the error
propagates, so a failed operation leaves no trace.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog

from badge_amm.constants import NATIVE_ASSET
from badge_amm.errors import (
    InsufficientFundsError,
    InvalidAmountError,
    InvalidParameterError,
    PausedError,
    PremintRequiredError,
    ReentrantCallError,
    SlippageExceededError,
)
from badge_amm.models.events import (
    BonusAdded,
    EventLog,
    MarketEvent,
    PremintSettled,
    Traded,
    TradeDirection,
)
from badge_amm.models.types import normalize_identity
from badge_amm.pricing import Quote, quote_buy, quote_sell

if TYPE_CHECKING:
    from badge_amm.config import MarketConfig
    from badge_amm.gates import GateKeeper
    from badge_amm.interfaces import Ledger, ValueTransfer
    from badge_amm.models.pool import Pool
    from badge_amm.pools import PoolRegistry

logger = structlog.get_logger()


class _Journal:
    """Undo steps of an in-progress operation, replayed newest first."""

    def __init__(self) -> None:
        self._undo: list[Callable[[], None]] = []
        self.events: list[MarketEvent] = []

    def record(self, undo: Callable[[], None]) -> None:
        self._undo.append(undo)

    def rollback(self) -> list[Exception]:
        """Run every undo step, newest first, even if some of them fail.

        Returns:
            Errors raised by the steps that failed
        """
        failures: list[Exception] = []
        while self._undo:
            undo = self._undo.pop()
            try:
                undo()
            except Exception as err:
                failures.append(err)
        self.events.clear()
        return failures


class TradeSettlement:
    """Orchestrates buys, sells and bonuses against the pool registry.

    Args:
        config: Market configuration (fees, limits, pause flag)
        registry: Pool registry owning pool state
        gatekeeper: Eligibility checks
        ledger: Unit ledger (single source of supply)
        transfers: Payment-asset transfer collaborator
        events: Log receiving the record of every successful operation
    """

    def __init__(
        self,
        config: MarketConfig,
        registry: PoolRegistry,
        gatekeeper: GateKeeper,
        ledger: Ledger,
        transfers: ValueTransfer,
        events: EventLog,
    ) -> None:
        self.config = config
        self.registry = registry
        self.gatekeeper = gatekeeper
        self.ledger = ledger
        self.transfers = transfers
        self.events = events
        self._pool_locks: dict[int, threading.RLock] = {}
        self._pool_locks_guard = threading.Lock()
        self._in_flight: set[int] = set()

    # --- Serialization ---

    def pool_lock(self, pool_id: int) -> threading.RLock:
        """Lock serializing every quote and settlement on one pool.

        Raises:
            UnknownPoolError: If no pool has this id
        """
        self.registry.get(pool_id)
        with self._pool_locks_guard:
            lock = self._pool_locks.get(pool_id)
            if lock is None:
                lock = self._pool_locks[pool_id] = threading.RLock()
            return lock

    @contextmanager
    def _settling(self, pool_id: int) -> Iterator[None]:
        with self.pool_lock(pool_id):
            if pool_id in self._in_flight:
                raise ReentrantCallError(f"Pool {pool_id} is already settling")
            self._in_flight.add(pool_id)
            try:
                yield
            finally:
                self._in_flight.discard(pool_id)

    # --- Quotes ---

    def quote_buy(self, pool_id: int, amount: int) -> Quote:
        """Quote buying ``amount`` units at the current supply (read-only)."""
        with self.pool_lock(pool_id):
            pool = self.registry.get(pool_id)
            return self._quote_buy(pool, amount)

    def quote_sell(self, pool_id: int, amount: int) -> Quote:
        """Quote selling ``amount`` units at the current supply (read-only)."""
        with self.pool_lock(pool_id):
            pool = self.registry.get(pool_id)
            return self._quote_sell(pool, amount)

    def _quote_buy(self, pool: Pool, amount: int) -> Quote:
        return quote_buy(
            pool,
            self.ledger.total_supply(pool.pool_id),
            amount,
            self.config.protocol_fee_percent,
            self.config.creator_fee_percent,
        )

    def _quote_sell(self, pool: Pool, amount: int) -> Quote:
        return quote_sell(
            pool,
            self.ledger.total_supply(pool.pool_id),
            amount,
            self.config.protocol_fee_percent,
            self.config.creator_fee_percent,
        )

    # --- Operations ---

    def buy(
        self,
        buyer: str,
        pool_id: int,
        amount: int,
        max_cost: int,
        native_value: int = 0,
    ) -> Traded:
        """Mint ``amount`` units to the buyer.

        Args:
            buyer: Identity paying and receiving units
            pool_id: Pool to buy from
            amount: Units to buy
            max_cost: Most the buyer accepts to pay (price + fees)
            native_value: Native value attached; must be 0 for fungible pools.
                Any excess over price + fees is refunded.

        Raises:
            PausedError, InvalidAmountError, UnknownPoolError,
            PremintRequiredError, AuthorizationError, SlippageExceededError,
            InsufficientFundsError, InvalidParameterError, TransferRejectedError
        """
        buyer = normalize_identity(buyer)
        self.require_not_paused()
        self._require_trade_amount(amount)

        with self._settling(pool_id):
            pool = self.registry.get(pool_id)
            premint = False
            if not pool.premint_settled:
                if not self.gatekeeper.is_preminter(buyer):
                    raise PremintRequiredError(
                        f"Pool {pool_id} must be preminted before public trading"
                    )
                premint = True
            self.gatekeeper.require_can_trade(buyer)

            quote = self._quote_buy(pool, amount)
            if quote.total_cost > max_cost:
                raise SlippageExceededError(
                    f"Buy cost {quote.total_cost} exceeds max {max_cost}"
                )
            self._require_payment(pool, quote.total_cost, native_value)

            journal = _Journal()
            snapshot = pool.snapshot()
            try:
                self.ledger.mint(buyer, pool_id, amount)
                journal.record(lambda: self.ledger.burn(buyer, pool_id, amount))

                journal.record(lambda: self.registry.restore(snapshot))
                if premint and self.registry.mark_premint_settled(pool_id):
                    journal.events.append(PremintSettled(pool_id=pool_id, preminter=buyer))
                new_reserve = self.registry.settle_buy(pool_id, quote.price)

                if pool.payment_asset == NATIVE_ASSET:
                    self._collect(journal, NATIVE_ASSET, buyer, native_value)
                    self._pay_out(journal, NATIVE_ASSET, buyer, native_value - quote.total_cost)
                else:
                    self._collect(journal, pool.payment_asset, buyer, quote.total_cost)
                self._pay_fees(journal, pool, quote)
            except Exception:
                self._roll_back(journal, "buy_rolled_back", pool_id=pool_id, actor=buyer[-8:])
                raise

            traded = Traded(
                pool_id=pool_id,
                actor=buyer,
                direction=TradeDirection.BUY,
                amount=amount,
                gross=quote.price,
                net=quote.total_cost,
                protocol_fee=quote.protocol_fee,
                creator_fee=quote.creator_fee,
                new_reserve=new_reserve,
                new_supply=self.ledger.total_supply(pool_id),
            )
            journal.events.append(traded)
            self._commit(journal)
            return traded

    def sell(self, seller: str, pool_id: int, amount: int, min_proceeds: int) -> Traded:
        """Burn ``amount`` of the seller's units and pay out the proceeds.

        Units are burned and the reserve reduced before anything is paid,
        so a re-entrant sale of the same units cannot succeed.

        Raises:
            PausedError, InvalidAmountError, UnknownPoolError,
            AuthorizationError, InsufficientFundsError, SlippageExceededError,
            TransferRejectedError
        """
        seller = normalize_identity(seller)
        self.require_not_paused()
        self._require_trade_amount(amount)

        with self._settling(pool_id):
            pool = self.registry.get(pool_id)
            self.gatekeeper.require_can_trade(seller)

            held = self.ledger.balance_of(seller, pool_id)
            if held < amount:
                raise InsufficientFundsError(
                    f"Seller holds {held} units of pool {pool_id}, cannot sell {amount}"
                )

            quote = self._quote_sell(pool, amount)
            proceeds = quote.net_proceeds
            if proceeds < min_proceeds:
                raise SlippageExceededError(f"Sell proceeds {proceeds} below min {min_proceeds}")

            journal = _Journal()
            snapshot = pool.snapshot()
            try:
                self.ledger.burn(seller, pool_id, amount)
                journal.record(lambda: self.ledger.mint(seller, pool_id, amount))

                journal.record(lambda: self.registry.restore(snapshot))
                new_reserve = self.registry.settle_sell(pool_id, quote.price)

                self._pay_out(journal, pool.payment_asset, seller, proceeds)
                self._pay_fees(journal, pool, quote)
            except Exception:
                self._roll_back(journal, "sell_rolled_back", pool_id=pool_id, actor=seller[-8:])
                raise

            traded = Traded(
                pool_id=pool_id,
                actor=seller,
                direction=TradeDirection.SELL,
                amount=amount,
                gross=quote.price,
                net=proceeds,
                protocol_fee=quote.protocol_fee,
                creator_fee=quote.creator_fee,
                new_reserve=new_reserve,
                new_supply=self.ledger.total_supply(pool_id),
            )
            journal.events.append(traded)
            self._commit(journal)
            return traded

    def add_bonus(
        self,
        funder: str,
        pool_id: int,
        amount: int,
        native_value: int = 0,
    ) -> BonusAdded:
        """Inject bonus funds into a pool's reserve, rescaling its curve.

        Raises:
            PausedError, InvalidAmountError, UnknownPoolError,
            AuthorizationError, EmptyReserveError, InsufficientFundsError,
            InvalidParameterError, TransferRejectedError
        """
        funder = normalize_identity(funder)
        self.require_not_paused()
        if amount <= 0:
            raise InvalidAmountError(f"Bonus amount must be positive, got {amount}")

        with self._settling(pool_id):
            pool = self.registry.get(pool_id)
            self.gatekeeper.require_bonus_funder(funder)
            self._require_payment(pool, amount, native_value)

            journal = _Journal()
            snapshot = pool.snapshot()
            try:
                self.registry.inject_bonus(pool_id, amount)
                journal.record(lambda: self.registry.restore(snapshot))

                if pool.payment_asset == NATIVE_ASSET:
                    self._collect(journal, NATIVE_ASSET, funder, native_value)
                    self._pay_out(journal, NATIVE_ASSET, funder, native_value - amount)
                else:
                    self._collect(journal, pool.payment_asset, funder, amount)
            except Exception:
                self._roll_back(journal, "bonus_rolled_back", pool_id=pool_id, actor=funder[-8:])
                raise

            bonus = BonusAdded(
                pool_id=pool_id,
                funder=funder,
                amount=amount,
                new_reserve=pool.reserve_balance,
                coef_num=pool.coef_num,
                coef_den=pool.coef_den,
            )
            journal.events.append(bonus)
            self._commit(journal)
            return bonus

    # --- Helpers ---

    def require_not_paused(self) -> None:
        if self.config.paused:
            raise PausedError("Market is paused")

    def _require_trade_amount(self, amount: int) -> None:
        if amount <= 0:
            raise InvalidAmountError(f"Trade amount must be positive, got {amount}")
        if amount > self.config.max_trade_amount:
            raise InvalidAmountError(
                f"Trade amount {amount} exceeds max {self.config.max_trade_amount}"
            )

    def _require_payment(self, pool: Pool, due: int, native_value: int) -> None:
        """Check attached native value against what the operation costs."""
        if native_value < 0:
            raise InvalidParameterError(f"Native value cannot be negative: {native_value}")
        if pool.payment_asset == NATIVE_ASSET:
            if native_value < due:
                raise InsufficientFundsError(f"Attached {native_value}, operation costs {due}")
        elif native_value != 0:
            raise InvalidParameterError(
                f"Pool {pool.pool_id} is paid in {pool.payment_asset}, native value must be 0"
            )

    def _collect(self, journal: _Journal, asset: str, payer: str, amount: int) -> None:
        if amount == 0:
            return
        self.transfers.collect(asset, payer, amount)
        journal.record(lambda: self.transfers.refund(asset, payer, amount))

    def _pay_out(self, journal: _Journal, asset: str, recipient: str, amount: int) -> None:
        if amount == 0:
            return
        self.transfers.pay_out(asset, recipient, amount)
        journal.record(lambda: self.transfers.reclaim(asset, recipient, amount))

    def _pay_fees(self, journal: _Journal, pool: Pool, quote: Quote) -> None:
        self._pay_out(
            journal, pool.payment_asset, self.config.protocol_fee_recipient, quote.protocol_fee
        )
        self._pay_out(journal, pool.payment_asset, pool.creator, quote.creator_fee)

    def _roll_back(self, journal: _Journal, event: str, **context: object) -> None:
        """Undo a failed operation; the caller re-raises the original error."""
        failures = journal.rollback()
        logger.warning(event, undo_failures=len(failures), **context)
        for failure in failures:
            logger.error(
                "undo_step_failed",
                error=str(failure),
                error_type=type(failure).__name__,
                **context,
            )

    def _commit(self, journal: _Journal) -> None:
        for event in journal.events:
            self.events.append(event)
            if isinstance(event, Traded):
                logger.info(
                    "trade_settled",
                    pool_id=event.pool_id,
                    actor=event.actor[-8:],
                    direction=event.direction.value,
                    amount=event.amount,
                    gross=event.gross,
                    net=event.net,
                    fees=event.total_fees,
                    new_reserve=event.new_reserve,
                )
            elif isinstance(event, BonusAdded):
                logger.info(
                    "bonus_added",
                    pool_id=event.pool_id,
                    funder=event.funder[-8:],
                    amount=event.amount,
                    coef_num=event.coef_num,
                    coef_den=event.coef_den,
                )
            else:
                logger.info("premint_settled", pool_id=event.pool_id)

