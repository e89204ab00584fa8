"""API endpoints for the badge market."""

from fastapi import APIRouter, Depends, Query

from badge_amm.market import BadgeMarket, get_default_market
from badge_amm.models.events import BonusAdded, Traded, event_to_dict
from badge_amm.models.pool import Pool
from badge_amm.models.requests import (
    BonusRequest,
    BuyRequest,
    CreatePoolRequest,
    PoolResponse,
    QuoteResponse,
    SellRequest,
)
from badge_amm.pricing import Quote

router = APIRouter(prefix="/pools")


def get_market() -> BadgeMarket:
    """Dependency provider for the market instance.

    Override this in tests to inject a configured market:
        app.dependency_overrides[get_market] = lambda: market
    """
    return get_default_market()


def _pool_response(market: BadgeMarket, pool: Pool) -> PoolResponse:
    return PoolResponse(
        poolId=pool.pool_id,
        creator=pool.creator,
        paymentAsset=pool.payment_asset,
        unitScale=pool.unit_scale,
        curveA=pool.curve_a,
        curveB=pool.curve_b,
        coefNum=pool.coef_num,
        coefDen=pool.coef_den,
        reserveBalance=pool.reserve_balance,
        revenueSharePercent=pool.revenue_share_percent,
        premintSettled=pool.premint_settled,
        supply=market.supply_of(pool.pool_id),
    )


def _quote_response(quote: Quote, total: int) -> QuoteResponse:
    return QuoteResponse(
        price=quote.price,
        protocolFee=quote.protocol_fee,
        creatorFee=quote.creator_fee,
        total=total,
    )


def _record(event: Traded | BonusAdded) -> dict[str, object]:
    """Event as JSON, with amounts as decimal strings."""
    record = event_to_dict(event)
    for key, value in record.items():
        if key != "pool_id" and isinstance(value, int):
            record[key] = str(value)
    return record


@router.post("", status_code=201, response_model=PoolResponse)
def create_pool(
    request: CreatePoolRequest, market: BadgeMarket = Depends(get_market)
) -> PoolResponse:
    pool = market.create_pool(
        creator=request.creator,
        payment_asset=request.payment_asset,
        curve_a=request.curve_a,
        curve_b=request.curve_b,
        revenue_share_percent=request.revenue_share_percent,
    )
    return _pool_response(market, pool)


@router.get("/{pool_id}", response_model=PoolResponse)
def get_pool(pool_id: int, market: BadgeMarket = Depends(get_market)) -> PoolResponse:
    return _pool_response(market, market.get_pool(pool_id))


@router.get("/{pool_id}/quote/buy", response_model=QuoteResponse)
def quote_buy(
    pool_id: int,
    amount: int = Query(gt=0),
    market: BadgeMarket = Depends(get_market),
) -> QuoteResponse:
    quote = market.quote_buy(pool_id, amount)
    return _quote_response(quote, quote.total_cost)


@router.get("/{pool_id}/quote/sell", response_model=QuoteResponse)
def quote_sell(
    pool_id: int,
    amount: int = Query(gt=0),
    market: BadgeMarket = Depends(get_market),
) -> QuoteResponse:
    quote = market.quote_sell(pool_id, amount)
    return _quote_response(quote, quote.net_proceeds)


@router.post("/{pool_id}/buy")
def buy(
    pool_id: int, request: BuyRequest, market: BadgeMarket = Depends(get_market)
) -> dict[str, object]:
    traded = market.buy(
        request.buyer,
        pool_id,
        int(request.amount),
        int(request.max_cost),
        int(request.native_value),
    )
    return _record(traded)


@router.post("/{pool_id}/sell")
def sell(
    pool_id: int, request: SellRequest, market: BadgeMarket = Depends(get_market)
) -> dict[str, object]:
    traded = market.sell(request.seller, pool_id, int(request.amount), int(request.min_proceeds))
    return _record(traded)


@router.post("/{pool_id}/bonus")
def add_bonus(
    pool_id: int, request: BonusRequest, market: BadgeMarket = Depends(get_market)
) -> dict[str, object]:
    bonus = market.add_bonus(request.funder, pool_id, int(request.amount), int(request.native_value))
    return _record(bonus)
