"""Pydantic models for the HTTP surface of the badge market."""

from pydantic import BaseModel, Field

from badge_amm.models.types import Address, Uint256


class CreatePoolRequest(BaseModel):
    """Create a pool for ``creator``."""

    creator: Address
    payment_asset: Address = Field(alias="paymentAsset")
    curve_a: int = Field(alias="curveA", gt=0)
    curve_b: int = Field(alias="curveB", gt=0)
    revenue_share_percent: int = Field(default=0, alias="revenueSharePercent", ge=0)

    model_config = {"populate_by_name": True}


class BuyRequest(BaseModel):
    buyer: Address
    amount: Uint256
    max_cost: Uint256 = Field(alias="maxCost")
    native_value: Uint256 = Field(default="0", alias="nativeValue")

    model_config = {"populate_by_name": True}


class SellRequest(BaseModel):
    seller: Address
    amount: Uint256
    min_proceeds: Uint256 = Field(default="0", alias="minProceeds")

    model_config = {"populate_by_name": True}


class BonusRequest(BaseModel):
    funder: Address
    amount: Uint256
    native_value: Uint256 = Field(default="0", alias="nativeValue")

    model_config = {"populate_by_name": True}


class PoolResponse(BaseModel):
    """Pool state; amounts are decimal strings."""

    pool_id: int = Field(alias="poolId")
    creator: str
    payment_asset: str = Field(alias="paymentAsset")
    unit_scale: Uint256 = Field(alias="unitScale")
    curve_a: int = Field(alias="curveA")
    curve_b: int = Field(alias="curveB")
    coef_num: Uint256 = Field(alias="coefNum")
    coef_den: Uint256 = Field(alias="coefDen")
    reserve_balance: Uint256 = Field(alias="reserveBalance")
    revenue_share_percent: int = Field(alias="revenueSharePercent")
    premint_settled: bool = Field(alias="premintSettled")
    supply: Uint256

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    price: Uint256
    protocol_fee: Uint256 = Field(alias="protocolFee")
    creator_fee: Uint256 = Field(alias="creatorFee")
    total: Uint256 = Field(description="Buy: price plus fees. Sell: price minus fees.")

    model_config = {"populate_by_name": True}
