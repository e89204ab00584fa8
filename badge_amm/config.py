"""Market configuration.

Two layers, both owned by the market and handed to the components that
consult them:

- GateConfig: frozen toggles deciding which GateKeeper predicates are
  enforced, plus tier thresholds. Swap a whole instance to change behavior.
- MarketConfig: the owner-managed state (fee percents, limits, allow/deny
  lists, pause flag). Setters validate their inputs; lookups are plain reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from badge_amm.constants import (
    DEFAULT_CREATOR_FEE_PERCENT,
    DEFAULT_CURVE_A_VALUES,
    DEFAULT_CURVE_B_VALUES,
    DEFAULT_MAX_REVENUE_SHARE_PERCENT,
    DEFAULT_MAX_TRADE_AMOUNT,
    DEFAULT_PROTOCOL_FEE_PERCENT,
    NATIVE_ASSET,
    PERCENT_BASE,
)
from badge_amm.errors import InvalidCurveConstantError, InvalidParameterError
from badge_amm.models.types import normalize_identity


@dataclass(frozen=True)
class GateConfig:
    """Which eligibility checks are enforced.

    A disabled check always passes. Positivity of curve constants is not a
    toggle; it is always checked.

    Attributes:
        enforce_creator_allow_list: Only allow-listed creators may create pools.
        enforce_curve_a_constraint: curve_a must be on the allow-list.
        enforce_curve_b_constraint: curve_b must be on the allow-list.
        enforce_tier_on_create: Creator tier must reach min_tier_to_create.
        enforce_tier_on_trade: Trader tier must reach min_tier_to_trade.
        enforce_asset_allow_list: Payment asset must be on the allow-list.
        enforce_preminter_allow_list: Only listed preminters may premint.
        enforce_bonus_funder_allow_list: Only listed funders may add bonuses.
    """

    enforce_creator_allow_list: bool = False
    enforce_curve_a_constraint: bool = True
    enforce_curve_b_constraint: bool = True
    enforce_tier_on_create: bool = False
    enforce_tier_on_trade: bool = False
    enforce_asset_allow_list: bool = True
    enforce_preminter_allow_list: bool = True
    enforce_bonus_funder_allow_list: bool = True

    min_tier_to_create: int = 0
    min_tier_to_trade: int = 0


DEFAULT_GATE_CONFIG = GateConfig()


@dataclass
class MarketConfig:
    """Owner-managed market state consulted on every operation."""

    protocol_fee_recipient: str = NATIVE_ASSET
    protocol_fee_percent: int = DEFAULT_PROTOCOL_FEE_PERCENT
    creator_fee_percent: int = DEFAULT_CREATOR_FEE_PERCENT
    max_trade_amount: int = DEFAULT_MAX_TRADE_AMOUNT
    max_revenue_share_percent: int = DEFAULT_MAX_REVENUE_SHARE_PERCENT
    paused: bool = False

    gates: GateConfig = DEFAULT_GATE_CONFIG

    supported_assets: set[str] = field(default_factory=lambda: {NATIVE_ASSET})
    curve_a_values: set[int] = field(default_factory=lambda: set(DEFAULT_CURVE_A_VALUES))
    curve_b_values: set[int] = field(default_factory=lambda: set(DEFAULT_CURVE_B_VALUES))
    creator_allow_list: set[str] = field(default_factory=set)
    privileged_creators: set[str] = field(default_factory=set)
    preminters: set[str] = field(default_factory=set)
    bonus_funders: set[str] = field(default_factory=set)
    deny_list: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.protocol_fee_recipient = normalize_identity(self.protocol_fee_recipient)
        self.set_fee_percents(self.protocol_fee_percent, self.creator_fee_percent)
        self.set_max_trade_amount(self.max_trade_amount)
        self.set_max_revenue_share_percent(self.max_revenue_share_percent)
        for name in (
            "supported_assets",
            "creator_allow_list",
            "privileged_creators",
            "preminters",
            "bonus_funders",
            "deny_list",
        ):
            setattr(self, name, {normalize_identity(a) for a in getattr(self, name)})
        for value in self.curve_b_values:
            if value <= 0:
                raise InvalidCurveConstantError(f"curve_b must be positive, got {value}")

    # --- Fees and limits ---

    def set_fee_percents(self, protocol_fee_percent: int, creator_fee_percent: int) -> None:
        """Set both fee percents.

        Raises:
            InvalidParameterError: If a percent is negative or their sum exceeds 100
        """
        if protocol_fee_percent < 0 or creator_fee_percent < 0:
            raise InvalidParameterError("Fee percents must be non-negative")
        if protocol_fee_percent + creator_fee_percent > PERCENT_BASE:
            raise InvalidParameterError(
                f"Total fee {protocol_fee_percent + creator_fee_percent}% exceeds {PERCENT_BASE}%"
            )
        self.protocol_fee_percent = protocol_fee_percent
        self.creator_fee_percent = creator_fee_percent

    def set_protocol_fee_recipient(self, recipient: str) -> None:
        self.protocol_fee_recipient = normalize_identity(recipient)

    def set_max_trade_amount(self, amount: int) -> None:
        if amount <= 0:
            raise InvalidParameterError(f"max_trade_amount must be positive, got {amount}")
        self.max_trade_amount = amount

    def set_max_revenue_share_percent(self, percent: int) -> None:
        if not 0 <= percent <= PERCENT_BASE:
            raise InvalidParameterError(f"max_revenue_share_percent out of range: {percent}")
        self.max_revenue_share_percent = percent

    def set_gates(self, gates: GateConfig) -> None:
        self.gates = gates

    def pause(self) -> None:
        self.paused = True

    def unpause(self) -> None:
        self.paused = False

    # --- Allow and deny lists ---

    def allow_curve_constant(self, value: int, which: str) -> None:
        """Add a curve constant to the allow-list.

        Args:
            value: Constant to allow
            which: "a" or "b"

        Raises:
            InvalidCurveConstantError: If value is not positive or which is unknown
        """
        if value <= 0:
            raise InvalidCurveConstantError(f"curve_{which} must be positive, got {value}")
        self._curve_values(which).add(value)

    def disallow_curve_constant(self, value: int, which: str) -> None:
        self._curve_values(which).discard(value)

    def _curve_values(self, which: str) -> set[int]:
        if which == "a":
            return self.curve_a_values
        if which == "b":
            return self.curve_b_values
        raise InvalidCurveConstantError(f"Unknown curve constant: {which!r}")

    def set_asset_supported(self, asset: str, supported: bool) -> None:
        _toggle(self.supported_assets, asset, supported)

    def set_creator_allowed(self, creator: str, allowed: bool) -> None:
        _toggle(self.creator_allow_list, creator, allowed)

    def set_privileged_creator(self, creator: str, privileged: bool) -> None:
        _toggle(self.privileged_creators, creator, privileged)

    def set_preminter(self, identity: str, allowed: bool) -> None:
        _toggle(self.preminters, identity, allowed)

    def set_bonus_funder(self, identity: str, allowed: bool) -> None:
        _toggle(self.bonus_funders, identity, allowed)

    def set_denied(self, identity: str, denied: bool) -> None:
        _toggle(self.deny_list, identity, denied)


def _toggle(members: set[str], identity: str, present: bool) -> None:
    key = normalize_identity(identity)
    if present:
        members.add(key)
    else:
        members.discard(key)
