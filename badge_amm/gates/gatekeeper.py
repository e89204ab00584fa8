"""Eligibility checks consulted before any mutation.

GateKeeper is a read-only view over MarketConfig plus the tier oracle. Each
predicate is governed by its own toggle in GateConfig and passes
unconditionally when that toggle is off. The ``require_*`` helpers raise
the matching error instead of returning False.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from badge_amm.errors import (
    AuthorizationError,
    InsufficientTierError,
    InvalidCurveConstantError,
    NoProfileError,
    UnsupportedAssetError,
)
from badge_amm.models.types import normalize_identity

if TYPE_CHECKING:
    from badge_amm.config import MarketConfig
    from badge_amm.interfaces import TierOracle

logger = structlog.get_logger()


class GateKeeper:
    """Allow-list, deny-list and tier predicates.

    Args:
        config: Market configuration (read on every call, never cached)
        tier_oracle: Oracle used when a tier check is enforced
    """

    def __init__(self, config: MarketConfig, tier_oracle: TierOracle | None = None) -> None:
        self.config = config
        self.tier_oracle = tier_oracle

    # --- Predicates ---

    def is_denied(self, identity: str) -> bool:
        return normalize_identity(identity) in self.config.deny_list

    def can_create(self, creator: str) -> bool:
        """Creator is not denied, is allow-listed and reaches the creation tier."""
        gates = self.config.gates
        creator = normalize_identity(creator)
        if self.is_denied(creator):
            return False
        if gates.enforce_creator_allow_list and creator not in self.config.creator_allow_list:
            return False
        if gates.enforce_tier_on_create and self.tier_of(creator) < gates.min_tier_to_create:
            return False
        return True

    def can_trade(self, user: str) -> bool:
        """User is not denied and reaches the trading tier."""
        gates = self.config.gates
        if self.is_denied(user):
            return False
        if gates.enforce_tier_on_trade and self.tier_of(user) < gates.min_tier_to_trade:
            return False
        return True

    def is_asset_supported(self, asset: str) -> bool:
        if not self.config.gates.enforce_asset_allow_list:
            return True
        return normalize_identity(asset) in self.config.supported_assets

    def is_curve_constant_allowed(self, value: int, which: str) -> bool:
        """Check a curve constant ("a" or "b").

        Positivity is always required; allow-list membership only when the
        matching constraint is enforced.
        """
        if value <= 0:
            return False
        gates = self.config.gates
        if which == "a":
            return not gates.enforce_curve_a_constraint or value in self.config.curve_a_values
        if which == "b":
            return not gates.enforce_curve_b_constraint or value in self.config.curve_b_values
        raise InvalidCurveConstantError(f"Unknown curve constant: {which!r}")

    def is_preminter(self, identity: str) -> bool:
        if not self.config.gates.enforce_preminter_allow_list:
            return True
        return normalize_identity(identity) in self.config.preminters

    def is_bonus_funder(self, identity: str) -> bool:
        if not self.config.gates.enforce_bonus_funder_allow_list:
            return True
        return normalize_identity(identity) in self.config.bonus_funders

    def is_privileged_creator(self, creator: str) -> bool:
        """Privileged creators' pools need a premint before public trading."""
        return normalize_identity(creator) in self.config.privileged_creators

    def tier_of(self, user: str) -> int:
        """Tier level from the oracle; users without a profile are tier 0."""
        if self.tier_oracle is None:
            return 0
        try:
            return self.tier_oracle.tier_of(user)
        except NoProfileError:
            logger.debug("tier_profile_missing", user=normalize_identity(user)[-8:])
            return 0

    # --- Raising variants ---

    def require_can_create(self, creator: str) -> None:
        if self.is_denied(creator):
            raise AuthorizationError(f"Creator {creator} is deny-listed")
        gates = self.config.gates
        if (
            gates.enforce_creator_allow_list
            and normalize_identity(creator) not in self.config.creator_allow_list
        ):
            raise AuthorizationError(f"Creator {creator} is not on the allow-list")
        if not self.can_create(creator):
            raise InsufficientTierError(
                f"Creator {creator} is below tier {gates.min_tier_to_create}"
            )

    def require_can_trade(self, user: str) -> None:
        if self.is_denied(user):
            raise AuthorizationError(f"User {user} is deny-listed")
        if not self.can_trade(user):
            raise InsufficientTierError(
                f"User {user} is below tier {self.config.gates.min_tier_to_trade}"
            )

    def require_asset_supported(self, asset: str) -> None:
        if not self.is_asset_supported(asset):
            raise UnsupportedAssetError(f"Payment asset {asset} is not supported")

    def require_curve_constants(self, curve_a: int, curve_b: int) -> None:
        if not self.is_curve_constant_allowed(curve_a, "a"):
            raise InvalidCurveConstantError(f"curve_a {curve_a} is not allowed")
        if not self.is_curve_constant_allowed(curve_b, "b"):
            raise InvalidCurveConstantError(f"curve_b {curve_b} is not allowed")

    def require_bonus_funder(self, identity: str) -> None:
        if not self.is_bonus_funder(identity):
            raise AuthorizationError(f"{identity} is not an authorized bonus funder")
