"""Tests for GateKeeper eligibility predicates."""

import pytest

from badge_amm.adapters import StaticTierOracle
from badge_amm.config import GateConfig
from badge_amm.errors import (
    AuthorizationError,
    InsufficientTierError,
    InvalidCurveConstantError,
    UnsupportedAssetError,
)
from badge_amm.gates import GateKeeper
from tests.helpers import (
    BUYER,
    CREATOR,
    DENIED,
    FUNDER,
    NATIVE,
    PREMINTER,
    PRIVILEGED_CREATOR,
    TOKEN,
    make_config,
)


def make_gatekeeper(tiers=None, **config_overrides) -> GateKeeper:
    return GateKeeper(make_config(**config_overrides), StaticTierOracle(tiers))


class TestCreateGate:
    def test_open_by_default(self):
        gatekeeper = make_gatekeeper()
        assert gatekeeper.can_create(CREATOR)
        gatekeeper.require_can_create(CREATOR)

    def test_deny_list_always_applies(self):
        gatekeeper = make_gatekeeper(deny_list={DENIED})
        assert not gatekeeper.can_create(DENIED)
        with pytest.raises(AuthorizationError):
            gatekeeper.require_can_create(DENIED)

    def test_creator_allow_list(self):
        gatekeeper = make_gatekeeper(
            gates=GateConfig(enforce_creator_allow_list=True),
            creator_allow_list={CREATOR},
        )
        assert gatekeeper.can_create(CREATOR)
        assert not gatekeeper.can_create(BUYER)
        with pytest.raises(AuthorizationError) as exc_info:
            gatekeeper.require_can_create(BUYER)
        assert not isinstance(exc_info.value, InsufficientTierError)

    def test_allow_list_ignored_when_toggle_off(self):
        gatekeeper = make_gatekeeper(creator_allow_list={CREATOR})
        assert gatekeeper.can_create(BUYER)

    def test_tier_on_create(self):
        gates = GateConfig(enforce_tier_on_create=True, min_tier_to_create=2)
        gatekeeper = make_gatekeeper(tiers={CREATOR: 2, BUYER: 1}, gates=gates)
        assert gatekeeper.can_create(CREATOR)
        assert not gatekeeper.can_create(BUYER)
        with pytest.raises(InsufficientTierError):
            gatekeeper.require_can_create(BUYER)

    def test_missing_profile_counts_as_tier_zero(self):
        gates = GateConfig(enforce_tier_on_create=True, min_tier_to_create=1)
        gatekeeper = make_gatekeeper(gates=gates)
        assert gatekeeper.tier_of(CREATOR) == 0
        with pytest.raises(InsufficientTierError):
            gatekeeper.require_can_create(CREATOR)

    def test_no_oracle_is_tier_zero(self):
        gatekeeper = GateKeeper(make_config())
        assert gatekeeper.tier_of(CREATOR) == 0


class TestTradeGate:
    def test_open_by_default(self):
        assert make_gatekeeper().can_trade(BUYER)

    def test_denied_trader(self):
        gatekeeper = make_gatekeeper(deny_list={DENIED})
        with pytest.raises(AuthorizationError):
            gatekeeper.require_can_trade(DENIED)

    def test_tier_on_trade(self):
        gates = GateConfig(enforce_tier_on_trade=True, min_tier_to_trade=3)
        gatekeeper = make_gatekeeper(tiers={BUYER: 3}, gates=gates)
        gatekeeper.require_can_trade(BUYER)
        with pytest.raises(InsufficientTierError):
            gatekeeper.require_can_trade(CREATOR)

    def test_config_changes_take_effect_immediately(self):
        """Gates read the live config on every call."""
        config = make_config()
        gatekeeper = GateKeeper(config)
        assert gatekeeper.can_trade(BUYER)
        config.set_denied(BUYER, True)
        assert not gatekeeper.can_trade(BUYER)
        config.set_denied(BUYER, False)
        assert gatekeeper.can_trade(BUYER)


class TestAssetAndCurveGates:
    def test_supported_assets(self):
        gatekeeper = make_gatekeeper()
        assert gatekeeper.is_asset_supported(NATIVE)
        assert gatekeeper.is_asset_supported(TOKEN.upper().replace("0X", "0x"))
        with pytest.raises(UnsupportedAssetError):
            gatekeeper.require_asset_supported("0x" + "ab" * 20)

    def test_asset_allow_list_toggle_off(self):
        gatekeeper = make_gatekeeper(gates=GateConfig(enforce_asset_allow_list=False))
        assert gatekeeper.is_asset_supported("0x" + "ab" * 20)

    def test_curve_constants_allow_list(self):
        gatekeeper = make_gatekeeper()
        assert gatekeeper.is_curve_constant_allowed(210, "a")
        assert gatekeeper.is_curve_constant_allowed(2100, "b")
        assert not gatekeeper.is_curve_constant_allowed(2100, "a")
        assert not gatekeeper.is_curve_constant_allowed(210, "b")

    def test_curve_constants_unconstrained_still_positive(self):
        gates = GateConfig(enforce_curve_a_constraint=False, enforce_curve_b_constraint=False)
        gatekeeper = make_gatekeeper(gates=gates)
        assert gatekeeper.is_curve_constant_allowed(1, "a")
        assert not gatekeeper.is_curve_constant_allowed(0, "a")
        assert not gatekeeper.is_curve_constant_allowed(0, "b")
        with pytest.raises(InvalidCurveConstantError):
            gatekeeper.require_curve_constants(5, 0)

    def test_unknown_curve_constant_name(self):
        with pytest.raises(InvalidCurveConstantError):
            make_gatekeeper().is_curve_constant_allowed(210, "c")


class TestRoleGates:
    def test_preminters(self):
        gatekeeper = make_gatekeeper()
        assert gatekeeper.is_preminter(PREMINTER)
        assert not gatekeeper.is_preminter(BUYER)

    def test_preminter_toggle_off(self):
        gatekeeper = make_gatekeeper(gates=GateConfig(enforce_preminter_allow_list=False))
        assert gatekeeper.is_preminter(BUYER)

    def test_bonus_funders(self):
        gatekeeper = make_gatekeeper()
        gatekeeper.require_bonus_funder(FUNDER)
        with pytest.raises(AuthorizationError):
            gatekeeper.require_bonus_funder(BUYER)

    def test_bonus_funder_toggle_off(self):
        gatekeeper = make_gatekeeper(gates=GateConfig(enforce_bonus_funder_allow_list=False))
        gatekeeper.require_bonus_funder(BUYER)

    def test_privileged_creators(self):
        gatekeeper = make_gatekeeper()
        assert gatekeeper.is_privileged_creator(PRIVILEGED_CREATOR)
        assert not gatekeeper.is_privileged_creator(CREATOR)
