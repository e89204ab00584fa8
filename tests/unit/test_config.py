"""Tests for market configuration."""

import dataclasses

import pytest

from badge_amm.config import DEFAULT_GATE_CONFIG, GateConfig, MarketConfig
from badge_amm.constants import NATIVE_ASSET
from badge_amm.errors import InvalidCurveConstantError, InvalidParameterError
from tests.helpers import BUYER, CREATOR, TOKEN


class TestDefaults:
    def test_market_defaults(self):
        config = MarketConfig()
        assert config.protocol_fee_percent == 5
        assert config.creator_fee_percent == 5
        assert config.max_trade_amount == 100
        assert config.max_revenue_share_percent == 50
        assert config.supported_assets == {NATIVE_ASSET}
        assert config.curve_a_values == {210}
        assert config.curve_b_values == {2100}
        assert config.paused is False

    def test_gate_defaults(self):
        gates = DEFAULT_GATE_CONFIG
        assert gates.enforce_curve_a_constraint
        assert gates.enforce_curve_b_constraint
        assert gates.enforce_asset_allow_list
        assert not gates.enforce_creator_allow_list
        assert not gates.enforce_tier_on_create
        assert not gates.enforce_tier_on_trade

    def test_gate_config_is_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_GATE_CONFIG.enforce_asset_allow_list = False  # type: ignore[misc]

    def test_identities_normalized_on_construction(self):
        config = MarketConfig(deny_list={BUYER.upper().replace("0X", "0x")})
        assert config.deny_list == {BUYER}

    def test_default_curve_sets_are_independent(self):
        first, second = MarketConfig(), MarketConfig()
        first.allow_curve_constant(7, "a")
        assert 7 not in second.curve_a_values


class TestFees:
    def test_set_fee_percents(self):
        config = MarketConfig()
        config.set_fee_percents(3, 7)
        assert (config.protocol_fee_percent, config.creator_fee_percent) == (3, 7)

    def test_total_fee_capped(self):
        config = MarketConfig()
        config.set_fee_percents(60, 40)
        with pytest.raises(InvalidParameterError):
            config.set_fee_percents(60, 41)
        assert (config.protocol_fee_percent, config.creator_fee_percent) == (60, 40)

    def test_negative_fee_rejected(self):
        with pytest.raises(InvalidParameterError):
            MarketConfig(protocol_fee_percent=-1)


class TestLimits:
    def test_max_trade_amount_positive(self):
        with pytest.raises(InvalidParameterError):
            MarketConfig(max_trade_amount=0)

    def test_revenue_share_ceiling_range(self):
        config = MarketConfig()
        config.set_max_revenue_share_percent(100)
        with pytest.raises(InvalidParameterError):
            config.set_max_revenue_share_percent(101)

    def test_pause_and_unpause(self):
        config = MarketConfig()
        config.pause()
        assert config.paused
        config.unpause()
        assert not config.paused

    def test_set_gates(self):
        config = MarketConfig()
        config.set_gates(GateConfig(enforce_tier_on_trade=True, min_tier_to_trade=2))
        assert config.gates.min_tier_to_trade == 2


class TestCurveConstants:
    def test_allow_and_disallow(self):
        config = MarketConfig()
        config.allow_curve_constant(500, "b")
        assert 500 in config.curve_b_values
        config.disallow_curve_constant(500, "b")
        assert 500 not in config.curve_b_values

    def test_non_positive_constant_rejected(self):
        with pytest.raises(InvalidCurveConstantError):
            MarketConfig().allow_curve_constant(0, "a")

    def test_zero_curve_b_in_constructor_rejected(self):
        with pytest.raises(InvalidCurveConstantError):
            MarketConfig(curve_b_values={0, 2100})

    def test_unknown_constant_name(self):
        with pytest.raises(InvalidCurveConstantError):
            MarketConfig().allow_curve_constant(1, "x")


class TestMembership:
    def test_toggles(self):
        config = MarketConfig()
        config.set_asset_supported(TOKEN, True)
        config.set_creator_allowed(CREATOR, True)
        config.set_preminter(BUYER, True)
        assert TOKEN in config.supported_assets
        assert CREATOR in config.creator_allow_list
        assert BUYER in config.preminters

        config.set_asset_supported(TOKEN, False)
        config.set_preminter(BUYER, False)
        assert TOKEN not in config.supported_assets
        assert BUYER not in config.preminters

    def test_removing_absent_member_is_noop(self):
        config = MarketConfig()
        config.set_denied(BUYER, False)
        assert config.deny_list == set()

    def test_protocol_fee_recipient_normalized(self):
        config = MarketConfig()
        config.set_protocol_fee_recipient(CREATOR.upper().replace("0X", "0x"))
        assert config.protocol_fee_recipient == CREATOR
