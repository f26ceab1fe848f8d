"""Tests for CriteriaEvaluator.

Covers the rule order, per-rule defaults for unknown data, the soft
symbol-length warning and the policy description.
"""

from dataclasses import replace

import pytest

from sniper.config import CriteriaSettings
from sniper.criteria import rules
from sniper.criteria.evaluator import CriteriaEvaluator
from sniper.models import Candidate, Overview, SecurityProfile


@pytest.fixture
def evaluator(criteria_settings: CriteriaSettings) -> CriteriaEvaluator:
    return CriteriaEvaluator(criteria_settings)


class TestAcceptance:
    """End-to-end verdicts for realistic snapshots."""

    def test_reference_token_is_accepted(
        self,
        evaluator: CriteriaEvaluator,
        good_candidate: Candidate,
        good_overview: Overview,
        good_security: SecurityProfile,
        now: float,
    ) -> None:
        verdict = evaluator.evaluate(good_candidate, good_overview, good_security, now=now)
        assert verdict.accepted is True
        assert verdict.fail_reason is None
        assert verdict.warnings == ()

    def test_low_liquidity_rejected_by_liquidity_rule(
        self,
        evaluator: CriteriaEvaluator,
        good_candidate: Candidate,
        good_overview: Overview,
        good_security: SecurityProfile,
        now: float,
    ) -> None:
        overview = replace(good_overview, liquidity=1_000)
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.accepted is False
        assert verdict.fail_reason == rules.LIQUIDITY

    def test_default_now_uses_wall_clock(
        self,
        evaluator: CriteriaEvaluator,
        good_candidate: Candidate,
        good_security: SecurityProfile,
    ) -> None:
        # Traded at the fixed test instant, long in the past for the real clock
        overview = Overview(
            market_cap=200_000,
            volume_24h=5_000,
            liquidity=8_000,
            last_trade_time=1_700_000_000.0,
        )
        verdict = evaluator.evaluate(good_candidate, overview, good_security)
        assert verdict.fail_reason == rules.FRESHNESS


class TestFreshness:
    """Exactly one freshness sub-check applies, chosen by data availability."""

    def test_created_time_recent_passes(
        self, evaluator, good_candidate, good_security, now
    ) -> None:
        overview = Overview(
            market_cap=200_000, volume_24h=5_000, liquidity=8_000,
            created_time=now - 120,
        )
        assert evaluator.evaluate(good_candidate, overview, good_security, now=now).accepted

    def test_created_time_too_old_rejects(
        self, evaluator, good_candidate, good_security, now
    ) -> None:
        overview = Overview(
            market_cap=200_000, volume_24h=5_000, liquidity=8_000,
            created_time=now - 301,
        )
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.fail_reason == rules.FRESHNESS

    def test_created_time_takes_precedence_over_last_trade(
        self, evaluator, good_candidate, good_security, now
    ) -> None:
        # Old creation wins even though the last trade is recent
        overview = Overview(
            market_cap=200_000, volume_24h=5_000, liquidity=8_000,
            created_time=now - 3_600, last_trade_time=now - 10,
        )
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.fail_reason == rules.FRESHNESS

    def test_stale_last_trade_rejects(
        self, evaluator, good_candidate, good_security, now
    ) -> None:
        overview = Overview(
            market_cap=200_000, volume_24h=5_000, liquidity=8_000,
            last_trade_time=now - 600,
        )
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.fail_reason == rules.FRESHNESS

    def test_exactly_five_minutes_is_still_fresh(
        self, evaluator, good_candidate, good_security, now
    ) -> None:
        overview = Overview(
            market_cap=200_000, volume_24h=5_000, liquidity=8_000,
            last_trade_time=now - 300,
        )
        assert evaluator.evaluate(good_candidate, overview, good_security, now=now).accepted

    def test_no_timing_small_market_cap_passes_freshness(
        self, evaluator, good_candidate, good_security, now
    ) -> None:
        overview = Overview(market_cap=50_000, volume_24h=5_000, liquidity=8_000)
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.accepted is True

    def test_no_timing_larger_market_cap_fails_freshness(
        self, evaluator, good_candidate, good_security, now
    ) -> None:
        overview = Overview(market_cap=500_000, volume_24h=5_000, liquidity=8_000)
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.fail_reason == rules.FRESHNESS

    def test_no_timing_and_no_market_cap_fails_freshness(
        self, evaluator, good_candidate, good_security, now
    ) -> None:
        overview = Overview(volume_24h=5_000, liquidity=8_000)
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.fail_reason == rules.FRESHNESS

    def test_empty_overview_fails_freshness_first(
        self, evaluator, good_candidate, good_security, now
    ) -> None:
        verdict = evaluator.evaluate(good_candidate, Overview.empty(), good_security, now=now)
        assert verdict.fail_reason == rules.FRESHNESS


class TestMarketRules:
    """Market cap ceiling, activity floor and liquidity floor."""

    @pytest.mark.parametrize("market_cap", [10_000_001, 25_000_000, 1e12])
    def test_market_cap_above_ceiling_rejects(
        self, evaluator, good_candidate, good_overview, good_security, now, market_cap
    ) -> None:
        overview = replace(good_overview, market_cap=market_cap)
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.accepted is False
        assert verdict.fail_reason == rules.MARKET_CAP

    def test_market_cap_at_ceiling_passes(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        overview = replace(good_overview, market_cap=10_000_000)
        assert evaluator.evaluate(good_candidate, overview, good_security, now=now).accepted

    def test_unknown_market_cap_passes_ceiling_when_timing_known(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        overview = replace(good_overview, market_cap=None)
        assert evaluator.evaluate(good_candidate, overview, good_security, now=now).accepted

    def test_unknown_volume_rejects(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        overview = replace(good_overview, volume_24h=None)
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.fail_reason == rules.ACTIVITY

    def test_low_volume_rejects(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        overview = replace(good_overview, volume_24h=999)
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.fail_reason == rules.ACTIVITY

    def test_unknown_liquidity_defaults_to_zero(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        overview = replace(good_overview, liquidity=None)
        verdict = evaluator.evaluate(good_candidate, overview, good_security, now=now)
        assert verdict.fail_reason == rules.LIQUIDITY


class TestSecurityRules:
    """Security presence, authorities, taxes and holder concentration."""

    def test_empty_security_always_rejected(
        self, evaluator, good_candidate, good_overview, now
    ) -> None:
        verdict = evaluator.evaluate(
            good_candidate, good_overview, SecurityProfile.empty(), now=now
        )
        assert verdict.accepted is False
        assert verdict.fail_reason == rules.SECURITY_DATA

    def test_profile_with_only_unknown_fields_but_payload_is_not_empty(
        self, evaluator, good_candidate, good_overview, now
    ) -> None:
        security = SecurityProfile.from_payload({"isToken2022": False})
        verdict = evaluator.evaluate(good_candidate, good_overview, security, now=now)
        assert verdict.accepted is True

    def test_mint_authority_rejects(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        security = replace(good_security, mint_authority_active=True)
        verdict = evaluator.evaluate(good_candidate, good_overview, security, now=now)
        assert verdict.fail_reason == rules.AUTHORITY

    def test_freeze_authority_rejects(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        security = replace(good_security, freeze_authority_active=True)
        verdict = evaluator.evaluate(good_candidate, good_overview, security, now=now)
        assert verdict.fail_reason == rules.AUTHORITY

    def test_unknown_authorities_pass(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        security = replace(
            good_security, mint_authority_active=None, freeze_authority_active=None
        )
        assert evaluator.evaluate(good_candidate, good_overview, security, now=now).accepted

    @pytest.mark.parametrize("field", ["buy_tax_pct", "sell_tax_pct"])
    def test_tax_at_limit_rejects(
        self, evaluator, good_candidate, good_overview, good_security, now, field
    ) -> None:
        security = replace(good_security, **{field: 10})
        verdict = evaluator.evaluate(good_candidate, good_overview, security, now=now)
        assert verdict.fail_reason == rules.TAX

    def test_unknown_taxes_default_to_zero(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        security = replace(good_security, buy_tax_pct=None, sell_tax_pct=None)
        assert evaluator.evaluate(good_candidate, good_overview, security, now=now).accepted

    def test_whale_concentration_rejects(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        security = replace(good_security, top_holder_pct=20.5)
        verdict = evaluator.evaluate(good_candidate, good_overview, security, now=now)
        assert verdict.fail_reason == rules.HOLDER_CONCENTRATION

    def test_creator_balance_rejects(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        security = replace(good_security, creator_balance_pct=31)
        verdict = evaluator.evaluate(good_candidate, good_overview, security, now=now)
        assert verdict.fail_reason == rules.HOLDER_CONCENTRATION

    def test_unknown_holder_data_passes(
        self, evaluator, good_candidate, good_overview, good_security, now
    ) -> None:
        security = replace(good_security, top_holder_pct=None, creator_balance_pct=None)
        assert evaluator.evaluate(good_candidate, good_overview, security, now=now).accepted


class TestTokenomicsRules:
    """Name/symbol validity, supply ceiling, symbol length and denylist."""

    @pytest.mark.parametrize(
        ("name", "symbol"),
        [
            ("", "ABCX"),
            ("Foo", ""),
            ("Foo?", "ABCX"),
            ("Unknown Token", "ABCX"),
            ("Foo", "UNKNOWN"),
            ("Foo", "AB?C"),
            ("Foo", "ABCDEFGHIJK"),
        ],
    )
    def test_invalid_name_or_symbol_rejects(
        self, evaluator, good_overview, good_security, now, name, symbol
    ) -> None:
        candidate = Candidate(address="X1", name=name, symbol=symbol)
        verdict = evaluator.evaluate(candidate, good_overview, good_security, now=now)
        assert verdict.fail_reason == rules.NAME_SYMBOL

    def test_supply_above_ceiling_rejects(
        self, evaluator, good_overview, good_security, now
    ) -> None:
        candidate = Candidate(address="X1", name="Foo", symbol="ABCX", supply=2e9)
        verdict = evaluator.evaluate(candidate, good_overview, good_security, now=now)
        assert verdict.fail_reason == rules.SUPPLY

    def test_supply_unknown_passes(
        self, evaluator, good_overview, good_security, now
    ) -> None:
        candidate = Candidate(address="X1", name="Foo", symbol="ABCX", supply=None)
        assert evaluator.evaluate(candidate, good_overview, good_security, now=now).accepted

    @pytest.mark.parametrize("symbol", ["AB", "ABCDEFGH"])
    def test_non_preferred_symbol_length_only_warns(
        self, evaluator, good_overview, good_security, now, symbol
    ) -> None:
        candidate = Candidate(address="X1", name="Foo", symbol=symbol)
        verdict = evaluator.evaluate(candidate, good_overview, good_security, now=now)
        assert verdict.accepted is True
        assert len(verdict.warnings) == 1
        assert "symbol length" in verdict.warnings[0]

    @pytest.mark.parametrize("symbol", ["SOL", "usdc", "Bonk", "SOL ", " jup"])
    def test_denylisted_symbol_rejects(
        self, evaluator, good_overview, good_security, now, symbol
    ) -> None:
        candidate = Candidate(address="X1", name="Foo", symbol=symbol)
        verdict = evaluator.evaluate(candidate, good_overview, good_security, now=now)
        assert verdict.fail_reason == rules.DENYLIST

    def test_warning_kept_on_later_rejection(
        self, evaluator, good_overview, good_security, now
    ) -> None:
        candidate = Candidate(address="X1", name="Foo", symbol="FARTCOIN")
        verdict = evaluator.evaluate(candidate, good_overview, good_security, now=now)
        assert verdict.fail_reason == rules.DENYLIST
        assert len(verdict.warnings) == 1


class TestDenylistLookup:
    def test_is_denylisted_case_insensitive(self, evaluator: CriteriaEvaluator) -> None:
        assert evaluator.is_denylisted("sol")
        assert evaluator.is_denylisted(" JitoSOL ")
        assert not evaluator.is_denylisted("ABCX")

    def test_missing_symbol_is_not_denylisted(self, evaluator: CriteriaEvaluator) -> None:
        assert evaluator.is_denylisted("") is False
        assert evaluator.is_denylisted(None) is False

    def test_custom_denylist(self) -> None:
        evaluator = CriteriaEvaluator(CriteriaSettings(denylist=["abcx"]))
        assert evaluator.is_denylisted("ABCX")
        assert not evaluator.is_denylisted("SOL")


class TestDescribe:
    def test_describe_lists_thresholds(self, evaluator: CriteriaEvaluator) -> None:
        text = evaluator.describe()
        assert "$10,000,000" in text
        assert "$5,000" in text
        assert "10%" in text
        assert "5 min" in text
