"""Tests for zakatflow.financial.calculators.methodology."""

from types import MappingProxyType

import pytest

from zakatflow.core.exceptions import ConfigurationError, UnknownMethodology, ZakatFlowError
from zakatflow.financial.calculators.categories import CATEGORY_FIELDS, LIABILITY_FIELDS
from zakatflow.financial.calculators.methodology import (
    FLAG_TAX_FREE_AT_ACCESS_AGE,
    METHODOLOGY_RULES,
    CalendarType,
    CategoryRule,
    DebtPolicy,
    FieldRule,
    Methodology,
    NisabStandard,
    Treatment,
    list_methodologies,
    resolve_rules,
    validate_rules,
)


class TestResolveRules:
    @pytest.mark.parametrize("methodology_id", ["bradford", "hanafi", "maliki-shafii", "hanbali"])
    def test_resolves_every_supported_id(self, methodology_id):
        rules = resolve_rules(methodology_id)
        assert rules.methodology.value == methodology_id

    def test_accepts_enum(self):
        assert resolve_rules(Methodology.HANAFI).methodology is Methodology.HANAFI

    def test_normalizes_case_and_separators(self):
        assert resolve_rules(" Hanafi ").methodology is Methodology.HANAFI
        assert resolve_rules("maliki_shafii").methodology is Methodology.MALIKI_SHAFII

    def test_unknown_methodology_fails_fast(self):
        with pytest.raises(UnknownMethodology) as exc_info:
            resolve_rules("shafii")
        assert exc_info.value.methodology == "shafii"
        assert "bradford" in exc_info.value.supported
        assert "Unknown methodology" in str(exc_info.value)

    def test_unknown_methodology_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_rules("amja")

    def test_non_string_identifier(self):
        with pytest.raises(ZakatFlowError):
            resolve_rules(42)

    def test_same_object_every_call(self):
        assert resolve_rules("bradford") is resolve_rules("bradford")

    def test_list_methodologies(self):
        assert list_methodologies() == ["bradford", "hanafi", "maliki-shafii", "hanbali"]


class TestTableCompleteness:
    @pytest.mark.parametrize("methodology", list(Methodology))
    def test_every_field_has_a_rule(self, methodology):
        rules = METHODOLOGY_RULES[methodology]
        for category, fields in CATEGORY_FIELDS.items():
            assert set(rules.category_rule(category).fields) == set(fields)
        for liability in LIABILITY_FIELDS:
            assert isinstance(rules.debt_policy(liability.name), DebtPolicy)

    def test_table_is_read_only(self):
        assert isinstance(METHODOLOGY_RULES, MappingProxyType)
        with pytest.raises(TypeError):
            METHODOLOGY_RULES[Methodology.BRADFORD] = None  # type: ignore[index]

    def test_rules_are_frozen(self):
        rules = resolve_rules("bradford")
        with pytest.raises(AttributeError):
            rules.retirement_access_age = 40  # type: ignore[misc]

    def test_incomplete_rules_rejected(self):
        rules = resolve_rules("hanafi")
        categories = dict(rules.categories)
        liquid = categories[next(iter(categories))]
        partial = dict(liquid.fields)
        partial.pop("checking_accounts")
        categories[liquid.category] = CategoryRule(liquid.category, MappingProxyType(partial))

        from dataclasses import replace

        with pytest.raises(ConfigurationError, match="checking_accounts"):
            validate_rules(replace(rules, categories=MappingProxyType(categories)))

    def test_immediate_debt_cannot_be_annualized(self):
        from dataclasses import replace

        rules = resolve_rules("hanafi")
        liabilities = dict(rules.liabilities)
        liabilities["credit_card_balance"] = DebtPolicy.ANNUALIZED
        with pytest.raises(ConfigurationError, match="credit_card_balance"):
            validate_rules(replace(rules, liabilities=MappingProxyType(liabilities)))

    def test_fraction_out_of_range(self):
        with pytest.raises(ConfigurationError):
            FieldRule(fraction=1.5)


class TestPolicyDifferences:
    def test_passive_investments(self):
        bradford = resolve_rules("bradford").rule_for("passive_investments")
        assert bradford.treatment is Treatment.UNDERLYING_ASSETS
        assert bradford.fraction == 0.30
        for other in ("hanafi", "maliki-shafii", "hanbali"):
            rule = resolve_rules(other).rule_for("passive_investments")
            assert rule.treatment is Treatment.FRACTION
            assert rule.fraction == 1.0

    def test_retirement(self):
        assert resolve_rules("bradford").rule_for("traditional_ira_balance").treatment is Treatment.AGE_CONDITIONAL
        for other in ("hanafi", "maliki-shafii", "hanbali"):
            assert resolve_rules(other).rule_for("four_oh_one_k_vested_balance").treatment is Treatment.NET_ACCESSIBLE

    def test_roth_earnings_flag(self):
        for methodology in Methodology:
            rule = METHODOLOGY_RULES[methodology].rule_for("roth_ira_earnings")
            assert FLAG_TAX_FREE_AT_ACCESS_AGE in rule.flags

    def test_jewelry(self):
        assert resolve_rules("bradford").rule_for("gold_jewelry_value").treatment is Treatment.FRACTION
        assert resolve_rules("hanafi").rule_for("silver_jewelry_value").treatment is Treatment.FRACTION
        assert resolve_rules("maliki-shafii").rule_for("gold_jewelry_value").treatment is Treatment.EXEMPT
        assert resolve_rules("hanbali").rule_for("silver_jewelry_value").treatment is Treatment.EXEMPT

    def test_recurring_debt_policies(self):
        for twelve_month in ("bradford", "maliki-shafii"):
            rules = resolve_rules(twelve_month)
            assert rules.debt_policy("monthly_mortgage") is DebtPolicy.ANNUALIZED
            assert rules.debt_policy("insurance_expenses") is DebtPolicy.CURRENT_MONTH_ONLY
        for full in ("hanafi", "hanbali"):
            assert resolve_rules(full).debt_policy("monthly_mortgage") is DebtPolicy.FULL_BALANCE

    def test_estimated_tax_never_deductible(self):
        for methodology in Methodology:
            assert METHODOLOGY_RULES[methodology].debt_policy("estimated_tax_payment") is DebtPolicy.NO_DEDUCTION

    def test_irrevocable_trust_is_gated(self):
        rule = resolve_rules("hanafi").rule_for("irrevocable_trust_value")
        assert rule.gate == "irrevocable_trust_accessible"
        assert resolve_rules("hanafi").rule_for("clat_value").treatment is Treatment.EXEMPT

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            resolve_rules("bradford").rule_for("yacht_value")


class TestRatesAndNisab:
    def test_zakat_rates(self):
        rules = resolve_rules("bradford")
        assert rules.zakat_rate(CalendarType.LUNAR) == 0.025
        assert rules.zakat_rate("solar") == 0.02577

    def test_nisab_grams(self):
        rules = resolve_rules("hanbali")
        assert rules.nisab_grams(NisabStandard.SILVER) == 595.0
        assert rules.nisab_grams("gold") == 85.0
