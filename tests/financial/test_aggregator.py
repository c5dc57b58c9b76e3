"""Tests for zakatflow.financial.calculators.aggregator."""

from zakatflow.financial.calculators.aggregator import aggregate, aggregate_items, total_declared_liabilities
from zakatflow.financial.calculators.categories import CATEGORY_ORDER, CategoryKey
from zakatflow.financial.models import FinancialInput


class TestAggregate:
    def test_every_category_present_in_order(self):
        totals = aggregate(FinancialInput())
        assert list(totals) == list(CATEGORY_ORDER)
        assert all(v == 0.0 for v in totals.values())

    def test_sums_fields_per_category(self, household_input):
        totals = aggregate(household_input)
        assert totals[CategoryKey.LIQUID] == 50_000
        assert totals[CategoryKey.METALS] == 7_000
        assert totals[CategoryKey.INVESTMENTS] == 111_000
        assert totals[CategoryKey.RETIREMENT] == 190_000
        assert totals[CategoryKey.RECEIVABLES] == 4_000
        assert totals[CategoryKey.TRUSTS] == 0.0

    def test_liabilities_not_counted_as_assets(self):
        totals = aggregate(FinancialInput(credit_card_balance=5_000, monthly_mortgage=2_000))
        assert sum(totals.values()) == 0.0

    def test_negative_values_ignored(self):
        totals = aggregate(FinancialInput(checking_accounts=-100, savings_accounts=400))
        assert totals[CategoryKey.LIQUID] == 400

    def test_deterministic(self, household_input):
        assert aggregate(household_input) == aggregate(household_input)

    def test_unknown_attributes_ignored(self):
        data = FinancialInput(checking_accounts=100)
        data.yacht_value = 1_000_000  # not a registry field
        assert sum(aggregate(data).values()) == 100


class TestAggregateItems:
    def test_items_in_registry_order(self):
        items = aggregate_items(FinancialInput(savings_accounts=5, checking_accounts=7))
        assert items[CategoryKey.LIQUID][:2] == [("checking_accounts", 7.0), ("savings_accounts", 5.0)]


def test_total_declared_liabilities():
    data = FinancialInput(credit_card_balance=1_000, monthly_mortgage=2_000, estimated_tax_payment=300)
    assert total_declared_liabilities(data) == 3_300
