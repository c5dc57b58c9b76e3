"""Shared test fixtures for zakatflow."""

import os
import tempfile

import pytest

from zakatflow.financial.models import FinancialInput


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "paths": {"data_dir": os.path.join(tmp_dir, "data")},
        "pricing": {"silver_per_ounce": 30.0, "gold_per_ounce": 3000.0},
        "calculation": {"methodology": "hanafi"},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def simple_input():
    """Checking plus passive investments: the 30%-vs-100% scenario."""
    return FinancialInput(checking_accounts=10_000, passive_investments=50_000)


@pytest.fixture
def household_input():
    """A fuller position touching most categories and liability policies."""
    return FinancialInput(
        checking_accounts=20_000,
        savings_accounts=30_000,
        gold_jewelry_value=5_000,
        gold_investment_value=2_000,
        crypto_currency=3_000,
        active_investments=10_000,
        passive_investments=100_000,
        dividends=1_000,
        dividend_purification_percent=5,
        roth_ira_contributions=20_000,
        roth_ira_earnings=10_000,
        four_oh_one_k_vested_balance=150_000,
        four_oh_one_k_unvested_match=10_000,
        real_estate_for_sale=50_000,
        good_debt_owed_to_you=4_000,
        monthly_living_expenses=3_000,
        monthly_mortgage=2_000,
        mortgage_balance=300_000,
        insurance_expenses=200,
        credit_card_balance=1_500,
        estimated_tax_payment=5_000,
        interest_earned=120,
        age=40,
        estimated_tax_rate=0.25,
    )


@pytest.fixture
def input_file(tmp_dir):
    """Factory that writes a YAML input document and returns its path."""
    import yaml

    def _write(data: dict, name: str = "input.yaml") -> str:
        path = os.path.join(tmp_dir, name)
        with open(path, "w") as f:
            yaml.dump(data, f)
        return path

    return _write
