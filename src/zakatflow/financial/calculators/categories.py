"""
Asset categories and the input field registry.

Single source of truth for which input fields exist and which category
(or liability group) each belongs to. This module has NO dependencies on
other modules to prevent import cycles: the rule table, the aggregator and
the data models all read from here.

Declaration order of CategoryKey matters. It is the order in which
deductible liabilities are absorbed by categories in the flow allocator.
"""

from dataclasses import dataclass
from enum import StrEnum

# =============================================================================
# ASSET CATEGORIES
# =============================================================================


class CategoryKey(StrEnum):
    """Semantic asset categories, in liability-absorption order."""

    LIQUID = "liquid"
    METALS = "metals"
    CRYPTO = "crypto"
    INVESTMENTS = "investments"
    RETIREMENT = "retirement"
    TRUSTS = "trusts"
    REAL_ESTATE = "real_estate"
    BUSINESS = "business"
    RECEIVABLES = "receivables"
    ILLIQUID = "illiquid"


CATEGORY_ORDER: tuple[CategoryKey, ...] = tuple(CategoryKey)

CATEGORY_LABELS: dict[CategoryKey, str] = {
    CategoryKey.LIQUID: "Cash & Savings",
    CategoryKey.METALS: "Precious Metals",
    CategoryKey.CRYPTO: "Crypto & Digital",
    CategoryKey.INVESTMENTS: "Investments",
    CategoryKey.RETIREMENT: "Retirement",
    CategoryKey.TRUSTS: "Trusts",
    CategoryKey.REAL_ESTATE: "Real Estate",
    CategoryKey.BUSINESS: "Business",
    CategoryKey.RECEIVABLES: "Debts Owed to You",
    CategoryKey.ILLIQUID: "Illiquid Assets",
}

CATEGORY_COLORS: dict[CategoryKey, str] = {
    CategoryKey.LIQUID: "#10b981",
    CategoryKey.METALS: "#eab308",
    CategoryKey.CRYPTO: "#8b5cf6",
    CategoryKey.INVESTMENTS: "#3b82f6",
    CategoryKey.RETIREMENT: "#f43f5e",
    CategoryKey.TRUSTS: "#14b8a6",
    CategoryKey.REAL_ESTATE: "#f97316",
    CategoryKey.BUSINESS: "#06b6d4",
    CategoryKey.RECEIVABLES: "#64748b",
    CategoryKey.ILLIQUID: "#a855f7",
}

# Destination (sink) node colors for the flow diagram
LIABILITY_COLOR = "#ef4444"
RETAINED_COLOR = "#1e293b"
OBLIGATION_COLOR = "#059669"


# =============================================================================
# ASSET FIELD REGISTRY
# =============================================================================
# field name -> human label, grouped by category. Every field listed here must
# have a rule in every methodology (checked when the rule table is built).

CATEGORY_FIELDS: dict[CategoryKey, dict[str, str]] = {
    CategoryKey.LIQUID: {
        "checking_accounts": "Checking Accounts",
        "savings_accounts": "Savings Accounts",
        "cash_on_hand": "Cash on Hand",
        "digital_wallets": "Digital Wallets",
        "foreign_currency": "Foreign Currency",
    },
    CategoryKey.METALS: {
        "gold_investment_value": "Gold Investment",
        "silver_investment_value": "Silver Investment",
        "gold_jewelry_value": "Gold Jewelry",
        "silver_jewelry_value": "Silver Jewelry",
    },
    CategoryKey.CRYPTO: {
        "crypto_currency": "Bitcoin/Ethereum",
        "crypto_trading": "Trading Altcoins",
        "staked_assets": "Staked Assets",
        "staked_rewards_vested": "Staking Rewards",
        "liquidity_pool_value": "Liquidity Pools",
    },
    CategoryKey.INVESTMENTS: {
        "active_investments": "Active Investments",
        "passive_investments": "Passive Investments",
        "reits_value": "REITs (Equity)",
        "dividends": "Dividends",
    },
    CategoryKey.RETIREMENT: {
        "roth_ira_contributions": "Roth IRA Contributions",
        "roth_ira_earnings": "Roth IRA Earnings",
        "traditional_ira_balance": "Traditional IRA",
        "four_oh_one_k_vested_balance": "401(k) Vested",
        "four_oh_one_k_unvested_match": "401(k) Unvested Match",
        "ira_withdrawals": "IRA Withdrawals",
        "esa_withdrawals": "ESA Withdrawals",
        "five_twenty_nine_withdrawals": "529 Withdrawals",
        "hsa_balance": "HSA Balance",
    },
    CategoryKey.TRUSTS: {
        "revocable_trust_value": "Revocable Trust",
        "irrevocable_trust_value": "Irrevocable Trust",
        "clat_value": "CLAT",
    },
    CategoryKey.REAL_ESTATE: {
        "real_estate_for_sale": "Property for Sale",
        "land_banking_value": "Land Banking",
        "rental_property_income": "Rental Income",
    },
    CategoryKey.BUSINESS: {
        "business_cash_and_receivables": "Business Cash & Receivables",
        "business_inventory": "Inventory",
    },
    CategoryKey.RECEIVABLES: {
        "good_debt_owed_to_you": "Collectible Loans",
        "bad_debt_recovered": "Recovered Bad Debt",
    },
    CategoryKey.ILLIQUID: {
        "illiquid_assets_value": "Illiquid Assets",
        "livestock_value": "Livestock",
    },
}


# =============================================================================
# LIABILITY FIELD REGISTRY
# =============================================================================


@dataclass(frozen=True)
class LiabilityField:
    """A declared liability input.

    Attributes:
        name: Input field name.
        label: Human-readable label.
        recurring: True if the field holds a monthly payment amount.
        balance_field: Input field holding the outstanding balance, used by
            full-balance deduction when declared.
    """

    name: str
    label: str
    recurring: bool
    balance_field: str | None = None


LIABILITY_FIELDS: tuple[LiabilityField, ...] = (
    LiabilityField("monthly_living_expenses", "Living Expenses", recurring=True),
    LiabilityField("monthly_mortgage", "Mortgage", recurring=True, balance_field="mortgage_balance"),
    LiabilityField("insurance_expenses", "Insurance", recurring=True),
    LiabilityField("student_loans_due", "Student Loans", recurring=True, balance_field="student_loan_balance"),
    LiabilityField("credit_card_balance", "Credit Card", recurring=False),
    LiabilityField("unpaid_bills", "Unpaid Bills", recurring=False),
    LiabilityField("property_tax", "Property Tax", recurring=False),
    LiabilityField("late_tax_payments", "Late Taxes", recurring=False),
    LiabilityField("estimated_tax_payment", "Estimated Tax Payment", recurring=False),
)

LIABILITY_BALANCE_FIELDS: tuple[str, ...] = tuple(
    f.balance_field for f in LIABILITY_FIELDS if f.balance_field is not None
)

# Informational inputs that never count towards zakatable wealth
PURIFICATION_FIELDS: tuple[str, ...] = ("interest_earned",)
