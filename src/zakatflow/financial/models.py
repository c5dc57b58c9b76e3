"""Core data models for the zakat engine.

FinancialInput is the flat, mutable record owned by whatever collects the
user's answers (a form, a YAML file, the CLI). Everything downstream of it
(AssetCategory, CalculationResult) is derived data, recomputed per call.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

from loguru import logger

from .calculators.categories import (
    CATEGORY_FIELDS,
    LIABILITY_BALANCE_FIELDS,
    LIABILITY_FIELDS,
    PURIFICATION_FIELDS,
    CategoryKey,
)
from .calculators.methodology import CalendarType, DebtPolicy, Methodology, NisabStandard

TROY_OUNCE_GRAMS = 31.1035
DEFAULT_SILVER_PER_OUNCE = 24.50
DEFAULT_GOLD_PER_OUNCE = 2650.00

# Every field that holds a currency amount (clamped to >= 0)
AMOUNT_FIELDS: tuple[str, ...] = (
    *(name for category_fields in CATEGORY_FIELDS.values() for name in category_fields),
    *(liability.name for liability in LIABILITY_FIELDS),
    *LIABILITY_BALANCE_FIELDS,
    *PURIFICATION_FIELDS,
)

# Fractions clamped into a closed range: field -> (low, high)
BOUNDED_FIELDS: dict[str, tuple[float, float]] = {
    "estimated_tax_rate": (0.0, 1.0),
    "retirement_withdrawal_limit": (0.0, 1.0),
    "dividend_purification_percent": (0.0, 100.0),
}

# Legacy / alternate input names
FIELD_ALIASES: dict[str, str] = {
    "madhab": "methodology",
    "is_irrevocable_accessible": "irrevocable_trust_accessible",
    "is_over59_half": "age",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_snake_case(name: str) -> str:
    """Convert ``fourOhOneKVestedBalance`` to ``four_oh_one_k_vested_balance``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def canonical_field(key: str) -> str:
    """Input field name for a camelCase, snake_case or legacy key."""
    name = to_snake_case(str(key))
    return FIELD_ALIASES.get(name, name)


@dataclass
class FinancialInput:
    """A declared financial position.

    Amount fields are in ``currency`` units. Recurring liability fields
    (living expenses, mortgage, insurance, student loans) hold the
    monthly payment; the rest hold the amount currently owed.
    """

    # Liquid
    checking_accounts: float = 0.0
    savings_accounts: float = 0.0
    cash_on_hand: float = 0.0
    digital_wallets: float = 0.0
    foreign_currency: float = 0.0

    # Precious metals
    gold_investment_value: float = 0.0
    silver_investment_value: float = 0.0
    gold_jewelry_value: float = 0.0
    silver_jewelry_value: float = 0.0

    # Crypto
    crypto_currency: float = 0.0
    crypto_trading: float = 0.0
    staked_assets: float = 0.0
    staked_rewards_vested: float = 0.0
    liquidity_pool_value: float = 0.0

    # Investments
    active_investments: float = 0.0
    passive_investments: float = 0.0
    reits_value: float = 0.0
    dividends: float = 0.0
    dividend_purification_percent: float = 0.0

    # Retirement
    roth_ira_contributions: float = 0.0
    roth_ira_earnings: float = 0.0
    traditional_ira_balance: float = 0.0
    four_oh_one_k_vested_balance: float = 0.0
    four_oh_one_k_unvested_match: float = 0.0
    ira_withdrawals: float = 0.0
    esa_withdrawals: float = 0.0
    five_twenty_nine_withdrawals: float = 0.0
    hsa_balance: float = 0.0
    retirement_withdrawal_allowed: bool = True
    retirement_withdrawal_limit: float = 1.0

    # Trusts
    revocable_trust_value: float = 0.0
    irrevocable_trust_value: float = 0.0
    irrevocable_trust_accessible: bool = False
    clat_value: float = 0.0

    # Real estate
    real_estate_for_sale: float = 0.0
    land_banking_value: float = 0.0
    rental_property_income: float = 0.0

    # Business
    business_cash_and_receivables: float = 0.0
    business_inventory: float = 0.0

    # Receivables
    good_debt_owed_to_you: float = 0.0
    bad_debt_recovered: float = 0.0

    # Illiquid
    illiquid_assets_value: float = 0.0
    livestock_value: float = 0.0

    # Liabilities
    monthly_living_expenses: float = 0.0
    monthly_mortgage: float = 0.0
    mortgage_balance: float = 0.0
    insurance_expenses: float = 0.0
    student_loans_due: float = 0.0
    student_loan_balance: float = 0.0
    credit_card_balance: float = 0.0
    unpaid_bills: float = 0.0
    property_tax: float = 0.0
    late_tax_payments: float = 0.0
    estimated_tax_payment: float = 0.0

    # Purification (informational)
    interest_earned: float = 0.0

    # Personal / selection
    age: float = 30.0
    estimated_tax_rate: float = 0.25
    methodology: Methodology | str = Methodology.BRADFORD
    currency: str = "USD"
    nisab_standard: NisabStandard | str = NisabStandard.SILVER
    calendar_type: CalendarType | str = CalendarType.LUNAR

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> FinancialInput:
        """Build an input from a flat mapping with camelCase or snake_case keys.

        Unknown keys are ignored. Values are stored as given; call
        ``sanitized()`` to coerce and clamp them.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = canonical_field(key)
            if name not in known:
                logger.debug(f"Ignoring unknown input field: {key}")
                continue
            if name == "age" and isinstance(value, bool):
                # isOver59Half: a yes/no answer standing in for the age
                value = 60.0 if value else 30.0
            values[name] = value
        return cls(**values)

    def sanitized(self) -> tuple[FinancialInput, list[str]]:
        """Return a cleaned copy and the list of problems found.

        Negative, NaN, infinite and non-numeric amounts become 0. Rates and
        percentages are clamped into range. Unrecognized nisab standards and
        calendar types fall back to silver / lunar. The methodology is left
        untouched; an unknown one fails when its rules are resolved.
        """
        issues: list[str] = []
        changes: dict[str, Any] = {}

        for name in AMOUNT_FIELDS:
            raw = getattr(self, name)
            if raw is None:
                changes[name] = 0.0
                continue
            number = coerce_number(raw)
            if number is None:
                issues.append(f"{name}: non-numeric value {raw!r} treated as 0")
                changes[name] = 0.0
            elif number < 0:
                issues.append(f"{name}: negative value {number} clamped to 0")
                changes[name] = 0.0
            else:
                changes[name] = number

        for name, (low, high) in BOUNDED_FIELDS.items():
            raw = getattr(self, name)
            number = coerce_number(raw)
            if number is None:
                default = _field_default(name)
                issues.append(f"{name}: non-numeric value {raw!r} replaced with {default}")
                changes[name] = default
            elif not low <= number <= high:
                clamped = min(max(number, low), high)
                issues.append(f"{name}: {number} clamped to {clamped}")
                changes[name] = clamped
            else:
                changes[name] = number

        age = coerce_number(self.age)
        if age is None or age < 0:
            issues.append(f"age: invalid value {self.age!r} treated as 0")
            age = 0.0
        changes["age"] = age

        for name in ("retirement_withdrawal_allowed", "irrevocable_trust_accessible"):
            changes[name] = _coerce_flag(getattr(self, name))

        try:
            changes["nisab_standard"] = NisabStandard(str(self.nisab_standard).strip().lower())
        except ValueError:
            issues.append(f"nisab_standard: unknown value {self.nisab_standard!r}, using silver")
            changes["nisab_standard"] = NisabStandard.SILVER

        try:
            changes["calendar_type"] = CalendarType(str(self.calendar_type).strip().lower())
        except ValueError:
            issues.append(f"calendar_type: unknown value {self.calendar_type!r}, using lunar")
            changes["calendar_type"] = CalendarType.LUNAR

        changes["currency"] = str(self.currency or "USD").upper()

        for issue in issues:
            logger.warning(f"Input clamped: {issue}")

        return replace(self, **changes), issues


def coerce_number(value: Any) -> float | None:
    """Return a finite float, or None when the value cannot be read as one.

    NaN and infinity count as unreadable. Strings with thousands separators
    ("12,500") are accepted.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "on")
    return bool(value)


def _field_default(name: str) -> Any:
    for f in fields(FinancialInput):
        if f.name == name:
            return f.default
    raise KeyError(name)


@dataclass
class MetalPrices:
    """Spot prices per troy ounce, used to derive the nisab threshold."""

    silver_per_ounce: float = DEFAULT_SILVER_PER_OUNCE
    gold_per_ounce: float = DEFAULT_GOLD_PER_OUNCE

    def __post_init__(self):
        if self.silver_per_ounce <= 0 or self.gold_per_ounce <= 0:
            raise ValueError("Metal prices must be positive")

    @property
    def silver_per_gram(self) -> float:
        return self.silver_per_ounce / TROY_OUNCE_GRAMS

    @property
    def gold_per_gram(self) -> float:
        return self.gold_per_ounce / TROY_OUNCE_GRAMS


@dataclass
class AssetItem:
    """One input field's contribution to its category."""

    field: str
    label: str
    value: float
    zakatable_fraction: float
    zakatable_amount: float


@dataclass
class AssetCategory:
    """Per-category totals.

    Attributes:
        key: Category identifier.
        label: Display label.
        color: Display color (hex).
        gross_total: Sum of declared values.
        zakatable_amount: Portion subject to zakat (0 <= amount <= gross_total).
        items: Non-zero line items.
    """

    key: CategoryKey
    label: str
    color: str
    gross_total: float = 0.0
    zakatable_amount: float = 0.0
    items: list[AssetItem] = field(default_factory=list)

    @property
    def zakatable_fraction(self) -> float:
        if self.gross_total <= 0:
            return 0.0
        return self.zakatable_amount / self.gross_total

    @property
    def exempt_amount(self) -> float:
        return self.gross_total - self.zakatable_amount


@dataclass
class LiabilityItem:
    """A declared liability and how much of it was deducted.

    ``declared`` is the amount entered for the field (the monthly payment for
    recurring liabilities); ``balance`` is the outstanding balance, when the
    liability has one.
    """

    field: str
    label: str
    declared: float
    policy: DebtPolicy
    deductible: float
    balance: float = 0.0

    @property
    def owed(self) -> float:
        """Amount owed: the outstanding balance when declared, else the declared amount."""
        return self.balance if self.balance > 0 else self.declared


@dataclass
class PurificationAmounts:
    """Impermissible income to donate separately (never part of zakat)."""

    interest: float = 0.0
    dividends: float = 0.0

    @property
    def total(self) -> float:
        return self.interest + self.dividends


@dataclass
class CalculationResult:
    """Complete result of a zakat calculation."""

    total_assets: float
    total_zakatable_gross: float
    total_liabilities: float
    deductible_liabilities: float
    net_zakatable_wealth: float
    nisab_threshold: float
    is_above_nisab: bool
    zakat_due: float
    zakat_rate: float
    categories: list[AssetCategory]
    liabilities: list[LiabilityItem]
    purification: PurificationAmounts
    methodology: Methodology
    nisab_standard: NisabStandard
    calendar_type: CalendarType
    currency: str = "USD"
    input_issues: list[str] = field(default_factory=list)

    def category(self, key: CategoryKey | str) -> AssetCategory:
        """Look up a category breakdown by key."""
        key = CategoryKey(key)
        for category in self.categories:
            if category.key == key:
                return category
        raise KeyError(key)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "methodology": self.methodology.value,
            "currency": self.currency,
            "calendar_type": self.calendar_type.value,
            "nisab": {
                "standard": self.nisab_standard.value,
                "threshold": round(self.nisab_threshold, 2),
                "is_above_nisab": self.is_above_nisab,
            },
            "totals": {
                "total_assets": round(self.total_assets, 2),
                "total_zakatable_gross": round(self.total_zakatable_gross, 2),
                "total_liabilities": round(self.total_liabilities, 2),
                "deductible_liabilities": round(self.deductible_liabilities, 2),
                "net_zakatable_wealth": round(self.net_zakatable_wealth, 2),
            },
            "zakat": {
                "rate": self.zakat_rate,
                "due": round(self.zakat_due, 2),
            },
            "categories": [
                {
                    "key": c.key.value,
                    "label": c.label,
                    "gross_total": round(c.gross_total, 2),
                    "zakatable_amount": round(c.zakatable_amount, 2),
                    "zakatable_fraction": round(c.zakatable_fraction, 4),
                    "items": [
                        {
                            "field": item.field,
                            "label": item.label,
                            "value": round(item.value, 2),
                            "zakatable_amount": round(item.zakatable_amount, 2),
                        }
                        for item in c.items
                    ],
                }
                for c in self.categories
            ],
            "liabilities": [
                {
                    "field": item.field,
                    "label": item.label,
                    "declared": round(item.declared, 2),
                    "balance": round(item.balance, 2),
                    "owed": round(item.owed, 2),
                    "policy": item.policy.value,
                    "deductible": round(item.deductible, 2),
                }
                for item in self.liabilities
            ],
            "purification": {
                "interest": round(self.purification.interest, 2),
                "dividends": round(self.purification.dividends, 2),
                "total": round(self.purification.total, 2),
            },
            "input_issues": list(self.input_issues),
        }
