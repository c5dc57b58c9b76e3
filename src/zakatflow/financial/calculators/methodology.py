"""
Methodology rule table: per-school treatment of every asset and liability field.

Each supported methodology maps to an immutable MethodologyRules record. The
calculation engine never branches on a methodology name: it looks up the
FieldRule for each input field and dispatches on its Treatment, and looks up
the DebtPolicy for each liability field. Adding a methodology means adding a
table entry here, nothing else.

Supported methodologies:
- bradford: Sheikh Joe Bradford's modern synthesis (30% proxy for passive
  holdings, retirement exempt below the access age, jewelry zakatable,
  12-month debt rule)
- hanafi: classical Hanafi (full market value, jewelry zakatable, full debt deduction)
- maliki-shafii: Maliki/Shafi'i (jewelry for personal use exempt, 12-month debt rule)
- hanbali: classical Hanbali (jewelry for personal use exempt, full debt deduction)

The table is built once at import and validated for completeness.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from loguru import logger

from zakatflow.core.exceptions import ConfigurationError, UnknownMethodology

from .categories import CATEGORY_FIELDS, LIABILITY_FIELDS, CategoryKey

RULES_VERSION = "1.0.0"

# === Shared constants ===

ZAKAT_RATE_LUNAR = 0.025  # 2.5% per lunar (hijri) year
ZAKAT_RATE_SOLAR = 0.02577  # 2.5% * 365.25 / 354.37, keeps lifetime totals equal on a solar year
NISAB_GOLD_GRAMS = 85.0
NISAB_SILVER_GRAMS = 595.0
RETIREMENT_ACCESS_AGE = 59.5
EARLY_WITHDRAWAL_PENALTY = 0.10
PASSIVE_PROXY_RATE = 0.30  # zakatable share of a diversified fund's underlying assets

# === Special-case flags ===

FLAG_TAX_FREE_AT_ACCESS_AGE = "tax_free_at_access_age"  # Roth earnings
FLAG_PERSONAL_USE = "personal_use"  # jewelry worn rather than held as bullion


class Methodology(StrEnum):
    """Supported jurisprudential methodologies."""

    BRADFORD = "bradford"
    HANAFI = "hanafi"
    MALIKI_SHAFII = "maliki-shafii"
    HANBALI = "hanbali"


class CalendarType(StrEnum):
    """Accounting year used for the zakat rate."""

    LUNAR = "lunar"
    SOLAR = "solar"


class NisabStandard(StrEnum):
    """Precious metal the nisab threshold is denominated in."""

    SILVER = "silver"
    GOLD = "gold"


class Treatment(StrEnum):
    """How a field's zakatable amount is derived from its declared value.

    FRACTION: value * fraction (1.0 = fully zakatable).
    UNDERLYING_ASSETS: value * fraction, where fraction is a proxy for the
        zakatable share of a holding's underlying assets.
    NET_ACCESSIBLE: what could be withdrawn today, net of tax and the
        early-withdrawal penalty (penalty only below the access age).
    AGE_CONDITIONAL: exempt below the access age, NET_ACCESSIBLE after it.
    NET_OF_PURIFICATION: value minus the declared impermissible percentage.
    EXEMPT: never zakatable.
    """

    FRACTION = "fraction"
    UNDERLYING_ASSETS = "underlying_assets"
    NET_ACCESSIBLE = "net_accessible"
    AGE_CONDITIONAL = "age_conditional"
    NET_OF_PURIFICATION = "net_of_purification"
    EXEMPT = "exempt"


class DebtPolicy(StrEnum):
    """How much of a declared liability reduces zakatable wealth.

    ANNUALIZED: 12 monthly payments (debts due within the coming year).
    CURRENT_MONTH_ONLY: the payment currently due.
    FULL_BALANCE: the outstanding balance (12 payments when no balance is declared).
    NO_DEDUCTION: nothing.
    """

    ANNUALIZED = "annualized"
    CURRENT_MONTH_ONLY = "current_month_only"
    FULL_BALANCE = "full_balance"
    NO_DEDUCTION = "no_deduction"


@dataclass(frozen=True)
class FieldRule:
    """Treatment of one input field.

    Attributes:
        treatment: Which formula applies.
        fraction: Multiplier for FRACTION / UNDERLYING_ASSETS (0-1).
        flags: Special-case flags (see FLAG_* constants).
        gate: Boolean input field that must be true for the field to count.
    """

    treatment: Treatment = Treatment.FRACTION
    fraction: float = 1.0
    flags: frozenset[str] = frozenset()
    gate: str | None = None

    def __post_init__(self):
        if not 0.0 <= self.fraction <= 1.0:
            raise ConfigurationError(f"Zakatable fraction must be within [0, 1], got {self.fraction}")


@dataclass(frozen=True)
class CategoryRule:
    """Field rules for one asset category."""

    category: CategoryKey
    fields: Mapping[str, FieldRule]


@dataclass(frozen=True)
class MethodologyRules:
    """Complete, immutable rule set for one methodology."""

    methodology: Methodology
    display_name: str
    description: str
    categories: Mapping[CategoryKey, CategoryRule]
    liabilities: Mapping[str, DebtPolicy]
    version: str = RULES_VERSION
    retirement_access_age: float = RETIREMENT_ACCESS_AGE
    early_withdrawal_penalty: float = EARLY_WITHDRAWAL_PENALTY
    nisab_gold_grams: float = NISAB_GOLD_GRAMS
    nisab_silver_grams: float = NISAB_SILVER_GRAMS
    zakat_rate_lunar: float = ZAKAT_RATE_LUNAR
    zakat_rate_solar: float = ZAKAT_RATE_SOLAR

    def category_rule(self, category: CategoryKey) -> CategoryRule:
        return self.categories[category]

    def rule_for(self, field_name: str) -> FieldRule:
        """Return the rule for an asset field, searching all categories."""
        for category_rule in self.categories.values():
            if field_name in category_rule.fields:
                return category_rule.fields[field_name]
        raise KeyError(f"No rule for field {field_name!r} in {self.methodology}")

    def debt_policy(self, field_name: str) -> DebtPolicy:
        return self.liabilities[field_name]

    def zakat_rate(self, calendar: CalendarType | str) -> float:
        """Zakat rate for the accounting year."""
        if CalendarType(calendar) is CalendarType.SOLAR:
            return self.zakat_rate_solar
        return self.zakat_rate_lunar

    def nisab_grams(self, standard: NisabStandard | str) -> float:
        """Nisab weight in grams for the chosen metal."""
        if NisabStandard(standard) is NisabStandard.GOLD:
            return self.nisab_gold_grams
        return self.nisab_silver_grams


# =============================================================================
# TABLE CONSTRUCTION
# =============================================================================

_FULL = FieldRule()
_EXEMPT = FieldRule(Treatment.EXEMPT, fraction=0.0)


@dataclass
class _Draft:
    """Mutable working copy used only while building the table."""

    fields: dict[str, FieldRule] = field(default_factory=dict)
    liabilities: dict[str, DebtPolicy] = field(default_factory=dict)


def _base_draft() -> _Draft:
    """Rules shared by every methodology before school-specific overrides."""
    draft = _Draft()
    for fields in CATEGORY_FIELDS.values():
        for field_name in fields:
            draft.fields[field_name] = _FULL

    draft.fields["dividends"] = FieldRule(Treatment.NET_OF_PURIFICATION)
    draft.fields["four_oh_one_k_unvested_match"] = _EXEMPT
    draft.fields["irrevocable_trust_value"] = FieldRule(gate="irrevocable_trust_accessible")
    draft.fields["clat_value"] = _EXEMPT  # not zakatable during the annuity term

    for retirement_field in ("traditional_ira_balance", "four_oh_one_k_vested_balance"):
        draft.fields[retirement_field] = FieldRule(Treatment.NET_ACCESSIBLE)
    draft.fields["roth_ira_earnings"] = FieldRule(
        Treatment.NET_ACCESSIBLE, flags=frozenset({FLAG_TAX_FREE_AT_ACCESS_AGE})
    )

    for jewelry_field in ("gold_jewelry_value", "silver_jewelry_value"):
        draft.fields[jewelry_field] = FieldRule(flags=frozenset({FLAG_PERSONAL_USE}))

    for liability in LIABILITY_FIELDS:
        draft.liabilities[liability.name] = DebtPolicy.FULL_BALANCE
    draft.liabilities["estimated_tax_payment"] = DebtPolicy.NO_DEDUCTION
    return draft


def _exempt_personal_jewelry(draft: _Draft) -> None:
    for jewelry_field in ("gold_jewelry_value", "silver_jewelry_value"):
        draft.fields[jewelry_field] = FieldRule(Treatment.EXEMPT, fraction=0.0, flags=frozenset({FLAG_PERSONAL_USE}))


def _twelve_month_rule(draft: _Draft) -> None:
    """Only debts falling due within the coming year are deductible."""
    draft.liabilities["monthly_living_expenses"] = DebtPolicy.ANNUALIZED
    draft.liabilities["monthly_mortgage"] = DebtPolicy.ANNUALIZED
    draft.liabilities["insurance_expenses"] = DebtPolicy.CURRENT_MONTH_ONLY
    draft.liabilities["student_loans_due"] = DebtPolicy.CURRENT_MONTH_ONLY


def _bradford() -> MethodologyRules:
    draft = _base_draft()
    proxy = FieldRule(Treatment.UNDERLYING_ASSETS, fraction=PASSIVE_PROXY_RATE)
    draft.fields["passive_investments"] = proxy
    draft.fields["reits_value"] = proxy
    draft.fields["roth_ira_contributions"] = proxy
    for retirement_field in ("traditional_ira_balance", "four_oh_one_k_vested_balance"):
        draft.fields[retirement_field] = FieldRule(Treatment.AGE_CONDITIONAL)
    draft.fields["roth_ira_earnings"] = FieldRule(
        Treatment.AGE_CONDITIONAL, flags=frozenset({FLAG_TAX_FREE_AT_ACCESS_AGE})
    )
    _twelve_month_rule(draft)
    return _freeze(
        Methodology.BRADFORD,
        "Balanced (Sheikh Joe Bradford)",
        "30% proxy for passive investments, retirement exempt under 59.5, "
        "jewelry zakatable, 12-month debt deduction.",
        draft,
    )


def _hanafi() -> MethodologyRules:
    draft = _base_draft()
    return _freeze(
        Methodology.HANAFI,
        "Hanafi",
        "Full market value on investments, jewelry zakatable, net accessible retirement, full debt deduction.",
        draft,
    )


def _maliki_shafii() -> MethodologyRules:
    draft = _base_draft()
    _exempt_personal_jewelry(draft)
    _twelve_month_rule(draft)
    return _freeze(
        Methodology.MALIKI_SHAFII,
        "Maliki / Shafi'i",
        "Full market value on investments, personal jewelry exempt, net accessible retirement, "
        "12-month debt deduction.",
        draft,
    )


def _hanbali() -> MethodologyRules:
    draft = _base_draft()
    _exempt_personal_jewelry(draft)
    return _freeze(
        Methodology.HANBALI,
        "Hanbali",
        "Full market value on investments, personal jewelry exempt, net accessible retirement, "
        "full debt deduction.",
        draft,
    )


def _freeze(methodology: Methodology, display_name: str, description: str, draft: _Draft) -> MethodologyRules:
    categories = {
        category: CategoryRule(
            category=category,
            fields=MappingProxyType({name: draft.fields[name] for name in fields if name in draft.fields}),
        )
        for category, fields in CATEGORY_FIELDS.items()
    }
    rules = MethodologyRules(
        methodology=methodology,
        display_name=display_name,
        description=description,
        categories=MappingProxyType(categories),
        liabilities=MappingProxyType(dict(draft.liabilities)),
    )
    validate_rules(rules)
    return rules


def validate_rules(rules: MethodologyRules) -> None:
    """Check that a rule set covers every recognized field exactly once.

    Raises:
        ConfigurationError: On a missing category, field or liability rule,
            or an immediate debt with a payment-schedule policy.
    """
    for category, fields in CATEGORY_FIELDS.items():
        if category not in rules.categories:
            raise ConfigurationError(f"{rules.methodology}: no rule for category {category}")
        declared = set(rules.categories[category].fields)
        missing = set(fields) - declared
        extra = declared - set(fields)
        if missing:
            raise ConfigurationError(f"{rules.methodology}: no rule for {category} fields {sorted(missing)}")
        if extra:
            raise ConfigurationError(f"{rules.methodology}: unknown {category} fields {sorted(extra)}")

    for liability in LIABILITY_FIELDS:
        policy = rules.liabilities.get(liability.name)
        if policy is None:
            raise ConfigurationError(f"{rules.methodology}: no debt policy for {liability.name}")
        if not liability.recurring and policy not in (DebtPolicy.FULL_BALANCE, DebtPolicy.NO_DEDUCTION):
            raise ConfigurationError(
                f"{rules.methodology}: immediate debt {liability.name} cannot use policy {policy.value}"
            )


METHODOLOGY_RULES: Mapping[Methodology, MethodologyRules] = MappingProxyType(
    {
        Methodology.BRADFORD: _bradford(),
        Methodology.HANAFI: _hanafi(),
        Methodology.MALIKI_SHAFII: _maliki_shafii(),
        Methodology.HANBALI: _hanbali(),
    }
)


# =============================================================================
# LOOKUP
# =============================================================================


def list_methodologies() -> list[str]:
    """Identifiers of all supported methodologies, in table order."""
    return [m.value for m in METHODOLOGY_RULES]


def parse_methodology(methodology_id: Methodology | str) -> Methodology:
    """Normalize an identifier ("Hanafi", " maliki_shafii ") to a Methodology.

    Raises:
        UnknownMethodology: If the identifier is not supported.
    """
    if isinstance(methodology_id, Methodology):
        return methodology_id
    if not isinstance(methodology_id, str):
        raise UnknownMethodology(methodology_id, list_methodologies())
    normalized = methodology_id.strip().lower().replace("_", "-")
    try:
        return Methodology(normalized)
    except ValueError:
        raise UnknownMethodology(methodology_id, list_methodologies()) from None


def resolve_rules(methodology_id: Methodology | str) -> MethodologyRules:
    """Return the immutable rule set for a methodology.

    Raises:
        UnknownMethodology: If the identifier is not supported.
    """
    methodology = parse_methodology(methodology_id)
    rules = METHODOLOGY_RULES[methodology]
    logger.debug(f"Resolved rules for {methodology.value} (v{rules.version})")
    return rules
