"""
Zakat calculator: methodology-driven zakat on a declared financial position.

Implements:
- Per-field zakatable amounts, dispatched on the resolved FieldRule treatment
- Deductible liabilities per the methodology's debt policy
- Nisab threshold from precious-metal spot prices (silver or gold standard)
- 2.5% (lunar) / 2.577% (solar) zakat on net zakatable wealth
- Purification amounts (interest, impermissible dividends), reported separately

The engine never branches on a methodology or category name. Everything
school-specific lives in the rule table (see methodology.py).

Bad numeric input is clamped, reported on the result and logged; only an
unknown methodology raises.
"""

from loguru import logger

from zakatflow.core.config import Config

from ..models import (
    AssetCategory,
    AssetItem,
    CalculationResult,
    FinancialInput,
    LiabilityItem,
    MetalPrices,
    PurificationAmounts,
    coerce_number,
)
from .aggregator import aggregate_items
from .categories import CATEGORY_COLORS, CATEGORY_FIELDS, CATEGORY_LABELS, LIABILITY_FIELDS, LiabilityField
from .methodology import (
    FLAG_TAX_FREE_AT_ACCESS_AGE,
    METHODOLOGY_RULES,
    DebtPolicy,
    FieldRule,
    Methodology,
    MethodologyRules,
    NisabStandard,
    Treatment,
    resolve_rules,
)

MONTHS_PER_YEAR = 12


# =============================================================================
# NISAB & RATE
# =============================================================================


def calculate_nisab(
    standard: NisabStandard | str = NisabStandard.SILVER,
    prices: MetalPrices | None = None,
    rules: MethodologyRules | None = None,
) -> float:
    """Nisab threshold in currency units.

    Args:
        standard: Metal the threshold is denominated in.
        prices: Spot prices per troy ounce (defaults to MetalPrices()).
        rules: Rule set supplying the gram weights (defaults to bradford).

    Returns:
        grams * price per gram
    """
    prices = prices or MetalPrices()
    rules = rules or METHODOLOGY_RULES[Methodology.BRADFORD]
    standard = NisabStandard(standard)

    grams = rules.nisab_grams(standard)
    per_gram = prices.gold_per_gram if standard is NisabStandard.GOLD else prices.silver_per_gram
    return grams * per_gram


# =============================================================================
# FIELD EVALUATION
# =============================================================================


def _net_accessible(value: float, rule: FieldRule, data: FinancialInput, rules: MethodologyRules) -> float:
    """What could be withdrawn today: limit * (1 - tax - penalty), floored at 0."""
    if not data.retirement_withdrawal_allowed:
        return 0.0

    past_access_age = data.age >= rules.retirement_access_age
    penalty = 0.0 if past_access_age else rules.early_withdrawal_penalty
    tax = data.estimated_tax_rate
    if past_access_age and FLAG_TAX_FREE_AT_ACCESS_AGE in rule.flags:
        tax = 0.0

    return value * data.retirement_withdrawal_limit * max(0.0, 1.0 - tax - penalty)


def evaluate_field(rule: FieldRule, value: float, data: FinancialInput, rules: MethodologyRules) -> float:
    """Zakatable amount of one field under its rule.

    Args:
        rule: The field's rule from the resolved methodology.
        value: Sanitized declared value (>= 0).
        data: Sanitized input (age, tax rate and flags feed the formulas).
        rules: The resolved methodology (access age, penalty).

    Returns:
        Amount in [0, value].
    """
    if value <= 0:
        return 0.0
    if rule.gate is not None and not getattr(data, rule.gate, False):
        return 0.0

    match rule.treatment:
        case Treatment.FRACTION | Treatment.UNDERLYING_ASSETS:
            amount = value * rule.fraction
        case Treatment.NET_ACCESSIBLE:
            amount = _net_accessible(value, rule, data, rules)
        case Treatment.AGE_CONDITIONAL:
            if data.age < rules.retirement_access_age:
                amount = 0.0
            else:
                amount = _net_accessible(value, rule, data, rules)
        case Treatment.NET_OF_PURIFICATION:
            amount = value * (1.0 - data.dividend_purification_percent / 100.0)
        case Treatment.EXEMPT:
            amount = 0.0
        case _:
            logger.warning(f"Unknown treatment: {rule.treatment}")
            amount = 0.0

    return min(max(amount, 0.0), value)


def evaluate_categories(data: FinancialInput, rules: MethodologyRules) -> list[AssetCategory]:
    """Per-category breakdown for a sanitized input, in CategoryKey order."""
    categories = []
    for category, items in aggregate_items(data).items():
        category_rule = rules.category_rule(category)
        breakdown = AssetCategory(
            key=category,
            label=CATEGORY_LABELS[category],
            color=CATEGORY_COLORS[category],
        )
        for field_name, value in items:
            if value <= 0:
                continue
            amount = evaluate_field(category_rule.fields[field_name], value, data, rules)
            breakdown.items.append(
                AssetItem(
                    field=field_name,
                    label=CATEGORY_FIELDS[category][field_name],
                    value=value,
                    zakatable_fraction=amount / value,
                    zakatable_amount=amount,
                )
            )
            breakdown.gross_total += value
            breakdown.zakatable_amount += amount
        categories.append(breakdown)
    return categories


# =============================================================================
# LIABILITIES
# =============================================================================


def _deduction(liability: LiabilityField, declared: float, policy: DebtPolicy, data: FinancialInput) -> float:
    if policy is DebtPolicy.NO_DEDUCTION:
        return 0.0
    if not liability.recurring:
        return declared

    match policy:
        case DebtPolicy.ANNUALIZED:
            return declared * MONTHS_PER_YEAR
        case DebtPolicy.CURRENT_MONTH_ONLY:
            return declared
        case DebtPolicy.FULL_BALANCE:
            balance = getattr(data, liability.balance_field) if liability.balance_field else 0.0
            return balance if balance > 0 else declared * MONTHS_PER_YEAR
    return 0.0


def calculate_liabilities(data: FinancialInput, rules: MethodologyRules) -> list[LiabilityItem]:
    """Declared liabilities with the deductible amount under each field's policy.

    Only liabilities with a declared payment or outstanding balance are listed.
    """
    items = []
    for liability in LIABILITY_FIELDS:
        declared = getattr(data, liability.name)
        balance = getattr(data, liability.balance_field) if liability.balance_field else 0.0
        if declared <= 0 and balance <= 0:
            continue
        policy = rules.debt_policy(liability.name)
        items.append(
            LiabilityItem(
                field=liability.name,
                label=liability.label,
                declared=declared,
                policy=policy,
                deductible=_deduction(liability, declared, policy, data),
                balance=balance,
            )
        )
    return items


# =============================================================================
# CALCULATION
# =============================================================================


def calculate(
    data: FinancialInput,
    rules: MethodologyRules | None = None,
    *,
    nisab_threshold: float | None = None,
    prices: MetalPrices | None = None,
) -> CalculationResult:
    """Perform a complete zakat calculation.

    Args:
        data: Declared position. Not modified; a sanitized copy is used.
        rules: Rule set to apply. Defaults to the rules for data.methodology.
        nisab_threshold: Explicit threshold in currency units. When omitted it
            is derived from ``prices`` and the input's nisab standard.
        prices: Metal spot prices for the derived threshold.

    Returns:
        CalculationResult with per-category breakdown and input issues.

    Raises:
        UnknownMethodology: If rules is None and data.methodology is not supported.
    """
    clean, issues = data.sanitized()
    if rules is None:
        rules = resolve_rules(clean.methodology)

    categories = evaluate_categories(clean, rules)
    total_assets = sum(c.gross_total for c in categories)
    total_zakatable_gross = sum(c.zakatable_amount for c in categories)

    liabilities = calculate_liabilities(clean, rules)
    total_liabilities = sum(item.owed for item in liabilities)
    deductible = sum(item.deductible for item in liabilities)

    net_zakatable_wealth = max(0.0, total_zakatable_gross - deductible)

    if nisab_threshold is None:
        threshold = calculate_nisab(clean.nisab_standard, prices, rules)
    else:
        threshold = coerce_number(nisab_threshold)
        if threshold is None or threshold < 0:
            issues.append(f"nisab_threshold: invalid value {nisab_threshold!r} clamped to 0")
            logger.warning(f"Input clamped: nisab_threshold {nisab_threshold!r} -> 0")
            threshold = 0.0

    is_above_nisab = net_zakatable_wealth >= threshold
    rate = rules.zakat_rate(clean.calendar_type)

    logger.debug(
        f"Nisab check: {net_zakatable_wealth:,.2f} vs threshold {threshold:,.2f} "
        f"({clean.nisab_standard.value}, {rules.methodology.value})"
    )

    zakat_due = 0.0
    if is_above_nisab:
        zakat_due = net_zakatable_wealth * rate
    else:
        logger.info(f"Wealth {net_zakatable_wealth:,.2f} below nisab {threshold:,.2f}, no zakat due")

    purification = PurificationAmounts(
        interest=clean.interest_earned,
        dividends=clean.dividends * clean.dividend_purification_percent / 100.0,
    )

    return CalculationResult(
        total_assets=total_assets,
        total_zakatable_gross=total_zakatable_gross,
        total_liabilities=total_liabilities,
        deductible_liabilities=deductible,
        net_zakatable_wealth=net_zakatable_wealth,
        nisab_threshold=threshold,
        is_above_nisab=is_above_nisab,
        zakat_due=zakat_due,
        zakat_rate=rate,
        categories=categories,
        liabilities=liabilities,
        purification=purification,
        methodology=rules.methodology,
        nisab_standard=clean.nisab_standard,
        calendar_type=clean.calendar_type,
        currency=clean.currency,
        input_issues=issues,
    )


class ZakatCalculator:
    """Zakat calculator holding the metal prices used for the nisab.

    Wraps calculate() for callers that price the nisab once and then run
    several calculations, or compare methodologies side by side.
    """

    def __init__(self, prices: MetalPrices | None = None):
        self.prices = prices or MetalPrices()

    @classmethod
    def from_config(cls, config: Config) -> "ZakatCalculator":
        """Build from the ``pricing`` section of a Config."""
        return cls(
            MetalPrices(
                silver_per_ounce=float(config.get("pricing.silver_per_ounce")),
                gold_per_ounce=float(config.get("pricing.gold_per_ounce")),
            )
        )

    def nisab(self, standard: NisabStandard | str = NisabStandard.SILVER) -> float:
        return calculate_nisab(standard, self.prices)

    def calculate(
        self,
        data: FinancialInput,
        methodology: Methodology | str | None = None,
    ) -> CalculationResult:
        """Perform complete zakat calculation.

        Args:
            data: Declared position.
            methodology: Overrides data.methodology when given.
        """
        rules = resolve_rules(methodology if methodology is not None else data.methodology)
        return calculate(data, rules, prices=self.prices)

    def calculate_with_methodologies(self, data: FinancialInput) -> dict[str, CalculationResult]:
        """Calculate zakat under every supported methodology for comparison."""
        results = {}

        for methodology, rules in METHODOLOGY_RULES.items():
            results[methodology.value] = calculate(data, rules, prices=self.prices)

        return results

    def update_prices(
        self,
        silver_per_ounce: float | None = None,
        gold_per_ounce: float | None = None,
    ) -> None:
        """Update metal prices used for the nisab calculation."""
        for name, price in (("Silver", silver_per_ounce), ("Gold", gold_per_ounce)):
            if price is not None and price <= 0:
                raise ValueError(f"{name} price must be positive")

        old_silver, old_gold = self.prices.silver_per_ounce, self.prices.gold_per_ounce
        if silver_per_ounce is not None:
            self.prices.silver_per_ounce = silver_per_ounce
        if gold_per_ounce is not None:
            self.prices.gold_per_ounce = gold_per_ounce

        logger.info(
            f"Metal prices updated: silver ${old_silver:.2f} -> ${self.prices.silver_per_ounce:.2f}/oz, "
            f"gold ${old_gold:.2f} -> ${self.prices.gold_per_ounce:.2f}/oz "
            f"(Nisab: ${self.nisab(NisabStandard.SILVER):,.2f} silver, ${self.nisab(NisabStandard.GOLD):,.2f} gold)"
        )


__all__ = [
    "MONTHS_PER_YEAR",
    "ZakatCalculator",
    "calculate",
    "calculate_liabilities",
    "calculate_nisab",
    "evaluate_categories",
    "evaluate_field",
]
