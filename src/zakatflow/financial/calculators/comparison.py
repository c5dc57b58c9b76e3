"""
Side-by-side comparison of two methodologies' rulings.

Verdicts are read from the rule table, so a new methodology gets a correct
description without any change here.
"""

from dataclasses import dataclass

from .methodology import DebtPolicy, Methodology, MethodologyRules, Treatment, resolve_rules

TOPIC_JEWELRY = "Personal Jewelry"
TOPIC_RETIREMENT = "Retirement Accounts (401k/IRA)"
TOPIC_INVESTMENTS = "Passive Investments (ETFs/Index Funds)"
TOPIC_DEBT = "Recurring Debts"

TOPICS: tuple[str, ...] = (TOPIC_JEWELRY, TOPIC_RETIREMENT, TOPIC_INVESTMENTS, TOPIC_DEBT)


@dataclass(frozen=True)
class MethodologyDifference:
    """How two methodologies rule on one topic."""

    topic: str
    first: Methodology
    second: Methodology
    first_verdict: str
    second_verdict: str

    @property
    def is_different(self) -> bool:
        return self.first_verdict != self.second_verdict

    def to_dict(self) -> dict:
        return {
            "topic": self.topic,
            self.first.value: self.first_verdict,
            self.second.value: self.second_verdict,
            "is_different": self.is_different,
        }


def _jewelry_verdict(rules: MethodologyRules) -> str:
    rule = rules.rule_for("gold_jewelry_value")
    if rule.treatment is Treatment.EXEMPT:
        return "Exempt (personal use)"
    return "Zakatable"


def _retirement_verdict(rules: MethodologyRules) -> str:
    rule = rules.rule_for("traditional_ira_balance")
    age = f"{rules.retirement_access_age:g}"
    match rule.treatment:
        case Treatment.AGE_CONDITIONAL:
            return f"Exempt under {age}, net accessible after"
        case Treatment.NET_ACCESSIBLE:
            return "Net accessible (after tax and penalty)"
        case Treatment.EXEMPT:
            return "Exempt"
        case _:
            return f"{rule.fraction:.0%} of vested balance"


def _investments_verdict(rules: MethodologyRules) -> str:
    rule = rules.rule_for("passive_investments")
    if rule.treatment is Treatment.EXEMPT:
        return "Exempt"
    if rule.treatment is Treatment.UNDERLYING_ASSETS:
        return f"{rule.fraction:.0%} of value (underlying assets proxy)"
    return f"{rule.fraction:.0%} of market value"


_DEBT_VERDICTS = {
    DebtPolicy.ANNUALIZED: "Next 12 months deductible",
    DebtPolicy.CURRENT_MONTH_ONLY: "Currently due payment only",
    DebtPolicy.FULL_BALANCE: "Full outstanding balance deductible",
    DebtPolicy.NO_DEDUCTION: "Not deductible",
}


def _debt_verdict(rules: MethodologyRules) -> str:
    return _DEBT_VERDICTS[rules.debt_policy("monthly_mortgage")]


_VERDICTS = {
    TOPIC_JEWELRY: _jewelry_verdict,
    TOPIC_RETIREMENT: _retirement_verdict,
    TOPIC_INVESTMENTS: _investments_verdict,
    TOPIC_DEBT: _debt_verdict,
}


def describe_rules(methodology: Methodology | str | MethodologyRules) -> dict[str, str]:
    """Topic -> verdict for one methodology."""
    rules = methodology if isinstance(methodology, MethodologyRules) else resolve_rules(methodology)
    return {topic: _VERDICTS[topic](rules) for topic in TOPICS}


def compare_methodologies(
    first: Methodology | str,
    second: Methodology | str,
) -> list[MethodologyDifference]:
    """Compare two methodologies on every topic.

    Raises:
        UnknownMethodology: If either identifier is not supported.
    """
    first_rules = resolve_rules(first)
    second_rules = resolve_rules(second)
    first_verdicts = describe_rules(first_rules)
    second_verdicts = describe_rules(second_rules)

    return [
        MethodologyDifference(
            topic=topic,
            first=first_rules.methodology,
            second=second_rules.methodology,
            first_verdict=first_verdicts[topic],
            second_verdict=second_verdicts[topic],
        )
        for topic in TOPICS
    ]
