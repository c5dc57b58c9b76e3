"""
Flow allocator: split each category's zakatable amount into destinations.

Every unit of zakatable value ends up in exactly one of three places:

- liability: offset by a deductible debt
- obligation: the zakat due on what remains
- retained: everything else

Deductible liabilities are absorbed greedily in CategoryKey declaration order
(liquid first, illiquid last). The order is a presentation policy, not a
ruling; it changes which bar shows the red segment, never the totals.
"""

import math
from dataclasses import dataclass, field

from loguru import logger

from zakatflow.core.exceptions import ConservationViolation
from zakatflow.financial.calculators.categories import CATEGORY_ORDER, CategoryKey
from zakatflow.financial.models import CalculationResult

CONSERVATION_TOLERANCE = 1e-6


@dataclass
class FlowPartition:
    """Destinations of one category's zakatable amount."""

    category: CategoryKey
    label: str
    color: str
    zakatable_amount: float
    liability_portion: float = 0.0
    retained_portion: float = 0.0
    obligation_portion: float = 0.0

    @property
    def net_portion(self) -> float:
        """Value left after liabilities (retained + obligation)."""
        return self.zakatable_amount - self.liability_portion

    @property
    def allocated(self) -> float:
        return self.liability_portion + self.retained_portion + self.obligation_portion

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "label": self.label,
            "zakatable_amount": round(self.zakatable_amount, 2),
            "liability": round(self.liability_portion, 2),
            "retained": round(self.retained_portion, 2),
            "obligation": round(self.obligation_portion, 2),
        }


@dataclass
class FlowAllocation:
    """All partitions of one calculation, plus what could not be absorbed.

    Attributes:
        partitions: One per category with a positive zakatable amount, in
            CategoryKey order.
        zakat_rate: Rate applied to net portions (0 when below nisab).
        zakat_due: The calculation's zakat due.
        deductible_liabilities: The calculation's deductible liabilities.
        excess_liability: Deductible liability larger than all zakatable
            wealth. Reported, never redistributed.
        violations: Conservation problems detected and repaired.
    """

    partitions: list[FlowPartition]
    zakat_rate: float
    zakat_due: float
    deductible_liabilities: float
    excess_liability: float = 0.0
    violations: list[str] = field(default_factory=list)

    @property
    def total_liability(self) -> float:
        return sum(p.liability_portion for p in self.partitions)

    @property
    def total_retained(self) -> float:
        return sum(p.retained_portion for p in self.partitions)

    @property
    def total_obligation(self) -> float:
        return sum(p.obligation_portion for p in self.partitions)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "zakat_rate": self.zakat_rate,
            "zakat_due": round(self.zakat_due, 2),
            "deductible_liabilities": round(self.deductible_liabilities, 2),
            "excess_liability": round(self.excess_liability, 2),
            "totals": {
                "liability": round(self.total_liability, 2),
                "retained": round(self.total_retained, 2),
                "obligation": round(self.total_obligation, 2),
            },
            "partitions": [p.to_dict() for p in self.partitions],
            "violations": list(self.violations),
        }


def _close(a: float, b: float, tolerance: float) -> bool:
    return math.isclose(a, b, rel_tol=tolerance, abs_tol=tolerance)


def verify_conservation(
    allocation: FlowAllocation,
    result: CalculationResult,
    tolerance: float = CONSERVATION_TOLERANCE,
) -> None:
    """Check that the allocation accounts for every unit of value exactly once.

    Raises:
        ConservationViolation: Describing every failed check.
    """
    problems = []

    for p in allocation.partitions:
        if min(p.liability_portion, p.retained_portion, p.obligation_portion) < -tolerance:
            problems.append(f"{p.category.value}: negative portion")
        if not _close(p.allocated, p.zakatable_amount, tolerance):
            problems.append(f"{p.category.value}: allocated {p.allocated} != zakatable {p.zakatable_amount}")

    if not _close(allocation.total_obligation, result.zakat_due, tolerance):
        problems.append(f"obligation total {allocation.total_obligation} != zakat due {result.zakat_due}")

    absorbed = allocation.total_liability + allocation.excess_liability
    if not _close(absorbed, result.deductible_liabilities, tolerance):
        problems.append(f"liabilities absorbed {absorbed} != deductible {result.deductible_liabilities}")

    if problems:
        raise ConservationViolation("; ".join(problems))


def _repair(allocation: FlowAllocation) -> None:
    """Clamp retained portions so each partition sums to its zakatable amount."""
    for p in allocation.partitions:
        p.liability_portion = min(max(p.liability_portion, 0.0), p.zakatable_amount)
        p.obligation_portion = min(max(p.obligation_portion, 0.0), p.zakatable_amount - p.liability_portion)
        p.retained_portion = p.zakatable_amount - p.liability_portion - p.obligation_portion


def allocate(result: CalculationResult, *, strict: bool = False) -> FlowAllocation:
    """Partition every category's zakatable amount.

    Args:
        result: Output of the calculation engine.
        strict: Raise ConservationViolation instead of repairing it.

    Returns:
        FlowAllocation whose obligation portions sum to result.zakat_due.
    """
    rate = result.zakat_rate if result.is_above_nisab else 0.0
    remaining = max(result.deductible_liabilities, 0.0)
    order = {key: index for index, key in enumerate(CATEGORY_ORDER)}

    partitions = []
    for category in sorted(result.categories, key=lambda c: order[c.key]):
        amount = category.zakatable_amount
        if amount <= 0:
            continue

        liability = min(remaining, amount)
        remaining -= liability
        net = amount - liability
        obligation = net * rate

        partitions.append(
            FlowPartition(
                category=category.key,
                label=category.label,
                color=category.color,
                zakatable_amount=amount,
                liability_portion=liability,
                retained_portion=net - obligation,
                obligation_portion=obligation,
            )
        )

    allocation = FlowAllocation(
        partitions=partitions,
        zakat_rate=rate,
        zakat_due=result.zakat_due,
        deductible_liabilities=result.deductible_liabilities,
        excess_liability=remaining,
    )
    if remaining > 0:
        logger.info(f"Liabilities exceed zakatable wealth by {remaining:,.2f}")

    try:
        verify_conservation(allocation, result)
    except ConservationViolation as e:
        logger.error(f"Conservation violated: {e}")
        if strict:
            raise
        allocation.violations.append(str(e))
        _repair(allocation)

    return allocation
