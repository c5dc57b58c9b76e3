"""
Category aggregator: gross totals per asset category.

Sums the registry fields of a FinancialInput into the ten semantic
categories. Only fields listed in CATEGORY_FIELDS are read, so inputs that
grow new fields are tolerated rather than rejected.
"""

from loguru import logger

from ..models import FinancialInput, coerce_number
from .categories import CATEGORY_FIELDS, CATEGORY_ORDER, LIABILITY_FIELDS, CategoryKey


def _amount(data: FinancialInput, field_name: str) -> float:
    number = coerce_number(getattr(data, field_name, 0.0))
    if number is None or number < 0:
        return 0.0
    return number


def aggregate_items(data: FinancialInput) -> dict[CategoryKey, list[tuple[str, float]]]:
    """Per-category ``(field, value)`` pairs, in registry order.

    Negative and unreadable values count as 0 so that a partially filled
    input still aggregates. Zero-valued fields are included.
    """
    return {
        category: [(field_name, _amount(data, field_name)) for field_name in CATEGORY_FIELDS[category]]
        for category in CATEGORY_ORDER
    }


def aggregate(data: FinancialInput) -> dict[CategoryKey, float]:
    """Gross total per category, in CategoryKey declaration order.

    Args:
        data: The declared financial position.

    Returns:
        Mapping of every category to its gross total (0.0 when empty).
    """
    totals = {category: sum(value for _, value in items) for category, items in aggregate_items(data).items()}
    logger.debug(f"Aggregated {sum(totals.values()):,.2f} across {sum(1 for v in totals.values() if v > 0)} categories")
    return totals


def total_declared_liabilities(data: FinancialInput) -> float:
    """Sum of every declared liability field as entered (before any policy)."""
    return sum(_amount(data, liability.name) for liability in LIABILITY_FIELDS)
