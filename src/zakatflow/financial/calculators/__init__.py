"""Zakat calculators: rule table, aggregation, calculation and comparison."""

from .aggregator import aggregate, aggregate_items
from .categories import CATEGORY_FIELDS, CATEGORY_ORDER, LIABILITY_FIELDS, CategoryKey
from .comparison import MethodologyDifference, compare_methodologies
from .methodology import (
    METHODOLOGY_RULES,
    CalendarType,
    DebtPolicy,
    Methodology,
    MethodologyRules,
    NisabStandard,
    Treatment,
    list_methodologies,
    resolve_rules,
)
from .zakat import ZakatCalculator, calculate, calculate_nisab

__all__ = [
    "CATEGORY_FIELDS",
    "CATEGORY_ORDER",
    "LIABILITY_FIELDS",
    "METHODOLOGY_RULES",
    "CalendarType",
    "CategoryKey",
    "DebtPolicy",
    "Methodology",
    "MethodologyDifference",
    "MethodologyRules",
    "NisabStandard",
    "Treatment",
    "ZakatCalculator",
    "aggregate",
    "aggregate_items",
    "calculate",
    "calculate_nisab",
    "compare_methodologies",
    "list_methodologies",
    "resolve_rules",
]
