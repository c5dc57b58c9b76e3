"""Zakat engine: methodology rules, data models and calculators."""

from .calculators import Methodology, ZakatCalculator, calculate, resolve_rules
from .models import CalculationResult, FinancialInput, MetalPrices

__all__ = [
    "CalculationResult",
    "FinancialInput",
    "Methodology",
    "MetalPrices",
    "ZakatCalculator",
    "calculate",
    "resolve_rules",
]
