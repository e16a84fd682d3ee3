"""Payroll calculation engine."""

from academy_payroll.calculators.engine import CalculationInput, PayrollCalculator
from academy_payroll.calculators.line_builder import RunItemBuilder, RunItemCandidate
from academy_payroll.calculators.month_range import MonthRange, resolve_month_range
from academy_payroll.calculators.weekly import aggregate_weeks

__all__ = [
    "CalculationInput",
    "PayrollCalculator",
    "RunItemBuilder",
    "RunItemCandidate",
    "MonthRange",
    "resolve_month_range",
    "aggregate_weeks",
]
