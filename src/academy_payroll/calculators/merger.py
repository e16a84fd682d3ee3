"""Combine computed pay with adjustments and deduction details."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from academy_payroll.calculators.types import Adjustment, DeductionDetail
from academy_payroll.exceptions import PayrollValidationError


@dataclass(frozen=True)
class MergedTotals:
    gross_pay: Decimal
    deductions_total: Decimal
    net_pay: Decimal


def normalize_adjustment(raw: Adjustment | Mapping[str, Any]) -> Adjustment:
    """Validate one adjustment from caller input.

    Raises:
        PayrollValidationError: If the label is blank or the amount is not a finite number
    """
    if isinstance(raw, Adjustment):
        label, amount, is_deduction = raw.label, raw.amount, raw.is_deduction
    else:
        label = raw.get("label")
        amount = raw.get("amount")
        is_deduction = raw.get("is_deduction", raw.get("isDeduction", False))

    if not isinstance(label, str) or not label.strip():
        raise PayrollValidationError("Adjustment label is required")
    if amount is None or isinstance(amount, bool):
        raise PayrollValidationError(f"Adjustment '{label.strip()}' requires an amount")
    if isinstance(amount, float) and not math.isfinite(amount):
        raise PayrollValidationError(f"Adjustment '{label.strip()}' has an invalid amount")
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise PayrollValidationError(
            f"Adjustment '{label.strip()}' has an invalid amount"
        ) from None
    if not value.is_finite():
        raise PayrollValidationError(f"Adjustment '{label.strip()}' has an invalid amount")

    return Adjustment(label=label.strip(), amount=value, is_deduction=bool(is_deduction))


def split_adjustments(
    adjustments: Iterable[Adjustment],
) -> tuple[list[Adjustment], list[Adjustment]]:
    """Split into (earnings, deductions), preserving input order."""
    earnings: list[Adjustment] = []
    deductions: list[Adjustment] = []
    for item in adjustments:
        (deductions if item.is_deduction else earnings).append(item)
    return earnings, deductions


def compute_gross(
    hourly_total: Decimal,
    weekly_holiday_allowance: Decimal,
    base_salary_total: Decimal,
    adjustments: Iterable[Adjustment],
) -> Decimal:
    """GROSS = hourly + weekly allowance + base salary + Σ(earning adjustments)"""
    earnings, _ = split_adjustments(adjustments)
    return (
        hourly_total
        + weekly_holiday_allowance
        + base_salary_total
        + sum((a.amount for a in earnings), Decimal("0"))
    )


def merge_totals(
    hourly_total: Decimal,
    weekly_holiday_allowance: Decimal,
    base_salary_total: Decimal,
    adjustments: list[Adjustment],
    deduction_details: list[DeductionDetail],
) -> MergedTotals:
    """Merge computed pay, adjustments and deduction details.

    DEDUCTIONS = Σ(deduction details) + Σ(deduction adjustments)
    NET = GROSS - DEDUCTIONS

    Zero or negative net pay is returned as-is.
    """
    _, deduction_adjustments = split_adjustments(adjustments)
    gross = compute_gross(hourly_total, weekly_holiday_allowance, base_salary_total, adjustments)
    deductions_total = sum((d.amount for d in deduction_details), Decimal("0")) + sum(
        (a.amount for a in deduction_adjustments), Decimal("0")
    )
    return MergedTotals(
        gross_pay=gross,
        deductions_total=deductions_total,
        net_pay=gross - deductions_total,
    )
