"""Plain-text payroll summary sent along with a confirmation request."""

from __future__ import annotations

from decimal import Decimal

from academy_payroll.calculators.types import PayrollBreakdown
from academy_payroll.models.teacher import ContractType


def format_amount(value: Decimal, currency: str) -> str:
    return f"{value:,.0f} {currency}" if value == value.to_integral() else f"{value:,.2f} {currency}"


def format_hours(value: Decimal) -> str:
    rounded = value.quantize(Decimal("0.1"))
    if rounded == rounded.to_integral():
        return f"{rounded:.0f}h"
    return f"{rounded:.1f}h"


def compose_payroll_message(
    teacher_name: str | None,
    period_label: str,
    contract_type: str,
    breakdown: PayrollBreakdown,
    currency: str = "KRW",
) -> str:
    """Build the summary text shown to the teacher."""
    lines: list[str] = []
    greeting = teacher_name or "Teacher"
    lines.append(f"{greeting}, here is your payroll summary for {period_label}.")
    lines.append("Please review the details below and confirm if everything is correct.")
    lines.append("")

    lines.append(f"- Work hours: {format_hours(breakdown.total_work_hours)}")
    lines.append(f"- Hourly wages: {format_amount(breakdown.hourly_total, currency)}")
    if contract_type != ContractType.FREELANCER and breakdown.weekly_holiday_allowance > 0:
        lines.append(
            f"- Weekly holiday allowance: "
            f"{format_amount(breakdown.weekly_holiday_allowance, currency)}"
        )
    if breakdown.base_salary_total > 0:
        lines.append(f"- Base salary: {format_amount(breakdown.base_salary_total, currency)}")
    for addition in breakdown.earning_adjustments:
        lines.append(f"- Addition ({addition.label}): {format_amount(addition.amount, currency)}")

    if breakdown.deduction_details or breakdown.deduction_adjustments:
        lines.append("")
        lines.append("Deductions")
        for detail in breakdown.deduction_details:
            lines.append(f"- {detail.label}: {format_amount(detail.amount, currency)}")
        for deduction in breakdown.deduction_adjustments:
            lines.append(f"- {deduction.label}: {format_amount(deduction.amount, currency)}")

    lines.append("")
    lines.append(f"Net pay: {format_amount(breakdown.net_pay, currency)}")
    return "\n".join(lines)


def append_message(message: str, extra: str | None) -> str:
    """Append free text after a blank line, ignoring blank input."""
    if extra is None or not extra.strip():
        return message
    return f"{message}\n\n{extra.strip()}"
