"""Payroll calculation engine - eligibility, pay and merge."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from academy_payroll.calculators.deductions import DeductionProvider, StatutoryDeductionProvider
from academy_payroll.calculators.merger import compute_gross, merge_totals, normalize_adjustment
from academy_payroll.calculators.types import (
    Adjustment,
    DeductionDetail,
    IneligibilityReason,
    PayrollBreakdown,
    PayrollPolicy,
    ProfileSnapshot,
    WeeklySummary,
    WorkLogLike,
)
from academy_payroll.calculators.weekly import aggregate_weeks, normalize_hours
from academy_payroll.models.teacher import ContractType


@dataclass
class CalculationInput:
    """Everything needed to compute one teacher's pay for one period."""

    profile: ProfileSnapshot
    period_start: date
    period_end_exclusive: date
    work_logs: list[WorkLogLike]
    adjustments: list[Adjustment | Mapping[str, Any]]


class PayrollCalculator:
    """Monthly wage calculator.

    Calculation pipeline (stable order):
    1) Bucket approved work logs into clipped Monday-Sunday weeks
    2) Decide weekly holiday allowance eligibility per week
    3) hourly total = Σ(week hours) × rate, rounded once at the total
    4) weekly allowance = Σ(eligible week allowance hours) × rate
    5) Base salary from the profile (not prorated)
    6) Gross from earnings + earning adjustments
    7) Deduction details from the deduction provider
    8) Merge into deductions total and net
    """

    def __init__(
        self,
        policy: PayrollPolicy | None = None,
        deduction_provider: DeductionProvider | None = None,
    ):
        self.policy = policy or PayrollPolicy()
        self.deduction_provider = deduction_provider or StatutoryDeductionProvider(
            quantum=self.policy.currency_quantum
        )

    def round_currency(self, amount: Decimal) -> Decimal:
        """Round to the currency's smallest unit (half-up)."""
        return amount.quantize(self.policy.currency_quantum, rounding=ROUND_HALF_UP)

    def allows_weekly_allowance(self, profile: ProfileSnapshot) -> bool:
        """Freelancers are never paid the weekly holiday allowance."""
        return profile.contract_type != ContractType.FREELANCER

    def evaluate_week(self, summary: WeeklySummary, allowance_allowed: bool = True) -> WeeklySummary:
        """Apply the eligibility rule to one week, recording every failed condition.

        Eligible when hours >= threshold and the week has no tardy and no
        absence entry (and no substitute entry when the policy says so).
        """
        reasons: list[IneligibilityReason] = []
        if summary.total_work_hours < self.policy.weekly_allowance_min_hours:
            reasons.append(IneligibilityReason.HOURS_BELOW_THRESHOLD)
        if summary.contains_tardy:
            reasons.append(IneligibilityReason.CONTAINS_TARDY)
        if summary.contains_absence:
            reasons.append(IneligibilityReason.CONTAINS_ABSENCE)
        if summary.contains_substitute and self.policy.substitute_blocks_allowance:
            reasons.append(IneligibilityReason.CONTAINS_SUBSTITUTE)
        if not allowance_allowed:
            reasons.append(IneligibilityReason.CONTRACT_TYPE)

        summary.ineligibility_reasons = reasons
        summary.eligible_for_weekly_holiday_allowance = not reasons
        summary.weekly_holiday_allowance_hours = (
            self.policy.weekly_allowance_hours if not reasons else Decimal("0")
        )
        return summary

    def summarize_weeks(
        self,
        work_logs: Iterable[WorkLogLike],
        period_start: date,
        period_end_exclusive: date,
        allowance_allowed: bool = True,
    ) -> list[WeeklySummary]:
        summaries = aggregate_weeks(work_logs, period_start, period_end_exclusive)
        for summary in summaries:
            self.evaluate_week(summary, allowance_allowed)
        return summaries

    def calculate(self, calc_input: CalculationInput) -> PayrollBreakdown:
        """Compute the full breakdown. Pure; performs no I/O.

        Raises:
            PayrollValidationError: On malformed adjustments or an empty period
        """
        profile = calc_input.profile
        adjustments = [
            self._round_adjustment(normalize_adjustment(a)) for a in calc_input.adjustments
        ]

        weekly_summaries = self.summarize_weeks(
            calc_input.work_logs,
            calc_input.period_start,
            calc_input.period_end_exclusive,
            allowance_allowed=self.allows_weekly_allowance(profile),
        )

        total_work_hours = normalize_hours(
            sum((w.total_work_hours for w in weekly_summaries), Decimal("0"))
        )
        allowance_hours = normalize_hours(
            sum((w.weekly_holiday_allowance_hours for w in weekly_summaries), Decimal("0"))
        )

        hourly_total = self.round_currency(total_work_hours * profile.hourly_rate)
        weekly_holiday_allowance = self.round_currency(allowance_hours * profile.hourly_rate)
        base_salary_total = self.round_currency(profile.base_salary_amount or Decimal("0"))

        gross = compute_gross(hourly_total, weekly_holiday_allowance, base_salary_total, adjustments)
        deduction_details = [
            DeductionDetail(d.label, self.round_currency(d.amount))
            for d in self.deduction_provider.compute(profile, gross)
        ]
        totals = merge_totals(
            hourly_total,
            weekly_holiday_allowance,
            base_salary_total,
            adjustments,
            deduction_details,
        )

        return PayrollBreakdown(
            hourly_total=hourly_total,
            weekly_holiday_allowance=weekly_holiday_allowance,
            weekly_holiday_allowance_hours=allowance_hours,
            base_salary_total=base_salary_total,
            adjustments=adjustments,
            deduction_details=deduction_details,
            total_work_hours=total_work_hours,
            weekly_summaries=weekly_summaries,
            gross_pay=totals.gross_pay,
            deductions_total=totals.deductions_total,
            net_pay=totals.net_pay,
        )

    def _round_adjustment(self, adjustment: Adjustment) -> Adjustment:
        return Adjustment(
            label=adjustment.label,
            amount=self.round_currency(adjustment.amount),
            is_deduction=adjustment.is_deduction,
        )
