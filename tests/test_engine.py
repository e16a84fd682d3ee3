"""Unit tests for PayrollCalculator.

Pure calculations; no database involved.
"""

from datetime import date
from decimal import Decimal

import pytest

from academy_payroll.calculators.deductions import NoDeductions, StatutoryDeductionProvider
from academy_payroll.calculators.engine import CalculationInput, PayrollCalculator
from academy_payroll.calculators.types import (
    Adjustment,
    IneligibilityReason,
    PayrollPolicy,
)
from academy_payroll.exceptions import PayrollValidationError

from factories import WorkLog, make_profile, week_of

MARCH_START = date(2025, 3, 1)
APRIL_START = date(2025, 4, 1)
FIRST_MONDAY = date(2025, 3, 3)


def calculate(work_logs, profile=None, adjustments=None, calculator=None):
    calculator = calculator or PayrollCalculator()
    return calculator.calculate(
        CalculationInput(
            profile=profile or make_profile(),
            period_start=MARCH_START,
            period_end_exclusive=APRIL_START,
            work_logs=work_logs,
            adjustments=adjustments or [],
        )
    )


def week_two(breakdown):
    """The first full week of March 2025 (Mar 3 - Mar 9)."""
    return breakdown.weekly_summaries[1]


class TestWeeklyHolidayAllowance:
    """Eligibility per week."""

    def test_reference_month(self):
        """15,000/h, one 20-hour clean week."""
        breakdown = calculate(week_of(FIRST_MONDAY, "4"))

        assert breakdown.total_work_hours == Decimal("20")
        assert breakdown.hourly_total == Decimal("300000")
        assert week_two(breakdown).eligible_for_weekly_holiday_allowance is True
        assert breakdown.weekly_holiday_allowance_hours == Decimal("8")
        assert breakdown.weekly_holiday_allowance == Decimal("120000")
        assert breakdown.gross_pay == Decimal("420000")
        assert breakdown.deductions_total == Decimal("0")
        assert breakdown.net_pay == Decimal("420000")

    def test_deduction_adjustment(self):
        breakdown = calculate(
            week_of(FIRST_MONDAY, "4"),
            adjustments=[{"label": "insurance", "amount": 5000, "isDeduction": True}],
        )

        assert breakdown.deductions_total == Decimal("5000")
        assert breakdown.net_pay == Decimal("415000")

    def test_exactly_fifteen_hours_is_eligible(self):
        breakdown = calculate(week_of(FIRST_MONDAY, "3"))

        assert week_two(breakdown).total_work_hours == Decimal("15")
        assert week_two(breakdown).eligible_for_weekly_holiday_allowance is True

    def test_fourteen_point_nine_hours_is_not(self):
        logs = week_of(FIRST_MONDAY, "3", days=4) + [
            WorkLog(date(2025, 3, 7), work_hours=Decimal("2.9"))
        ]

        week = week_two(calculate(logs))

        assert week.total_work_hours == Decimal("14.9")
        assert week.eligible_for_weekly_holiday_allowance is False
        assert week.ineligibility_reasons == [IneligibilityReason.HOURS_BELOW_THRESHOLD]
        assert week.weekly_holiday_allowance_hours == Decimal("0")

    def test_absence_blocks_regardless_of_hours(self):
        logs = week_of(FIRST_MONDAY, "8") + [WorkLog(date(2025, 3, 8), status="absence")]

        breakdown = calculate(logs)

        assert week_two(breakdown).total_work_hours == Decimal("40")
        assert week_two(breakdown).eligible_for_weekly_holiday_allowance is False
        assert week_two(breakdown).ineligibility_reasons == [IneligibilityReason.CONTAINS_ABSENCE]
        assert breakdown.weekly_holiday_allowance == Decimal("0")

    def test_tardy_blocks_but_hours_still_paid(self):
        logs = week_of(FIRST_MONDAY, "4", days=4) + [
            WorkLog(date(2025, 3, 7), status="tardy", work_hours=Decimal("4"))
        ]

        breakdown = calculate(logs)

        assert breakdown.hourly_total == Decimal("300000")
        assert week_two(breakdown).ineligibility_reasons == [IneligibilityReason.CONTAINS_TARDY]

    def test_every_failed_condition_reported(self):
        logs = [
            WorkLog(FIRST_MONDAY, status="tardy", work_hours=Decimal("2")),
            WorkLog(date(2025, 3, 4), status="absence"),
        ]

        week = week_two(calculate(logs))

        assert week.ineligibility_reasons == [
            IneligibilityReason.HOURS_BELOW_THRESHOLD,
            IneligibilityReason.CONTAINS_TARDY,
            IneligibilityReason.CONTAINS_ABSENCE,
        ]

    def test_substitute_does_not_block_by_default(self):
        logs = week_of(FIRST_MONDAY, "4", days=4) + [
            WorkLog(date(2025, 3, 7), status="substitute", work_hours=Decimal("4"))
        ]

        week = week_two(calculate(logs))

        assert week.contains_substitute is True
        assert week.eligible_for_weekly_holiday_allowance is True

    def test_substitute_blocks_when_policy_says_so(self):
        logs = week_of(FIRST_MONDAY, "4", days=4) + [
            WorkLog(date(2025, 3, 7), status="substitute", work_hours=Decimal("4"))
        ]
        calculator = PayrollCalculator(policy=PayrollPolicy(substitute_blocks_allowance=True))

        week = week_two(calculate(logs, calculator=calculator))

        assert week.ineligibility_reasons == [IneligibilityReason.CONTAINS_SUBSTITUTE]

    def test_allowance_summed_across_weeks(self):
        logs = week_of(FIRST_MONDAY, "4") + week_of(date(2025, 3, 10), "4")

        breakdown = calculate(logs)

        assert breakdown.weekly_holiday_allowance_hours == Decimal("16")
        assert breakdown.weekly_holiday_allowance == Decimal("240000")

    def test_freelancer_never_gets_allowance(self):
        breakdown = calculate(
            week_of(FIRST_MONDAY, "4"),
            profile=make_profile(contract_type="freelancer"),
            calculator=PayrollCalculator(deduction_provider=NoDeductions()),
        )

        assert breakdown.weekly_holiday_allowance == Decimal("0")
        assert week_two(breakdown).ineligibility_reasons == [IneligibilityReason.CONTRACT_TYPE]

    def test_empty_month_lists_every_week(self):
        breakdown = calculate([])

        assert len(breakdown.weekly_summaries) == 6
        assert breakdown.gross_pay == Decimal("0")
        assert breakdown.net_pay == Decimal("0")


class TestRounding:
    def test_hourly_total_rounded_once_at_total(self):
        """0.5h weeks at 1,001/h: per-week rounding would give 1,002."""
        logs = [
            WorkLog(FIRST_MONDAY, work_hours=Decimal("0.5")),
            WorkLog(date(2025, 3, 10), work_hours=Decimal("0.5")),
        ]

        breakdown = calculate(logs, profile=make_profile(hourly_rate="1001"))

        assert breakdown.hourly_total == Decimal("1001")

    def test_half_up(self):
        logs = [WorkLog(FIRST_MONDAY, work_hours=Decimal("0.5"))]

        breakdown = calculate(logs, profile=make_profile(hourly_rate="1001"))

        assert breakdown.hourly_total == Decimal("501")


class TestMerge:
    def test_base_salary_added_verbatim(self):
        breakdown = calculate([], profile=make_profile(base_salary_amount="2000000"))

        assert breakdown.base_salary_total == Decimal("2000000")
        assert breakdown.gross_pay == Decimal("2000000")

    def test_earning_and_deduction_adjustments(self):
        breakdown = calculate(
            week_of(FIRST_MONDAY, "4"),
            adjustments=[
                Adjustment("Bonus", Decimal("30000")),
                {"label": "Advance", "amount": "10000", "is_deduction": True},
            ],
        )

        assert breakdown.adjustment_total == Decimal("30000")
        assert breakdown.gross_pay == Decimal("450000")
        assert breakdown.deductions_total == Decimal("10000")
        assert breakdown.net_pay == breakdown.gross_pay - breakdown.deductions_total

    def test_negative_net_is_surfaced(self):
        breakdown = calculate(
            [], adjustments=[{"label": "Repayment", "amount": 50000, "is_deduction": True}]
        )

        assert breakdown.net_pay == Decimal("-50000")

    @pytest.mark.parametrize(
        "raw",
        [
            {"label": "  ", "amount": 1000},
            {"amount": 1000},
            {"label": "Bonus"},
            {"label": "Bonus", "amount": "abc"},
            {"label": "Bonus", "amount": True},
            {"label": "Bonus", "amount": float("nan")},
        ],
    )
    def test_malformed_adjustment_rejected(self, raw):
        with pytest.raises(PayrollValidationError):
            calculate([], adjustments=[raw])


class TestStatutoryDeductions:
    def test_insured_employee(self):
        breakdown = calculate(
            week_of(FIRST_MONDAY, "4"),
            profile=make_profile(contract_type="employee", insurance_enrolled=True),
        )

        details = {d.label: d.amount for d in breakdown.deduction_details}
        # gross 420,000
        assert details["Health insurance (4.5%)"] == Decimal("18900")
        assert details["National pension (3.545%)"] == Decimal("14889")
        assert details["Long-term care insurance (12.81%)"] == Decimal("1907")
        assert details["Employment insurance (0.9%)"] == Decimal("3780")
        assert breakdown.deductions_total == Decimal("39476")
        assert breakdown.net_pay == Decimal("380524")

    def test_uninsured_employee_has_no_deductions(self):
        breakdown = calculate(
            week_of(FIRST_MONDAY, "4"), profile=make_profile(contract_type="employee")
        )

        assert breakdown.deduction_details == []

    def test_freelancer_withholding(self):
        breakdown = calculate(
            week_of(FIRST_MONDAY, "4"), profile=make_profile(contract_type="freelancer")
        )

        # 300,000 hourly, no allowance
        assert [(d.label, d.amount) for d in breakdown.deduction_details] == [
            ("Freelancer withholding (3.3%)", Decimal("9900"))
        ]
        assert breakdown.net_pay == Decimal("290100")

    def test_provider_rounds_per_line(self):
        provider = StatutoryDeductionProvider()

        details = provider.compute(make_profile(contract_type="freelancer"), Decimal("1015"))

        # 33.495 -> 33
        assert details[0].amount == Decimal("33")
