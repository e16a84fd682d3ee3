"""Property-based tests for calculator invariants.

Random months of work logs and adjustments are fed through the
calculator and item builder; the totals must always reconcile.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

from hypothesis import given, settings, strategies as st

from academy_payroll.calculators.engine import CalculationInput, PayrollCalculator
from academy_payroll.calculators.line_builder import RunItemBuilder
from academy_payroll.calculators.types import Adjustment
from academy_payroll.models.payroll import RunItemKind
from academy_payroll.models.work_log import requires_work_hours

from factories import WorkLog, make_profile

MARCH_START = date(2025, 3, 1)
APRIL_START = date(2025, 4, 1)

work_logs = st.lists(
    st.builds(
        WorkLog,
        work_date=st.integers(min_value=1, max_value=31).map(lambda d: date(2025, 3, d)),
        status=st.sampled_from(["work", "tardy", "absence", "substitute"]),
        work_hours=st.one_of(
            st.none(),
            st.decimals(min_value=0, max_value=12, places=1, allow_nan=False, allow_infinity=False),
        ),
        review_status=st.sampled_from(["approved", "approved", "pending", "rejected"]),
    ),
    max_size=40,
)

adjustments = st.lists(
    st.builds(
        Adjustment,
        label=st.sampled_from(["Bonus", "Transport", "Advance", "Materials"]),
        amount=st.integers(min_value=1, max_value=200_000).map(Decimal),
        is_deduction=st.booleans(),
    ),
    max_size=5,
)

profiles = st.builds(
    make_profile,
    hourly_rate=st.sampled_from(["9860", "12500", "15000", "22000"]),
    contract_type=st.sampled_from(["employee", "freelancer", "none"]),
    insurance_enrolled=st.booleans(),
    base_salary_amount=st.sampled_from([None, "0", "500000"]),
)


def calculate(logs, profile, extra):
    return PayrollCalculator().calculate(
        CalculationInput(
            profile=profile,
            period_start=MARCH_START,
            period_end_exclusive=APRIL_START,
            work_logs=logs,
            adjustments=extra,
        )
    )


class TestTotalsReconcile:
    @given(logs=work_logs, profile=profiles, extra=adjustments)
    @settings(max_examples=200)
    def test_gross_and_net(self, logs, profile, extra):
        breakdown = calculate(logs, profile, extra)

        assert breakdown.gross_pay == (
            breakdown.hourly_total
            + breakdown.weekly_holiday_allowance
            + breakdown.base_salary_total
            + breakdown.adjustment_total
        )
        assert breakdown.deductions_total == sum(
            (d.amount for d in breakdown.deduction_details), Decimal("0")
        ) + sum((a.amount for a in breakdown.deduction_adjustments), Decimal("0"))
        assert breakdown.net_pay == breakdown.gross_pay - breakdown.deductions_total

    @given(logs=work_logs, profile=profiles, extra=adjustments)
    def test_money_is_whole_currency_units(self, logs, profile, extra):
        breakdown = calculate(logs, profile, extra)

        for amount in (
            breakdown.hourly_total,
            breakdown.weekly_holiday_allowance,
            breakdown.gross_pay,
            breakdown.deductions_total,
            breakdown.net_pay,
            *(d.amount for d in breakdown.deduction_details),
        ):
            assert amount == amount.to_integral_value()


class TestWeeklyInvariants:
    @given(logs=work_logs, profile=profiles)
    def test_only_visible_hours_are_counted(self, logs, profile):
        breakdown = calculate(logs, profile, [])

        expected = sum(
            (
                log.work_hours
                for log in logs
                if log.review_status == "approved"
                and log.work_hours is not None
                and requires_work_hours(log.status)
            ),
            Decimal("0"),
        )
        assert breakdown.total_work_hours == expected

    @given(logs=work_logs, profile=profiles)
    def test_eligible_weeks_meet_every_condition(self, logs, profile):
        breakdown = calculate(logs, profile, [])

        eligible = [w for w in breakdown.weekly_summaries if w.eligible_for_weekly_holiday_allowance]
        for week in eligible:
            assert week.total_work_hours >= Decimal("15")
            assert not week.contains_tardy
            assert not week.contains_absence
            assert week.ineligibility_reasons == []
        assert breakdown.weekly_holiday_allowance_hours == Decimal("8") * len(eligible)
        if profile.contract_type == "freelancer":
            assert breakdown.weekly_holiday_allowance == Decimal("0")

    @given(logs=work_logs, profile=profiles)
    def test_weeks_partition_the_month(self, logs, profile):
        weeks = calculate(logs, profile, []).weekly_summaries

        assert weeks[0].week_start == MARCH_START
        assert weeks[-1].week_end == date(2025, 3, 31)
        for previous, current in zip(weeks, weeks[1:]):
            assert (current.week_start - previous.week_end).days == 1


class TestItemsReconcile:
    @given(logs=work_logs, profile=profiles, extra=adjustments)
    def test_items_sum_to_totals(self, logs, profile, extra):
        breakdown = calculate(logs, profile, extra)
        run_id = uuid4()

        items = RunItemBuilder.build(run_id, breakdown)
        totals = RunItemBuilder.sum_by_kind(items)

        assert totals[RunItemKind.EARNING] == breakdown.gross_pay
        assert totals[RunItemKind.DEDUCTION] == breakdown.deductions_total
        assert [i.order_index for i in items] == list(range(len(items)))
        assert items[-1].item_kind == RunItemKind.INFO
        assert [i.item_hash for i in RunItemBuilder.build(run_id, breakdown)] == [
            i.item_hash for i in items
        ]
