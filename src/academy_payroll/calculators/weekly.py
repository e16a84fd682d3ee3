"""Partition approved work-log rows into Monday-Sunday week buckets."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta
from decimal import Decimal

from academy_payroll.calculators.types import WeeklySummary, WorkLogLike
from academy_payroll.exceptions import PayrollValidationError
from academy_payroll.models.work_log import ReviewStatus, WorkLogStatus, requires_work_hours

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(days=7)


def start_of_week(value: date) -> date:
    """Monday on or before ``value``."""
    return value - timedelta(days=value.weekday())


def week_number(week_start: date) -> int:
    """1-based Monday week index within the year of ``week_start``.

    Week 1 is the week containing January 1st.
    """
    first_week_start = start_of_week(date(week_start.year, 1, 1))
    return (week_start - first_week_start).days // 7 + 1


def normalize_hours(value: Decimal) -> Decimal:
    """Strip trailing zeros from a storage-scaled value: ``20.00`` -> ``20``, ``4.50`` -> ``4.5``."""
    value = value.normalize()
    if value == value.to_integral_value():
        return value.quantize(Decimal("1"))
    return value


def build_week_buckets(period_start: date, period_end_exclusive: date) -> list[WeeklySummary]:
    """Empty summaries for every week intersecting the period, clipped to it."""
    if period_end_exclusive <= period_start:
        raise PayrollValidationError(
            f"Empty payroll period [{period_start}, {period_end_exclusive})"
        )

    period_last_day = period_end_exclusive - ONE_DAY
    buckets: list[WeeklySummary] = []
    cursor = start_of_week(period_start)
    while cursor < period_end_exclusive:
        buckets.append(
            WeeklySummary(
                week_number=week_number(max(cursor, period_start)),
                week_start=max(cursor, period_start),
                week_end=min(cursor + timedelta(days=6), period_last_day),
            )
        )
        cursor += ONE_WEEK
    return buckets


def aggregate_weeks(
    entries: Iterable[WorkLogLike],
    period_start: date,
    period_end_exclusive: date,
) -> list[WeeklySummary]:
    """Fold work-log rows into week buckets for ``[period_start, period_end_exclusive)``.

    Only approved rows dated inside the period are visible. A week that
    straddles the period boundary is evaluated on its in-period share
    alone. Hours are summed only for hour-bearing statuses; external
    substitute hours never count toward the teacher's own total.

    Eligibility is not decided here; see ``PayrollCalculator``.
    """
    buckets = build_week_buckets(period_start, period_end_exclusive)
    by_week = {start_of_week(b.week_start): b for b in buckets}

    for entry in entries:
        if entry.review_status != ReviewStatus.APPROVED:
            continue
        if not period_start <= entry.work_date < period_end_exclusive:
            continue

        summary = by_week[start_of_week(entry.work_date)]
        summary.entry_count += 1

        if requires_work_hours(entry.status) and entry.work_hours is not None:
            summary.total_work_hours += Decimal(str(entry.work_hours))

        if entry.status == WorkLogStatus.TARDY:
            summary.contains_tardy = True
        elif entry.status == WorkLogStatus.ABSENCE:
            summary.contains_absence = True
        elif entry.status == WorkLogStatus.SUBSTITUTE:
            summary.contains_substitute = True

    for bucket in buckets:
        bucket.total_work_hours = normalize_hours(bucket.total_work_hours)
    return buckets
