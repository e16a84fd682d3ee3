"""Resolve a ``YYYY-MM`` month token into a half-open calendar interval."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from academy_payroll.config import get_settings
from academy_payroll.exceptions import PayrollValidationError

MONTH_TOKEN_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class MonthRange:
    """``[start_date, end_exclusive_date)`` in organization-local dates."""

    start_date: date
    end_exclusive_date: date
    label: str

    @property
    def end_date(self) -> date:
        """Inclusive last day of the month."""
        return self.end_exclusive_date - timedelta(days=1)

    @property
    def token(self) -> str:
        return f"{self.start_date.year:04d}-{self.start_date.month:02d}"

    def contains(self, value: date) -> bool:
        return self.start_date <= value < self.end_exclusive_date


def _first_of_next_month(value: date) -> date:
    if value.month == 12:
        return date(value.year + 1, 1, 1)
    return date(value.year, value.month + 1, 1)


def resolve_month_range(
    month_token: str | None,
    timezone: str | None = None,
    now: datetime | None = None,
) -> MonthRange:
    """Resolve a month token, or the current month when the token is empty.

    Args:
        month_token: ``YYYY-MM`` or None/"" for the current month
        timezone: IANA zone used to decide "current"; defaults to settings
        now: Override of the current instant (tests)

    Raises:
        PayrollValidationError: If the token is malformed
    """
    if month_token:
        match = MONTH_TOKEN_PATTERN.match(month_token.strip())
        if match is None:
            raise PayrollValidationError(
                f"Invalid month '{month_token}', expected YYYY-MM"
            )
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12 or not 1 <= year <= 9998:
            raise PayrollValidationError(
                f"Invalid month '{month_token}', expected YYYY-MM"
            )
    else:
        zone = ZoneInfo(timezone or get_settings().org_timezone)
        local_now = now.astimezone(zone) if now is not None else datetime.now(zone)
        year, month = local_now.year, local_now.month

    start = date(year, month, 1)
    return MonthRange(
        start_date=start,
        end_exclusive_date=_first_of_next_month(start),
        label=start.strftime("%B %Y"),
    )
