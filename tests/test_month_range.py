"""Tests for month token resolution."""

from datetime import date, datetime, timezone

import pytest

from academy_payroll.calculators.month_range import resolve_month_range
from academy_payroll.exceptions import PayrollValidationError


class TestResolveMonthRange:
    def test_regular_month(self):
        month = resolve_month_range("2025-03")

        assert month.start_date == date(2025, 3, 1)
        assert month.end_exclusive_date == date(2025, 4, 1)
        assert month.end_date == date(2025, 3, 31)
        assert month.label == "March 2025"
        assert month.token == "2025-03"

    def test_december_rolls_into_next_year(self):
        month = resolve_month_range("2024-12")

        assert month.start_date == date(2024, 12, 1)
        assert month.end_exclusive_date == date(2025, 1, 1)

    def test_leap_february(self):
        month = resolve_month_range("2024-02")

        assert month.end_date == date(2024, 2, 29)

    def test_contains_is_half_open(self):
        month = resolve_month_range("2025-03")

        assert month.contains(date(2025, 3, 1)) is True
        assert month.contains(date(2025, 3, 31)) is True
        assert month.contains(date(2025, 4, 1)) is False

    @pytest.mark.parametrize("token", ["2025-3", "2025/03", "March", "2025-13", "2025-00"])
    def test_malformed_token_rejected(self, token):
        with pytest.raises(PayrollValidationError):
            resolve_month_range(token)

    def test_empty_token_uses_org_local_month(self):
        """23:30 UTC on Jan 31 is already February in Seoul."""
        now = datetime(2025, 1, 31, 23, 30, tzinfo=timezone.utc)

        month = resolve_month_range(None, timezone="Asia/Seoul", now=now)

        assert month.start_date == date(2025, 2, 1)

    def test_empty_token_in_utc(self):
        now = datetime(2025, 1, 31, 23, 30, tzinfo=timezone.utc)

        month = resolve_month_range("", timezone="UTC", now=now)

        assert month.start_date == date(2025, 1, 1)
