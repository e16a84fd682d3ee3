"""Tests for the payroll summary message."""

from datetime import date

from academy_payroll.calculators.engine import CalculationInput, PayrollCalculator
from academy_payroll.calculators.messages import append_message, compose_payroll_message

from factories import make_profile, week_of


def breakdown_for(adjustments=None):
    return PayrollCalculator().calculate(
        CalculationInput(
            profile=make_profile(),
            period_start=date(2025, 3, 1),
            period_end_exclusive=date(2025, 4, 1),
            work_logs=week_of(date(2025, 3, 3), "4"),
            adjustments=adjustments or [],
        )
    )


class TestComposePayrollMessage:
    def test_summary_lines(self):
        message = compose_payroll_message("Kim Minji", "March 2025", "none", breakdown_for())

        assert message.startswith("Kim Minji, here is your payroll summary for March 2025.")
        assert "- Work hours: 20h" in message
        assert "- Hourly wages: 300,000 KRW" in message
        assert "- Weekly holiday allowance: 120,000 KRW" in message
        assert message.endswith("Net pay: 420,000 KRW")
        assert "Deductions" not in message

    def test_deductions_section(self):
        breakdown = breakdown_for(
            adjustments=[{"label": "Advance", "amount": 5000, "is_deduction": True}]
        )

        message = compose_payroll_message(None, "March 2025", "none", breakdown)

        assert message.startswith("Teacher, ")
        assert "Deductions\n- Advance: 5,000 KRW" in message
        assert message.endswith("Net pay: 415,000 KRW")


class TestAppendMessage:
    def test_appended_after_blank_line(self):
        assert append_message("Body", "  Thanks!  ") == "Body\n\nThanks!"

    def test_blank_extra_ignored(self):
        assert append_message("Body", "   ") == "Body"
        assert append_message("Body", None) == "Body"
