"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol
from uuid import UUID

from academy_payroll.config import Settings


class IneligibilityReason(str, Enum):
    """Why a week did not earn the weekly holiday allowance."""

    HOURS_BELOW_THRESHOLD = "hours_below_threshold"
    CONTAINS_TARDY = "contains_tardy"
    CONTAINS_ABSENCE = "contains_absence"
    CONTAINS_SUBSTITUTE = "contains_substitute"
    CONTRACT_TYPE = "contract_type"


class WorkLogLike(Protocol):
    """Attributes the aggregator reads from a work-log row."""

    work_date: date
    status: str
    work_hours: Decimal | None
    review_status: str


@dataclass(frozen=True)
class PayrollPolicy:
    """Numeric policy applied by the calculator."""

    weekly_allowance_min_hours: Decimal = Decimal("15")
    weekly_allowance_hours: Decimal = Decimal("8")
    substitute_blocks_allowance: bool = False
    currency_quantum: Decimal = Decimal("1")

    @classmethod
    def from_settings(cls, settings: Settings) -> PayrollPolicy:
        return cls(
            weekly_allowance_min_hours=settings.weekly_allowance_min_hours,
            weekly_allowance_hours=settings.weekly_allowance_hours,
            substitute_blocks_allowance=settings.substitute_blocks_allowance,
            currency_quantum=settings.currency_quantum,
        )


@dataclass(frozen=True)
class ProfileSnapshot:
    """Copy of the payroll profile fields taken at computation time.

    Stored on the run so later profile edits never rewrite history.
    """

    payroll_profile_id: UUID | None
    hourly_rate: Decimal
    base_salary_amount: Decimal | None
    contract_type: str
    insurance_enrolled: bool

    @classmethod
    def from_profile(cls, profile: Any) -> ProfileSnapshot:
        return cls(
            payroll_profile_id=profile.payroll_profile_id,
            hourly_rate=Decimal(profile.hourly_rate),
            base_salary_amount=(
                Decimal(profile.base_salary_amount)
                if profile.base_salary_amount is not None
                else None
            ),
            contract_type=str(getattr(profile.contract_type, "value", profile.contract_type)),
            insurance_enrolled=bool(profile.insurance_enrolled),
        )


@dataclass(frozen=True)
class Adjustment:
    """Manager-entered line item (earning unless ``is_deduction``)."""

    label: str
    amount: Decimal
    is_deduction: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "amount": str(self.amount),
            "is_deduction": self.is_deduction,
        }


@dataclass(frozen=True)
class DeductionDetail:
    """Already-computed deduction (insurance, withholding, ...)."""

    label: str
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "amount": str(self.amount)}


@dataclass
class WeeklySummary:
    """One Monday-Sunday bucket, clipped to the payroll period."""

    week_number: int
    week_start: date
    week_end: date
    total_work_hours: Decimal = Decimal("0")
    contains_tardy: bool = False
    contains_absence: bool = False
    contains_substitute: bool = False
    entry_count: int = 0
    eligible_for_weekly_holiday_allowance: bool = False
    weekly_holiday_allowance_hours: Decimal = Decimal("0")
    ineligibility_reasons: list[IneligibilityReason] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "week_number": self.week_number,
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "total_work_hours": str(self.total_work_hours),
            "contains_tardy": self.contains_tardy,
            "contains_absence": self.contains_absence,
            "contains_substitute": self.contains_substitute,
            "entry_count": self.entry_count,
            "eligible_for_weekly_holiday_allowance": self.eligible_for_weekly_holiday_allowance,
            "weekly_holiday_allowance_hours": str(self.weekly_holiday_allowance_hours),
            "ineligibility_reasons": [r.value for r in self.ineligibility_reasons],
        }


@dataclass
class PayrollBreakdown:
    """Derived wage breakdown for one teacher and one period (not persisted)."""

    hourly_total: Decimal
    weekly_holiday_allowance: Decimal
    weekly_holiday_allowance_hours: Decimal
    base_salary_total: Decimal
    adjustments: list[Adjustment]
    deduction_details: list[DeductionDetail]
    total_work_hours: Decimal
    weekly_summaries: list[WeeklySummary]
    gross_pay: Decimal
    deductions_total: Decimal
    net_pay: Decimal

    @property
    def earning_adjustments(self) -> list[Adjustment]:
        return [a for a in self.adjustments if not a.is_deduction]

    @property
    def deduction_adjustments(self) -> list[Adjustment]:
        return [a for a in self.adjustments if a.is_deduction]

    @property
    def adjustment_total(self) -> Decimal:
        """Sum of earning adjustments."""
        return sum((a.amount for a in self.earning_adjustments), Decimal("0"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "hourly_total": str(self.hourly_total),
            "weekly_holiday_allowance": str(self.weekly_holiday_allowance),
            "weekly_holiday_allowance_hours": str(self.weekly_holiday_allowance_hours),
            "base_salary_total": str(self.base_salary_total),
            "adjustments": [a.to_dict() for a in self.adjustments],
            "deduction_details": [d.to_dict() for d in self.deduction_details],
            "total_work_hours": str(self.total_work_hours),
            "weekly_summaries": [w.to_dict() for w in self.weekly_summaries],
            "gross_pay": str(self.gross_pay),
            "deductions_total": str(self.deductions_total),
            "net_pay": str(self.net_pay),
        }
