"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from academy_payroll.calculators.types import Adjustment, PayrollBreakdown, WeeklySummary
from academy_payroll.services.external_substitutes import (
    ExternalSubstituteLedger,
    ExternalSubstituteRow,
)
from academy_payroll.services.payroll_run_service import MonthOverview


# ============================================================================
# Request schemas
# ============================================================================


class AdjustmentInput(BaseModel):
    """Manager-entered adjustment line."""

    label: str
    amount: Decimal
    is_deduction: bool = False

    def to_adjustment(self) -> Adjustment:
        return Adjustment(label=self.label, amount=self.amount, is_deduction=self.is_deduction)


class IncentiveInput(BaseModel):
    label: str
    amount: Decimal

    def to_adjustment(self) -> Adjustment:
        return Adjustment(label=self.label, amount=self.amount)


class PayrollRequestBody(BaseModel):
    """Schema shared by preview, save-draft and request-confirmation."""

    teacher_id: UUID
    month: str | None = Field(default=None, description="YYYY-MM; current month when omitted")
    adjustments: list[AdjustmentInput] = []
    incentives: list[IncentiveInput] = []
    message_append: str | None = None
    request_note: str | None = None


class ConfirmRequest(BaseModel):
    note: str | None = None


class ExternalPayStatusUpdate(BaseModel):
    status: str


# ============================================================================
# Breakdown schemas
# ============================================================================


class AdjustmentResponse(BaseModel):
    label: str
    amount: Decimal
    is_deduction: bool


class DeductionDetailResponse(BaseModel):
    label: str
    amount: Decimal


class WeeklySummaryResponse(BaseModel):
    """One clipped Monday-Sunday week."""

    week_number: int
    week_start: date
    week_end: date
    total_work_hours: Decimal
    contains_tardy: bool
    contains_absence: bool
    contains_substitute: bool
    entry_count: int
    eligible_for_weekly_holiday_allowance: bool
    weekly_holiday_allowance_hours: Decimal
    ineligibility_reasons: list[str]

    @classmethod
    def from_summary(cls, summary: WeeklySummary) -> "WeeklySummaryResponse":
        return cls(
            week_number=summary.week_number,
            week_start=summary.week_start,
            week_end=summary.week_end,
            total_work_hours=summary.total_work_hours,
            contains_tardy=summary.contains_tardy,
            contains_absence=summary.contains_absence,
            contains_substitute=summary.contains_substitute,
            entry_count=summary.entry_count,
            eligible_for_weekly_holiday_allowance=summary.eligible_for_weekly_holiday_allowance,
            weekly_holiday_allowance_hours=summary.weekly_holiday_allowance_hours,
            ineligibility_reasons=[r.value for r in summary.ineligibility_reasons],
        )


class BreakdownResponse(BaseModel):
    hourly_total: Decimal
    weekly_holiday_allowance: Decimal
    weekly_holiday_allowance_hours: Decimal
    base_salary_total: Decimal
    adjustment_total: Decimal
    adjustments: list[AdjustmentResponse]
    deduction_details: list[DeductionDetailResponse]
    total_work_hours: Decimal
    weekly_summaries: list[WeeklySummaryResponse]
    gross_pay: Decimal
    deductions_total: Decimal
    net_pay: Decimal

    @classmethod
    def from_breakdown(cls, breakdown: PayrollBreakdown) -> "BreakdownResponse":
        return cls(
            hourly_total=breakdown.hourly_total,
            weekly_holiday_allowance=breakdown.weekly_holiday_allowance,
            weekly_holiday_allowance_hours=breakdown.weekly_holiday_allowance_hours,
            base_salary_total=breakdown.base_salary_total,
            adjustment_total=breakdown.adjustment_total,
            adjustments=[
                AdjustmentResponse(label=a.label, amount=a.amount, is_deduction=a.is_deduction)
                for a in breakdown.adjustments
            ],
            deduction_details=[
                DeductionDetailResponse(label=d.label, amount=d.amount)
                for d in breakdown.deduction_details
            ],
            total_work_hours=breakdown.total_work_hours,
            weekly_summaries=[
                WeeklySummaryResponse.from_summary(w) for w in breakdown.weekly_summaries
            ],
            gross_pay=breakdown.gross_pay,
            deductions_total=breakdown.deductions_total,
            net_pay=breakdown.net_pay,
        )


class PreviewResponse(BaseModel):
    teacher_id: UUID
    month: str
    month_label: str
    contract_type: str
    breakdown: BreakdownResponse
    message: str


class DraftResponse(BaseModel):
    run_id: UUID
    status: str
    breakdown: BreakdownResponse
    message: str


class ConfirmationRequestResponse(BaseModel):
    run_id: UUID
    status: str
    net_pay: Decimal
    message: str


# ============================================================================
# Run schemas
# ============================================================================


class PayrollRunResponse(BaseModel):
    """Schema for payroll run response."""

    model_config = ConfigDict(from_attributes=True)

    payroll_run_id: UUID
    teacher_id: UUID
    payroll_profile_id: UUID | None = None
    period_start: date
    period_end: date
    contract_type: str
    insurance_enrolled: bool
    hourly_total: Decimal
    weekly_holiday_allowance: Decimal
    base_salary_total: Decimal
    adjustment_total: Decimal
    gross_pay: Decimal
    deductions_total: Decimal
    net_pay: Decimal
    status: str
    message_preview: str | None = None
    meta: dict[str, Any] = {}
    requested_by: UUID | None = None
    requested_at: datetime | None = None
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class PayrollRunItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payroll_run_item_id: UUID
    item_kind: str
    label: str
    amount: Decimal
    metadata: dict[str, Any] = Field(validation_alias=AliasChoices("metadata_json", "metadata"))
    order_index: int
    item_hash: str


class AcknowledgementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payroll_acknowledgement_id: UUID
    status: str
    requested_at: datetime
    confirmed_at: datetime | None = None
    note: str | None = None
    updated_by: UUID | None = None


class RunDetailsResponse(BaseModel):
    run: PayrollRunResponse
    items: list[PayrollRunItemResponse]
    acknowledgement: AcknowledgementResponse | None = None


class RunListEntry(BaseModel):
    run: PayrollRunResponse
    acknowledgement: AcknowledgementResponse | None = None


class RunListResponse(BaseModel):
    month: str
    items: list[RunListEntry]


class RunStatusResponse(BaseModel):
    run_id: UUID
    status: str


class TeacherOverviewEntry(BaseModel):
    teacher_id: UUID
    teacher_name: str | None = None
    contract_type: str
    insurance_enrolled: bool
    breakdown: BreakdownResponse
    message: str
    request_note: str | None = None
    run: PayrollRunResponse | None = None
    acknowledgement: AcknowledgementResponse | None = None


class MonthOverviewResponse(BaseModel):
    """Every teacher with an active profile for the month."""

    month: str
    month_label: str
    teachers: list[TeacherOverviewEntry]

    @classmethod
    def from_overview(cls, overview: MonthOverview) -> "MonthOverviewResponse":
        return cls(
            month=overview.month.token,
            month_label=overview.month.label,
            teachers=[
                TeacherOverviewEntry(
                    teacher_id=row.teacher.teacher_id,
                    teacher_name=row.teacher.display_name,
                    contract_type=row.profile.contract_type,
                    insurance_enrolled=row.profile.insurance_enrolled,
                    breakdown=BreakdownResponse.from_breakdown(row.breakdown),
                    message=row.message,
                    request_note=row.request_note,
                    run=PayrollRunResponse.model_validate(row.run) if row.run is not None else None,
                    acknowledgement=(
                        AcknowledgementResponse.model_validate(row.acknowledgement)
                        if row.acknowledgement is not None
                        else None
                    ),
                )
                for row in overview.teachers
            ],
        )


# ============================================================================
# External substitute schemas
# ============================================================================


class ExternalSubstituteEntryResponse(BaseModel):
    entry_id: UUID
    teacher_id: UUID
    teacher_name: str | None = None
    work_date: date
    work_hours: Decimal | None = None
    notes: str | None = None
    external_teacher_name: str | None = None
    external_teacher_phone: str | None = None
    external_teacher_bank: str | None = None
    external_teacher_account: str | None = None
    external_teacher_hours: Decimal | None = None
    pay_status: str

    @classmethod
    def from_row(cls, row: ExternalSubstituteRow) -> "ExternalSubstituteEntryResponse":
        entry = row.entry
        return cls(
            entry_id=entry.work_log_entry_id,
            teacher_id=entry.teacher_id,
            teacher_name=row.teacher.display_name if row.teacher else None,
            work_date=entry.work_date,
            work_hours=entry.work_hours,
            notes=entry.notes,
            external_teacher_name=entry.external_teacher_name,
            external_teacher_phone=entry.external_teacher_phone,
            external_teacher_bank=entry.external_teacher_bank,
            external_teacher_account=entry.external_teacher_account,
            external_teacher_hours=entry.external_teacher_hours,
            pay_status=entry.external_teacher_pay_status,
        )


class ExternalSubstituteSummaryResponse(BaseModel):
    total_count: int
    total_hours: Decimal
    teacher_count: int
    month_label: str


class ExternalSubstituteListResponse(BaseModel):
    month: str
    entries: list[ExternalSubstituteEntryResponse]
    summary: ExternalSubstituteSummaryResponse

    @classmethod
    def from_ledger(cls, ledger: ExternalSubstituteLedger) -> "ExternalSubstituteListResponse":
        return cls(
            month=ledger.month.token,
            entries=[ExternalSubstituteEntryResponse.from_row(r) for r in ledger.rows],
            summary=ExternalSubstituteSummaryResponse(
                total_count=ledger.summary.total_count,
                total_hours=ledger.summary.total_hours,
                teacher_count=ledger.summary.teacher_count,
                month_label=ledger.summary.month_label,
            ),
        )


class ExternalPayStatusResponse(BaseModel):
    entry_id: UUID
    pay_status: str


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
