"""External substitute ledger.

Hours covered by non-staff substitutes are paid outside the regular
teacher's payroll run. This ledger only reads those work-log rows and
flips their pay status; it never touches run state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from academy_payroll.calculators.month_range import MonthRange, resolve_month_range
from academy_payroll.config import get_settings
from academy_payroll.exceptions import (
    PayrollStorageError,
    PayrollValidationError,
    WorkLogEntryNotFoundError,
)
from academy_payroll.models import (
    ExternalPayStatus,
    ReviewStatus,
    SubstituteType,
    Teacher,
    WorkLogEntry,
    WorkLogStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class ExternalSubstituteRow:
    entry: WorkLogEntry
    teacher: Teacher | None

    @property
    def billable_hours(self) -> Decimal:
        """External hours, falling back to the entry's own hours."""
        if self.entry.external_teacher_hours is not None:
            return Decimal(self.entry.external_teacher_hours)
        if self.entry.work_hours is not None:
            return Decimal(self.entry.work_hours)
        return Decimal("0")


@dataclass
class ExternalSubstituteSummary:
    total_count: int
    total_hours: Decimal
    teacher_count: int
    month_label: str


@dataclass
class ExternalSubstituteLedger:
    month: MonthRange
    rows: list[ExternalSubstituteRow]
    summary: ExternalSubstituteSummary


def parse_pay_status(value: str) -> ExternalPayStatus:
    try:
        return ExternalPayStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ExternalPayStatus)
        raise PayrollValidationError(
            f"Invalid pay status '{value}', expected one of: {allowed}"
        ) from None


class ExternalSubstituteService:
    def __init__(self, session: AsyncSession, org_timezone: str | None = None):
        self.session = session
        self.org_timezone = org_timezone or get_settings().org_timezone

    async def list_for_month(self, month: str | None = None) -> ExternalSubstituteLedger:
        """Approved external-substitute entries dated in the month, with a summary."""
        month_range = resolve_month_range(month, timezone=self.org_timezone)
        result = await self.session.execute(
            select(WorkLogEntry, Teacher)
            .outerjoin(Teacher, Teacher.teacher_id == WorkLogEntry.teacher_id)
            .where(
                WorkLogEntry.status == WorkLogStatus.SUBSTITUTE.value,
                WorkLogEntry.substitute_type == SubstituteType.EXTERNAL.value,
                WorkLogEntry.review_status == ReviewStatus.APPROVED.value,
                WorkLogEntry.work_date >= month_range.start_date,
                WorkLogEntry.work_date < month_range.end_exclusive_date,
            )
            .order_by(WorkLogEntry.work_date)
        )
        rows = [ExternalSubstituteRow(entry=entry, teacher=teacher) for entry, teacher in result.all()]

        summary = ExternalSubstituteSummary(
            total_count=len(rows),
            total_hours=sum((row.billable_hours for row in rows), Decimal("0")),
            teacher_count=len({row.entry.teacher_id for row in rows if row.teacher is not None}),
            month_label=month_range.label,
        )
        return ExternalSubstituteLedger(month=month_range, rows=rows, summary=summary)

    async def update_pay_status(self, entry_id: UUID, status: str) -> WorkLogEntry:
        """Set the external pay status of one entry.

        Raises:
            PayrollValidationError: Unknown status value
            WorkLogEntryNotFoundError: Unknown entry
            PayrollStorageError: The update could not be saved
        """
        pay_status = parse_pay_status(status)
        entry = await self.session.get(WorkLogEntry, entry_id)
        if entry is None:
            raise WorkLogEntryNotFoundError(entry_id)

        entry.external_teacher_pay_status = pay_status.value
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Failed to update external pay status for entry %s", entry_id)
            raise PayrollStorageError("Could not update the pay status") from exc

        logger.info("External pay status of entry %s set to %s", entry_id, pay_status.value)
        return entry
