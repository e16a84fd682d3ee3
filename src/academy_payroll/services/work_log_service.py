"""Read access to approved work-log rows."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy_payroll.models import ReviewStatus, WorkLogEntry


class WorkLogService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def fetch_approved(
        self,
        teacher_ids: Iterable[UUID],
        period_start: date,
        period_end_exclusive: date,
    ) -> dict[UUID, list[WorkLogEntry]]:
        """Approved entries in ``[period_start, period_end_exclusive)``, grouped by teacher.

        Every requested teacher gets a key, possibly with an empty list.
        """
        ids = list(teacher_ids)
        grouped: dict[UUID, list[WorkLogEntry]] = {teacher_id: [] for teacher_id in ids}
        if not ids:
            return grouped

        result = await self.session.execute(
            select(WorkLogEntry)
            .where(
                WorkLogEntry.teacher_id.in_(ids),
                WorkLogEntry.review_status == ReviewStatus.APPROVED.value,
                WorkLogEntry.work_date >= period_start,
                WorkLogEntry.work_date < period_end_exclusive,
            )
            .order_by(WorkLogEntry.work_date)
        )
        for entry in result.scalars().all():
            grouped.setdefault(entry.teacher_id, []).append(entry)
        return grouped

    async def fetch_approved_for_teacher(
        self,
        teacher_id: UUID,
        period_start: date,
        period_end_exclusive: date,
    ) -> list[WorkLogEntry]:
        grouped = await self.fetch_approved([teacher_id], period_start, period_end_exclusive)
        return grouped[teacher_id]
