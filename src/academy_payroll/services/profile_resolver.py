"""Active payroll profile resolution."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy_payroll.exceptions import PayrollProfileNotFoundError
from academy_payroll.models import PayrollProfile


class ProfileResolver:
    """Resolves the payroll profile that applies to a payroll period.

    Selection:
    - effective range must overlap ``[period_start, period_end]`` (inclusive)
    - latest ``effective_from`` wins when several overlap
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve_active(
        self,
        teacher_id: UUID,
        period_start: date,
        period_end: date,
    ) -> PayrollProfile:
        """Resolve the active profile for one teacher.

        Raises:
            PayrollProfileNotFoundError: If no profile covers the period
        """
        profiles = await self._get_candidate_profiles([teacher_id], period_start, period_end)
        if not profiles:
            raise PayrollProfileNotFoundError(teacher_id, period_start, period_end)
        return profiles[0]

    async def resolve_many(
        self,
        teacher_ids: Iterable[UUID],
        period_start: date,
        period_end: date,
    ) -> dict[UUID, PayrollProfile]:
        """Resolve profiles for many teachers. Teachers without one are omitted."""
        ids = list(teacher_ids)
        if not ids:
            return {}
        resolved: dict[UUID, PayrollProfile] = {}
        for profile in await self._get_candidate_profiles(ids, period_start, period_end):
            resolved.setdefault(profile.teacher_id, profile)
        return resolved

    async def _get_candidate_profiles(
        self,
        teacher_ids: list[UUID],
        period_start: date,
        period_end: date,
    ) -> list[PayrollProfile]:
        result = await self.session.execute(
            select(PayrollProfile)
            .where(
                PayrollProfile.teacher_id.in_(teacher_ids),
                PayrollProfile.effective_from <= period_end,
                or_(
                    PayrollProfile.effective_to.is_(None),
                    PayrollProfile.effective_to >= period_start,
                ),
            )
            .order_by(PayrollProfile.effective_from.desc())
        )
        return list(result.scalars().all())
