"""Tests for payroll profile resolution."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from academy_payroll.exceptions import PayrollProfileNotFoundError
from academy_payroll.models import PayrollProfile, Teacher
from academy_payroll.services.profile_resolver import ProfileResolver

MARCH = (date(2025, 3, 1), date(2025, 3, 31))


async def add_teacher_with_profiles(session, *ranges):
    teacher = Teacher(teacher_id=uuid4(), name="Lee Jiho")
    session.add(teacher)
    await session.flush()
    for rate, start, end in ranges:
        session.add(
            PayrollProfile(
                teacher_id=teacher.teacher_id,
                hourly_rate=Decimal(rate),
                effective_from=start,
                effective_to=end,
            )
        )
    await session.commit()
    return teacher.teacher_id


class TestProfileResolver:
    async def test_profile_covering_period(self, session):
        teacher_id = await add_teacher_with_profiles(
            session,
            ("10000", date(2024, 1, 1), date(2025, 2, 28)),
            ("20000", date(2025, 3, 1), None),
        )

        profile = await ProfileResolver(session).resolve_active(teacher_id, *MARCH)

        assert Decimal(profile.hourly_rate) == Decimal("20000")

    async def test_latest_start_wins_when_two_overlap(self, session):
        teacher_id = await add_teacher_with_profiles(
            session,
            ("10000", date(2024, 1, 1), date(2025, 3, 15)),
            ("12000", date(2025, 3, 16), None),
        )

        profile = await ProfileResolver(session).resolve_active(teacher_id, *MARCH)

        assert Decimal(profile.hourly_rate) == Decimal("12000")

    async def test_expired_profile_not_used(self, session):
        teacher_id = await add_teacher_with_profiles(
            session, ("10000", date(2024, 1, 1), date(2025, 2, 28))
        )

        with pytest.raises(PayrollProfileNotFoundError):
            await ProfileResolver(session).resolve_active(teacher_id, *MARCH)

    async def test_resolve_many_omits_teachers_without_profile(self, session):
        with_profile = await add_teacher_with_profiles(
            session, ("10000", date(2024, 1, 1), None)
        )
        without_profile = await add_teacher_with_profiles(session)

        resolved = await ProfileResolver(session).resolve_many(
            [with_profile, without_profile], *MARCH
        )

        assert set(resolved) == {with_profile}
