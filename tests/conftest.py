"""Pytest fixtures for academy payroll tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from academy_payroll.config import Settings
from academy_payroll.models import Base, PayrollProfile, Teacher

# In-memory SQLite shared across connections of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        org_timezone="Asia/Seoul",
        currency="KRW",
        currency_quantum=Decimal("1"),
        weekly_allowance_min_hours=Decimal("15"),
        weekly_allowance_hours=Decimal("8"),
        substitute_blocks_allowance=False,
        engine_version="test",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
    )


@pytest_asyncio.fixture
async def engine():
    """Create a fresh test database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def teacher(session: AsyncSession) -> Teacher:
    """A teacher with an open-ended hourly profile (15,000 KRW, no contract)."""
    teacher = Teacher(teacher_id=uuid4(), name="Kim Minji", email="minji@example.com")
    session.add(teacher)
    await session.flush()
    session.add(
        PayrollProfile(
            teacher_id=teacher.teacher_id,
            hourly_rate=Decimal("15000"),
            contract_type="none",
            insurance_enrolled=False,
            effective_from=date(2024, 1, 1),
        )
    )
    await session.commit()
    return teacher
