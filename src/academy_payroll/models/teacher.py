"""Teacher directory and versioned payroll profile models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from academy_payroll.models.base import Base, TimestampMixin


class ContractType(str, Enum):
    """Employment contract type captured on the payroll profile."""

    EMPLOYEE = "employee"
    FREELANCER = "freelancer"
    NONE = "none"


class Teacher(Base, TimestampMixin):
    """Teacher directory entry (the worker being paid)."""

    __tablename__ = "teacher"

    teacher_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="approved")

    @property
    def display_name(self) -> str | None:
        return self.name or self.email


class PayrollProfile(Base, TimestampMixin):
    """Versioned pay settings for one teacher.

    At most one profile is active on any given date. ``effective_to`` is
    inclusive and open-ended when null.
    """

    __tablename__ = "payroll_profile"

    payroll_profile_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    teacher_id: Mapped[UUID] = mapped_column(
        ForeignKey("teacher.teacher_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="KRW")
    base_salary_amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    contract_type: Mapped[str] = mapped_column(
        String, nullable=False, default=ContractType.NONE.value
    )
    insurance_enrolled: Mapped[bool] = mapped_column(default=False, nullable=False)
    effective_from: Mapped[date] = mapped_column(Date, nullable=False)
    effective_to: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(nullable=True)

    __table_args__ = (
        CheckConstraint(
            "contract_type IN ('employee', 'freelancer', 'none')",
            name="payroll_profile_contract_type_check",
        ),
        CheckConstraint(
            "effective_to IS NULL OR effective_to >= effective_from",
            name="payroll_profile_dates_check",
        ),
        CheckConstraint("hourly_rate >= 0", name="payroll_profile_rate_check"),
    )

    def is_active_on(self, as_of_date: date) -> bool:
        """Check if profile is active on a given date."""
        if self.effective_from > as_of_date:
            return False
        if self.effective_to is not None and self.effective_to < as_of_date:
            return False
        return True

    def overlaps(self, period_start: date, period_end: date) -> bool:
        """Check if profile is active on any day of [period_start, period_end]."""
        if self.effective_from > period_end:
            return False
        if self.effective_to is not None and self.effective_to < period_start:
            return False
        return True
