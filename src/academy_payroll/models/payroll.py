"""Payroll run, run item and acknowledgement models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from academy_payroll.models.base import Base, TimestampMixin


class RunItemKind(str, Enum):
    EARNING = "earning"
    DEDUCTION = "deduction"
    INFO = "info"


class AcknowledgementStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


class PayrollRun(Base, TimestampMixin):
    """Point-in-time payroll snapshot for one teacher and one period.

    ``(teacher_id, period_start, period_end)`` identifies at most one run.
    Recomputation keeps the row (and its id) and overwrites the totals.
    ``period_end`` is the inclusive last day of the period.
    """

    __tablename__ = "payroll_run"

    payroll_run_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    teacher_id: Mapped[UUID] = mapped_column(
        ForeignKey("teacher.teacher_id", ondelete="CASCADE"),
        nullable=False,
    )
    payroll_profile_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("payroll_profile.payroll_profile_id", ondelete="SET NULL"),
        nullable=True,
    )
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)

    # Profile snapshot captured at computation time
    contract_type: Mapped[str] = mapped_column(String, nullable=False)
    insurance_enrolled: Mapped[bool] = mapped_column(nullable=False, default=False)

    # Totals
    hourly_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    weekly_holiday_allowance: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False, default=0
    )
    base_salary_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    adjustment_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    gross_pay: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    deductions_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    net_pay: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)

    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
    message_preview: Mapped[str | None] = mapped_column(Text, nullable=True)
    meta: Mapped[dict[str, Any]] = mapped_column(nullable=False, default=dict)

    requested_by: Mapped[UUID | None] = mapped_column(nullable=True)
    requested_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "teacher_id", "period_start", "period_end", name="payroll_run_teacher_period_unique"
        ),
        CheckConstraint(
            "status IN ('draft', 'pending_ack', 'confirmed', 'paid')",
            name="payroll_run_status_check",
        ),
        CheckConstraint("period_end >= period_start", name="payroll_run_dates_check"),
    )


class PayrollRunItem(Base, TimestampMixin):
    """One line of a run's breakdown.

    The full item set of a run is replaced on every recomputation.
    """

    __tablename__ = "payroll_run_item"

    payroll_run_item_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payroll_run_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_run.payroll_run_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    item_kind: Mapped[str] = mapped_column(String, nullable=False)
    label: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    metadata_json: Mapped[dict[str, Any]] = mapped_column(
        "metadata", nullable=False, default=dict
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    item_hash: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("payroll_run_id", "order_index", name="payroll_run_item_order_unique"),
        CheckConstraint(
            "item_kind IN ('earning', 'deduction', 'info')",
            name="payroll_run_item_kind_check",
        ),
    )


class PayrollAcknowledgement(Base, TimestampMixin):
    """Teacher-side confirmation record, one-to-one with a run."""

    __tablename__ = "payroll_acknowledgement"

    payroll_acknowledgement_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    payroll_run_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll_run.payroll_run_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    teacher_id: Mapped[UUID] = mapped_column(
        ForeignKey("teacher.teacher_id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=AcknowledgementStatus.PENDING.value
    )
    requested_at: Mapped[datetime] = mapped_column(nullable=False)
    confirmed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_by: Mapped[UUID | None] = mapped_column(nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed')",
            name="payroll_acknowledgement_status_check",
        ),
    )
