"""Work-log (attendance) entry model."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from academy_payroll.models.base import Base, TimestampMixin


class WorkLogStatus(str, Enum):
    """Attendance status recorded for one calendar day."""

    WORK = "work"
    TARDY = "tardy"
    ABSENCE = "absence"
    SUBSTITUTE = "substitute"


class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SubstituteType(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


class ExternalPayStatus(str, Enum):
    """Pay status of an external substitute, independent of any payroll run."""

    PENDING = "pending"
    COMPLETED = "completed"


# Statuses whose work_hours count toward the teacher's own hour total
HOUR_BEARING_STATUSES = frozenset(
    s.value for s in (WorkLogStatus.WORK, WorkLogStatus.TARDY, WorkLogStatus.SUBSTITUTE)
)


def requires_work_hours(status: str) -> bool:
    """Whether entries with this status carry hours worked by the teacher."""
    return getattr(status, "value", status) in HOUR_BEARING_STATUSES


class WorkLogEntry(Base, TimestampMixin):
    """One teacher, one calendar date.

    Rows are produced and reviewed by the work-log editor; the payroll
    engine only reads approved rows and updates the external pay status.
    """

    __tablename__ = "work_log_entry"

    work_log_entry_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    teacher_id: Mapped[UUID] = mapped_column(
        ForeignKey("teacher.teacher_id", ondelete="CASCADE"),
        nullable=False,
    )
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    work_hours: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)

    # Substitute details (status = substitute only)
    substitute_type: Mapped[str | None] = mapped_column(String, nullable=True)
    substitute_teacher_id: Mapped[UUID | None] = mapped_column(nullable=True)
    external_teacher_name: Mapped[str | None] = mapped_column(String, nullable=True)
    external_teacher_phone: Mapped[str | None] = mapped_column(String, nullable=True)
    external_teacher_bank: Mapped[str | None] = mapped_column(String, nullable=True)
    external_teacher_account: Mapped[str | None] = mapped_column(String, nullable=True)
    external_teacher_hours: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    external_teacher_pay_status: Mapped[str] = mapped_column(
        String, nullable=False, default=ExternalPayStatus.PENDING.value
    )

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    review_status: Mapped[str] = mapped_column(
        String, nullable=False, default=ReviewStatus.PENDING.value
    )
    review_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[UUID | None] = mapped_column(nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('work', 'tardy', 'absence', 'substitute')",
            name="work_log_entry_status_check",
        ),
        CheckConstraint(
            "review_status IN ('pending', 'approved', 'rejected')",
            name="work_log_entry_review_status_check",
        ),
        CheckConstraint(
            "substitute_type IS NULL OR substitute_type IN ('internal', 'external')",
            name="work_log_entry_substitute_type_check",
        ),
        CheckConstraint(
            "external_teacher_pay_status IN ('pending', 'completed')",
            name="work_log_entry_external_pay_status_check",
        ),
        Index("work_log_entry_teacher_date_idx", "teacher_id", "work_date"),
    )

    @property
    def is_external_substitute(self) -> bool:
        return (
            self.status == WorkLogStatus.SUBSTITUTE
            and self.substitute_type == SubstituteType.EXTERNAL
        )
