"""ORM models."""

from academy_payroll.models.base import Base, TimestampMixin, utc_now
from academy_payroll.models.payroll import (
    AcknowledgementStatus,
    PayrollAcknowledgement,
    PayrollRun,
    PayrollRunItem,
    RunItemKind,
)
from academy_payroll.models.teacher import ContractType, PayrollProfile, Teacher
from academy_payroll.models.work_log import (
    ExternalPayStatus,
    ReviewStatus,
    SubstituteType,
    WorkLogEntry,
    WorkLogStatus,
    requires_work_hours,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "utc_now",
    "AcknowledgementStatus",
    "PayrollAcknowledgement",
    "PayrollRun",
    "PayrollRunItem",
    "RunItemKind",
    "ContractType",
    "PayrollProfile",
    "Teacher",
    "ExternalPayStatus",
    "ReviewStatus",
    "SubstituteType",
    "WorkLogEntry",
    "WorkLogStatus",
    "requires_work_hours",
]
