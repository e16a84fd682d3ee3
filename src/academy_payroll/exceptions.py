"""Error taxonomy shared by calculators, services and the API layer."""

from __future__ import annotations

from datetime import date
from uuid import UUID


class PayrollError(Exception):
    """Base class for all payroll errors.

    ``message`` is user-facing and is surfaced verbatim by the API.
    """

    code = "PAYROLL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PayrollValidationError(PayrollError):
    """Raised for malformed input, before anything is read or written."""

    code = "VALIDATION_ERROR"


class PayrollNotFoundError(PayrollError):
    """Raised when a record the computation depends on does not exist."""

    code = "NOT_FOUND"


class TeacherNotFoundError(PayrollNotFoundError):
    def __init__(self, teacher_id: UUID):
        self.teacher_id = teacher_id
        super().__init__(f"Teacher {teacher_id} could not be found")


class PayrollProfileNotFoundError(PayrollNotFoundError):
    def __init__(self, teacher_id: UUID, period_start: date, period_end: date):
        self.teacher_id = teacher_id
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(
            f"No payroll profile is active for teacher {teacher_id} "
            f"between {period_start} and {period_end}"
        )


class PayrollRunNotFoundError(PayrollNotFoundError):
    def __init__(self, run_id: UUID):
        self.run_id = run_id
        super().__init__(f"Payroll run {run_id} could not be found")


class WorkLogEntryNotFoundError(PayrollNotFoundError):
    def __init__(self, entry_id: UUID):
        self.entry_id = entry_id
        super().__init__(f"Work log entry {entry_id} could not be found")


class PayrollPreconditionError(PayrollError):
    """Raised when the current state does not allow the requested action."""

    code = "PRECONDITION_FAILED"


class PayrollStorageError(PayrollError):
    """Raised when a write fails. The unit of work has been rolled back."""

    code = "STORAGE_ERROR"

    def __init__(self, message: str = "Could not save the payroll run"):
        super().__init__(message)
