"""Payroll run confirmation state machine with transition validation."""

from __future__ import annotations

from enum import Enum

from academy_payroll.exceptions import PayrollPreconditionError
from academy_payroll.models.payroll import AcknowledgementStatus


class PayrollRunStatus(str, Enum):
    """Payroll run status values."""

    DRAFT = "draft"
    PENDING_ACK = "pending_ack"
    CONFIRMED = "confirmed"
    PAID = "paid"


def _value(status: str | None) -> str | None:
    return getattr(status, "value", status)


class InvalidTransitionError(PayrollPreconditionError):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = _value(from_status)
        self.to_status = _value(to_status)
        self.reason = reason
        msg = f"Invalid transition from '{self.from_status}' to '{self.to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PayrollRunStateMachine:
    """State machine for payroll run status transitions.

    Allowed transitions:
    - any non-paid status → draft (save draft)
    - any non-paid status → pending_ack (request confirmation)
    - pending_ack → confirmed (worker confirms)
    - confirmed → paid (mark paid; see ``can_mark_paid``)

    ``paid`` is terminal.
    """

    VALID_TRANSITIONS: dict[str, frozenset[str]] = {
        PayrollRunStatus.DRAFT.value: frozenset(
            {PayrollRunStatus.DRAFT.value, PayrollRunStatus.PENDING_ACK.value}
        ),
        PayrollRunStatus.PENDING_ACK.value: frozenset(
            {
                PayrollRunStatus.DRAFT.value,
                PayrollRunStatus.PENDING_ACK.value,
                PayrollRunStatus.CONFIRMED.value,
            }
        ),
        PayrollRunStatus.CONFIRMED.value: frozenset(
            {
                PayrollRunStatus.DRAFT.value,
                PayrollRunStatus.PENDING_ACK.value,
                PayrollRunStatus.PAID.value,
            }
        ),
        PayrollRunStatus.PAID.value: frozenset(),
    }

    @classmethod
    def can_transition(cls, from_status: str | None, to_status: str) -> bool:
        """Check if a transition is valid. ``None`` means the run does not exist yet."""
        if from_status is None:
            return _value(to_status) in (
                PayrollRunStatus.DRAFT.value,
                PayrollRunStatus.PENDING_ACK.value,
            )
        allowed = cls.VALID_TRANSITIONS.get(_value(from_status), frozenset())
        return _value(to_status) in allowed

    @classmethod
    def validate_transition(cls, from_status: str | None, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            reason = "paid runs cannot change" if cls.is_terminal(from_status) else None
            raise InvalidTransitionError(from_status or "none", to_status, reason)

    @classmethod
    def can_mark_paid(cls, run_status: str, ack_status: str | None) -> bool:
        """Either the run or its acknowledgement being confirmed is enough."""
        return (
            _value(run_status) == PayrollRunStatus.CONFIRMED.value
            or _value(ack_status) == AcknowledgementStatus.CONFIRMED.value
        )

    @classmethod
    def validate_mark_paid(cls, run_status: str, ack_status: str | None) -> None:
        if cls.is_terminal(run_status):
            raise InvalidTransitionError(
                run_status, PayrollRunStatus.PAID, "run is already paid"
            )
        if not cls.can_mark_paid(run_status, ack_status):
            raise InvalidTransitionError(
                run_status,
                PayrollRunStatus.PAID,
                "the teacher has not confirmed this payroll run yet",
            )

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return sorted(cls.VALID_TRANSITIONS.get(_value(current_status), frozenset()))

    @classmethod
    def is_terminal(cls, status: str | None) -> bool:
        return _value(status) == PayrollRunStatus.PAID.value
