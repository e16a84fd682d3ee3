"""Tests for payroll run state machine."""

import pytest

from academy_payroll.exceptions import PayrollPreconditionError
from academy_payroll.services.state_machine import (
    InvalidTransitionError,
    PayrollRunStateMachine,
    PayrollRunStatus,
)


class TestPayrollRunStateMachine:
    """Test state machine transitions."""

    def test_new_run_may_start_as_draft_or_pending(self):
        assert PayrollRunStateMachine.can_transition(None, "draft") is True
        assert PayrollRunStateMachine.can_transition(None, "pending_ack") is True
        assert PayrollRunStateMachine.can_transition(None, "confirmed") is False

    def test_valid_transitions(self):
        # save draft from any non-paid state
        assert PayrollRunStateMachine.can_transition("draft", "draft") is True
        assert PayrollRunStateMachine.can_transition("pending_ack", "draft") is True
        assert PayrollRunStateMachine.can_transition("confirmed", "draft") is True

        # request confirmation from any non-paid state
        assert PayrollRunStateMachine.can_transition("draft", "pending_ack") is True
        assert PayrollRunStateMachine.can_transition("confirmed", "pending_ack") is True

        # worker confirms
        assert PayrollRunStateMachine.can_transition("pending_ack", "confirmed") is True

        # mark paid
        assert PayrollRunStateMachine.can_transition("confirmed", "paid") is True

    def test_invalid_transitions(self):
        assert PayrollRunStateMachine.can_transition("draft", "confirmed") is False
        assert PayrollRunStateMachine.can_transition("draft", "paid") is False

        # paid is terminal
        assert PayrollRunStateMachine.can_transition("paid", "draft") is False
        assert PayrollRunStateMachine.can_transition("paid", "pending_ack") is False

    def test_enum_and_string_statuses_are_interchangeable(self):
        assert PayrollRunStateMachine.can_transition(
            PayrollRunStatus.PENDING_ACK, PayrollRunStatus.CONFIRMED
        ) is True
        assert PayrollRunStateMachine.can_transition("pending_ack", PayrollRunStatus.CONFIRMED)

    def test_validate_transition_raises(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            PayrollRunStateMachine.validate_transition("paid", "draft")

        assert exc_info.value.from_status == "paid"
        assert exc_info.value.to_status == "draft"
        assert isinstance(exc_info.value, PayrollPreconditionError)

    def test_get_next_statuses(self):
        assert PayrollRunStateMachine.get_next_statuses("confirmed") == [
            "draft",
            "paid",
            "pending_ack",
        ]
        assert PayrollRunStateMachine.get_next_statuses("paid") == []

    def test_is_terminal(self):
        assert PayrollRunStateMachine.is_terminal("paid") is True
        assert PayrollRunStateMachine.is_terminal("confirmed") is False


class TestMarkPaidPrecondition:
    """Either confirmation signal is enough to pay."""

    @pytest.mark.parametrize(
        ("run_status", "ack_status"),
        [
            ("confirmed", "confirmed"),
            ("confirmed", None),
            ("confirmed", "pending"),
            ("pending_ack", "confirmed"),
            ("draft", "confirmed"),
        ],
    )
    def test_allowed(self, run_status, ack_status):
        assert PayrollRunStateMachine.can_mark_paid(run_status, ack_status) is True
        PayrollRunStateMachine.validate_mark_paid(run_status, ack_status)

    @pytest.mark.parametrize(
        ("run_status", "ack_status"),
        [("draft", None), ("draft", "pending"), ("pending_ack", "pending")],
    )
    def test_rejected_without_confirmation(self, run_status, ack_status):
        with pytest.raises(InvalidTransitionError, match="not confirmed"):
            PayrollRunStateMachine.validate_mark_paid(run_status, ack_status)

    def test_rejected_when_already_paid(self):
        with pytest.raises(InvalidTransitionError, match="already paid"):
            PayrollRunStateMachine.validate_mark_paid("paid", "confirmed")
