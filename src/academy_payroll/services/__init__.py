"""Payroll services."""

from academy_payroll.services.external_substitutes import ExternalSubstituteService
from academy_payroll.services.notifications import ConfirmationNotifier, LoggingNotifier
from academy_payroll.services.payroll_run_service import (
    MonthOverview,
    PayrollRequest,
    PayrollRunService,
    RunDetails,
    RunResult,
)
from academy_payroll.services.profile_resolver import ProfileResolver
from academy_payroll.services.run_persister import RunPersister
from academy_payroll.services.state_machine import (
    InvalidTransitionError,
    PayrollRunStateMachine,
    PayrollRunStatus,
)
from academy_payroll.services.work_log_service import WorkLogService

__all__ = [
    "ExternalSubstituteService",
    "ConfirmationNotifier",
    "LoggingNotifier",
    "MonthOverview",
    "PayrollRequest",
    "PayrollRunService",
    "RunDetails",
    "RunResult",
    "ProfileResolver",
    "RunPersister",
    "InvalidTransitionError",
    "PayrollRunStateMachine",
    "PayrollRunStatus",
    "WorkLogService",
]
