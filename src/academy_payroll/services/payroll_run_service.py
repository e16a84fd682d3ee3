"""Payroll run service - manager and teacher operations on payroll runs."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from academy_payroll.calculators.engine import CalculationInput, PayrollCalculator
from academy_payroll.calculators.line_builder import RunItemBuilder
from academy_payroll.calculators.merger import normalize_adjustment
from academy_payroll.calculators.messages import append_message, compose_payroll_message
from academy_payroll.calculators.month_range import MonthRange, resolve_month_range
from academy_payroll.calculators.types import (
    Adjustment,
    PayrollBreakdown,
    PayrollPolicy,
    ProfileSnapshot,
)
from academy_payroll.config import Settings, get_settings
from academy_payroll.exceptions import (
    PayrollPreconditionError,
    PayrollRunNotFoundError,
    PayrollValidationError,
    TeacherNotFoundError,
)
from academy_payroll.models import (
    AcknowledgementStatus,
    PayrollAcknowledgement,
    PayrollRun,
    PayrollRunItem,
    Teacher,
    utc_now,
)
from academy_payroll.services.notifications import ConfirmationNotifier, LoggingNotifier
from academy_payroll.services.profile_resolver import ProfileResolver
from academy_payroll.services.run_persister import RunPersister
from academy_payroll.services.state_machine import PayrollRunStateMachine, PayrollRunStatus
from academy_payroll.services.work_log_service import WorkLogService

logger = logging.getLogger(__name__)


@dataclass
class PayrollRequest:
    """Manager input for preview, save-draft and request-confirmation."""

    teacher_id: UUID
    month: str | None = None
    adjustments: list[Adjustment | Mapping[str, Any]] = field(default_factory=list)
    incentives: list[Adjustment | Mapping[str, Any]] = field(default_factory=list)
    message_append: str | None = None
    request_note: str | None = None
    actor_id: UUID | None = None


@dataclass
class ComputedPayroll:
    """Result of a computation, before anything is stored."""

    teacher: Teacher
    profile: ProfileSnapshot
    month: MonthRange
    breakdown: PayrollBreakdown
    message: str
    adjustments: list[Adjustment]
    incentives: list[Adjustment]


@dataclass
class RunResult:
    payroll_run_id: UUID
    status: str
    computed: ComputedPayroll

    @property
    def net_pay(self) -> Decimal:
        return self.computed.breakdown.net_pay


@dataclass
class RunDetails:
    run: PayrollRun
    items: list[PayrollRunItem]
    acknowledgement: PayrollAcknowledgement | None


@dataclass
class TeacherPayrollOverview:
    """One teacher's computed month next to whatever run is stored for it."""

    teacher: Teacher
    profile: ProfileSnapshot
    breakdown: PayrollBreakdown
    message: str
    run: PayrollRun | None = None
    acknowledgement: PayrollAcknowledgement | None = None
    request_note: str | None = None


@dataclass
class MonthOverview:
    month: MonthRange
    teachers: list[TeacherPayrollOverview]


def normalize_incentive(raw: Adjustment | Mapping[str, Any]) -> Adjustment:
    """Incentives are earnings with a strictly positive amount."""
    adjustment = normalize_adjustment(raw)
    if adjustment.amount <= 0:
        raise PayrollValidationError(f"Incentive '{adjustment.label}' must be a positive amount")
    return Adjustment(label=adjustment.label, amount=adjustment.amount, is_deduction=False)


class PayrollRunService:
    """Service for managing the payroll run lifecycle.

    Operations:
    - preview: compute the breakdown and message, store nothing
    - save_draft: compute and upsert the run as ``draft``
    - request_confirmation: compute, upsert as ``pending_ack`` and reset the acknowledgement
    - confirm_run: teacher confirms a ``pending_ack`` run
    - mark_paid: move a confirmed run to ``paid``
    - get_run_details / list_runs: read models
    """

    def __init__(
        self,
        session: AsyncSession,
        calculator: PayrollCalculator | None = None,
        notifier: ConfirmationNotifier | None = None,
        settings: Settings | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.calculator = calculator or PayrollCalculator(
            policy=PayrollPolicy.from_settings(self.settings)
        )
        self.notifier = notifier or LoggingNotifier()
        self.profiles = ProfileResolver(session)
        self.work_logs = WorkLogService(session)
        self.persister = RunPersister(session)

    async def preview(self, request: PayrollRequest) -> ComputedPayroll:
        """Compute without persisting anything."""
        return await self.compute(request)

    async def compute(self, request: PayrollRequest) -> ComputedPayroll:
        """Validate input, load the teacher's data and run the calculator.

        Raises:
            PayrollValidationError: Malformed month or adjustments (checked before any read)
            TeacherNotFoundError: Unknown teacher
            PayrollProfileNotFoundError: No profile covers the month
        """
        month = resolve_month_range(request.month, timezone=self.settings.org_timezone)
        adjustments = [normalize_adjustment(a) for a in request.adjustments]
        incentives = [normalize_incentive(i) for i in request.incentives]

        teacher = await self.session.get(Teacher, request.teacher_id)
        if teacher is None:
            raise TeacherNotFoundError(request.teacher_id)

        profile = await self.profiles.resolve_active(
            request.teacher_id, month.start_date, month.end_date
        )
        snapshot = ProfileSnapshot.from_profile(profile)
        entries = await self.work_logs.fetch_approved_for_teacher(
            request.teacher_id, month.start_date, month.end_exclusive_date
        )

        breakdown = self.calculator.calculate(
            CalculationInput(
                profile=snapshot,
                period_start=month.start_date,
                period_end_exclusive=month.end_exclusive_date,
                work_logs=entries,
                adjustments=[*adjustments, *incentives],
            )
        )
        message = compose_payroll_message(
            teacher.display_name,
            month.label,
            snapshot.contract_type,
            breakdown,
            self.settings.currency,
        )
        return ComputedPayroll(
            teacher=teacher,
            profile=snapshot,
            month=month,
            breakdown=breakdown,
            message=append_message(message, request.message_append),
            adjustments=adjustments,
            incentives=incentives,
        )

    async def save_draft(self, request: PayrollRequest) -> RunResult:
        """Compute and store the run as a draft.

        The acknowledgement is left alone; the previous request stamp is cleared.
        """
        computed = await self.compute(request)
        run = await self._prepare_run(computed, request, PayrollRunStatus.DRAFT)
        run.requested_by = None
        run.requested_at = None

        candidates = RunItemBuilder.build(run.payroll_run_id, computed.breakdown)
        await self.persister.save(run, candidates)
        await self.persister.commit(run.payroll_run_id)

        logger.info(
            "Saved payroll draft %s for teacher %s (%s)",
            run.payroll_run_id,
            request.teacher_id,
            computed.month.token,
        )
        return RunResult(run.payroll_run_id, PayrollRunStatus.DRAFT.value, computed)

    async def request_confirmation(self, request: PayrollRequest) -> RunResult:
        """Compute, store as ``pending_ack`` and (re)open the acknowledgement.

        Any previous confirmation is invalidated. The note carries over
        unless the request supplies a new one. The notifier runs after
        commit and its failures are logged, not raised.
        """
        computed = await self.compute(request)
        run = await self._prepare_run(computed, request, PayrollRunStatus.PENDING_ACK)
        now = utc_now()
        run.requested_by = request.actor_id
        run.requested_at = now

        acknowledgement = await self.persister.get_acknowledgement(run.payroll_run_id)
        if acknowledgement is None:
            acknowledgement = PayrollAcknowledgement(
                payroll_run_id=run.payroll_run_id,
                teacher_id=request.teacher_id,
                note=request.request_note,
            )
        elif request.request_note is not None:
            acknowledgement.note = request.request_note
        acknowledgement.status = AcknowledgementStatus.PENDING.value
        acknowledgement.confirmed_at = None
        acknowledgement.requested_at = now
        acknowledgement.updated_by = request.actor_id

        candidates = RunItemBuilder.build(run.payroll_run_id, computed.breakdown)
        await self.persister.save(run, candidates, acknowledgement)
        await self.persister.commit(run.payroll_run_id)

        logger.info(
            "Requested payroll confirmation %s for teacher %s (%s)",
            run.payroll_run_id,
            request.teacher_id,
            computed.month.token,
        )
        await self._notify(run.payroll_run_id, computed)
        return RunResult(run.payroll_run_id, PayrollRunStatus.PENDING_ACK.value, computed)

    async def confirm_run(
        self,
        payroll_run_id: UUID,
        teacher_id: UUID,
        note: str | None = None,
    ) -> PayrollRun:
        """Teacher-side confirmation of a ``pending_ack`` run."""
        run = await self._require_run(payroll_run_id)
        if run.teacher_id != teacher_id:
            raise PayrollPreconditionError("This payroll run belongs to another teacher")
        PayrollRunStateMachine.validate_transition(run.status, PayrollRunStatus.CONFIRMED)

        acknowledgement = await self.persister.get_acknowledgement(payroll_run_id)
        if acknowledgement is None:
            raise PayrollPreconditionError("No confirmation was requested for this payroll run")

        now = utc_now()
        acknowledgement.status = AcknowledgementStatus.CONFIRMED.value
        acknowledgement.confirmed_at = now
        acknowledgement.updated_by = teacher_id
        if note is not None:
            acknowledgement.note = note
        run.status = PayrollRunStatus.CONFIRMED.value
        await self.persister.commit(payroll_run_id)

        logger.info("Teacher %s confirmed payroll run %s", teacher_id, payroll_run_id)
        return run

    async def mark_paid(self, payroll_run_id: UUID, actor_id: UUID | None = None) -> PayrollRun:
        """Mark a run paid once the run or its acknowledgement is confirmed.

        Raises:
            PayrollRunNotFoundError: Unknown run
            InvalidTransitionError: Neither signal is confirmed, or already paid
        """
        run = await self._require_run(payroll_run_id)
        acknowledgement = await self.persister.get_acknowledgement(payroll_run_id)
        PayrollRunStateMachine.validate_mark_paid(
            run.status, acknowledgement.status if acknowledgement else None
        )

        previous = run.status
        run.status = PayrollRunStatus.PAID.value
        await self.persister.commit(payroll_run_id)

        logger.info(
            "Payroll run %s marked paid (from %s) by %s", payroll_run_id, previous, actor_id
        )
        return run

    async def get_run_details(self, payroll_run_id: UUID) -> RunDetails:
        run = await self._require_run(payroll_run_id)
        return RunDetails(
            run=run,
            items=await self.persister.get_items(payroll_run_id),
            acknowledgement=await self.persister.get_acknowledgement(payroll_run_id),
        )

    async def month_overview(
        self,
        month: str | None = None,
        teacher_id: UUID | None = None,
    ) -> MonthOverview:
        """Compute the month for every teacher with an active profile.

        Each row pairs a fresh breakdown with the stored run and
        acknowledgement, if any. Adjustments saved on the run are reapplied
        and its stored message and request note win over freshly composed
        ones. Filtering to a teacher without a profile yields no rows.
        """
        month_range = resolve_month_range(month, timezone=self.settings.org_timezone)

        query = select(Teacher).order_by(Teacher.name)
        if teacher_id is not None:
            query = query.where(Teacher.teacher_id == teacher_id)
        teachers = list((await self.session.execute(query)).scalars().all())

        profiles = await self.profiles.resolve_many(
            [t.teacher_id for t in teachers], month_range.start_date, month_range.end_date
        )
        teachers = [t for t in teachers if t.teacher_id in profiles]
        teacher_ids = [t.teacher_id for t in teachers]
        if not teacher_ids:
            return MonthOverview(month=month_range, teachers=[])

        work_logs = await self.work_logs.fetch_approved(
            teacher_ids, month_range.start_date, month_range.end_exclusive_date
        )
        stored = {
            run.teacher_id: (run, ack)
            for run, ack in await self.list_runs(month_range.token, teacher_ids)
        }

        rows: list[TeacherPayrollOverview] = []
        for teacher in teachers:
            snapshot = ProfileSnapshot.from_profile(profiles[teacher.teacher_id])
            run, acknowledgement = stored.get(teacher.teacher_id, (None, None))
            meta = (run.meta or {}) if run is not None else {}
            adjustments = [
                normalize_adjustment(raw)
                for key in ("adjustments", "deduction_adjustments", "incentives")
                for raw in meta.get(key) or []
            ]

            breakdown = self.calculator.calculate(
                CalculationInput(
                    profile=snapshot,
                    period_start=month_range.start_date,
                    period_end_exclusive=month_range.end_exclusive_date,
                    work_logs=work_logs[teacher.teacher_id],
                    adjustments=adjustments,
                )
            )
            message = run.message_preview if run is not None else None
            if not message:
                message = compose_payroll_message(
                    teacher.display_name,
                    month_range.label,
                    snapshot.contract_type,
                    breakdown,
                    self.settings.currency,
                )
            rows.append(
                TeacherPayrollOverview(
                    teacher=teacher,
                    profile=snapshot,
                    breakdown=breakdown,
                    message=message,
                    run=run,
                    acknowledgement=acknowledgement,
                    request_note=meta.get("request_note"),
                )
            )
        return MonthOverview(month=month_range, teachers=rows)

    async def list_runs(
        self,
        month: str | None = None,
        teacher_ids: list[UUID] | None = None,
    ) -> list[tuple[PayrollRun, PayrollAcknowledgement | None]]:
        """Runs for one month with their acknowledgements, ordered by creation."""
        month_range = resolve_month_range(month, timezone=self.settings.org_timezone)
        query = select(PayrollRun).where(
            PayrollRun.period_start == month_range.start_date,
            PayrollRun.period_end == month_range.end_date,
        )
        if teacher_ids:
            query = query.where(PayrollRun.teacher_id.in_(teacher_ids))
        result = await self.session.execute(query.order_by(PayrollRun.created_at))
        runs = list(result.scalars().all())

        acknowledgements = await self.persister.get_acknowledgements(
            r.payroll_run_id for r in runs
        )
        return [(r, acknowledgements.get(r.payroll_run_id)) for r in runs]

    async def _require_run(self, payroll_run_id: UUID) -> PayrollRun:
        run = await self.persister.get_run(payroll_run_id)
        if run is None:
            raise PayrollRunNotFoundError(payroll_run_id)
        return run

    async def _prepare_run(
        self,
        computed: ComputedPayroll,
        request: PayrollRequest,
        to_status: PayrollRunStatus,
    ) -> PayrollRun:
        """Load or create the run row for the period and write the new snapshot onto it."""
        month = computed.month
        run = await self.persister.find_run(request.teacher_id, month.start_date, month.end_date)
        PayrollRunStateMachine.validate_transition(run.status if run else None, to_status)

        if run is None:
            run = PayrollRun(
                payroll_run_id=uuid4(),
                teacher_id=request.teacher_id,
                period_start=month.start_date,
                period_end=month.end_date,
                created_by=request.actor_id,
            )

        breakdown = computed.breakdown
        run.payroll_profile_id = computed.profile.payroll_profile_id
        run.contract_type = computed.profile.contract_type
        run.insurance_enrolled = computed.profile.insurance_enrolled
        run.hourly_total = breakdown.hourly_total
        run.weekly_holiday_allowance = breakdown.weekly_holiday_allowance
        run.base_salary_total = breakdown.base_salary_total
        run.adjustment_total = breakdown.adjustment_total
        run.gross_pay = breakdown.gross_pay
        run.deductions_total = breakdown.deductions_total
        run.net_pay = breakdown.net_pay
        run.status = to_status.value
        run.message_preview = computed.message
        run.meta = self._build_meta(computed, request)
        run.updated_at = utc_now()
        return run

    def _build_meta(self, computed: ComputedPayroll, request: PayrollRequest) -> dict[str, Any]:
        breakdown = computed.breakdown
        return {
            "month": computed.month.token,
            "engine_version": self.settings.engine_version,
            "currency": self.settings.currency,
            "total_work_hours": str(breakdown.total_work_hours),
            "weekly_holiday_allowance_hours": str(breakdown.weekly_holiday_allowance_hours),
            "weekly_summaries": [w.to_dict() for w in breakdown.weekly_summaries],
            "request_note": request.request_note,
            "adjustments": [a.to_dict() for a in computed.adjustments if not a.is_deduction],
            "deduction_adjustments": [a.to_dict() for a in computed.adjustments if a.is_deduction],
            "incentives": [i.to_dict() for i in computed.incentives],
            "deduction_details": [d.to_dict() for d in breakdown.deduction_details],
        }

    async def _notify(self, payroll_run_id: UUID, computed: ComputedPayroll) -> None:
        try:
            await self.notifier.confirmation_requested(
                teacher_id=computed.teacher.teacher_id,
                payroll_run_id=payroll_run_id,
                period_label=computed.month.label,
                message=computed.message,
            )
        except Exception:
            logger.exception(
                "Confirmation notification failed for payroll run %s", payroll_run_id
            )
