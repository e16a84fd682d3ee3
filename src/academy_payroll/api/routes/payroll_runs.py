"""Payroll run API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from academy_payroll.api.dependencies import ActorId, DbSession, RequiredActorId
from academy_payroll.api.schemas import (
    AcknowledgementResponse,
    BreakdownResponse,
    ConfirmationRequestResponse,
    ConfirmRequest,
    DraftResponse,
    ErrorResponse,
    MonthOverviewResponse,
    PayrollRequestBody,
    PayrollRunItemResponse,
    PayrollRunResponse,
    PreviewResponse,
    RunDetailsResponse,
    RunListEntry,
    RunListResponse,
    RunStatusResponse,
)
from academy_payroll.calculators.month_range import resolve_month_range
from academy_payroll.config import get_settings
from academy_payroll.services.payroll_run_service import PayrollRequest, PayrollRunService

router = APIRouter(prefix="/payroll", tags=["payroll"])


def _to_request(payload: PayrollRequestBody, actor_id: UUID | None) -> PayrollRequest:
    return PayrollRequest(
        teacher_id=payload.teacher_id,
        month=payload.month,
        adjustments=[a.to_adjustment() for a in payload.adjustments],
        incentives=[i.to_adjustment() for i in payload.incentives],
        message_append=payload.message_append,
        request_note=payload.request_note,
        actor_id=actor_id,
    )


@router.post(
    "/preview",
    response_model=PreviewResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def preview_payroll(
    db: DbSession,
    actor_id: ActorId,
    payload: PayrollRequestBody,
) -> PreviewResponse:
    """Compute a teacher's payroll for a month without saving it."""
    computed = await PayrollRunService(db).preview(_to_request(payload, actor_id))
    return PreviewResponse(
        teacher_id=payload.teacher_id,
        month=computed.month.token,
        month_label=computed.month.label,
        contract_type=computed.profile.contract_type,
        breakdown=BreakdownResponse.from_breakdown(computed.breakdown),
        message=computed.message,
    )


@router.post(
    "/runs/draft",
    response_model=DraftResponse,
    status_code=status.HTTP_200_OK,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def save_draft(
    db: DbSession,
    actor_id: ActorId,
    payload: PayrollRequestBody,
) -> DraftResponse:
    """Save (or overwrite) the month's run as a draft."""
    result = await PayrollRunService(db).save_draft(_to_request(payload, actor_id))
    return DraftResponse(
        run_id=result.payroll_run_id,
        status=result.status,
        breakdown=BreakdownResponse.from_breakdown(result.computed.breakdown),
        message=result.computed.message,
    )


@router.post(
    "/runs/request-confirmation",
    response_model=ConfirmationRequestResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def request_confirmation(
    db: DbSession,
    actor_id: ActorId,
    payload: PayrollRequestBody,
) -> ConfirmationRequestResponse:
    """Save the run and ask the teacher to confirm it."""
    result = await PayrollRunService(db).request_confirmation(_to_request(payload, actor_id))
    return ConfirmationRequestResponse(
        run_id=result.payroll_run_id,
        status=result.status,
        net_pay=result.net_pay,
        message=result.computed.message,
    )


@router.get("/overview", response_model=MonthOverviewResponse)
async def month_overview(
    db: DbSession,
    month: Annotated[str | None, Query(description="YYYY-MM")] = None,
    teacher_id: Annotated[UUID | None, Query()] = None,
) -> MonthOverviewResponse:
    """Computed month for every teacher with a profile, next to any stored run."""
    overview = await PayrollRunService(db).month_overview(month, teacher_id)
    return MonthOverviewResponse.from_overview(overview)


@router.get("/runs", response_model=RunListResponse)
async def list_runs(
    db: DbSession,
    month: Annotated[str | None, Query(description="YYYY-MM")] = None,
    teacher_id: Annotated[list[UUID] | None, Query()] = None,
) -> RunListResponse:
    """List the month's runs with their acknowledgements."""
    month_range = resolve_month_range(month, timezone=get_settings().org_timezone)
    rows = await PayrollRunService(db).list_runs(month_range.token, teacher_id)
    return RunListResponse(
        month=month_range.token,
        items=[
            RunListEntry(
                run=PayrollRunResponse.model_validate(run),
                acknowledgement=(
                    AcknowledgementResponse.model_validate(ack) if ack is not None else None
                ),
            )
            for run, ack in rows
        ],
    )


@router.get(
    "/runs/{run_id}",
    response_model=RunDetailsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_run_details(
    db: DbSession,
    run_id: Annotated[UUID, Path()],
) -> RunDetailsResponse:
    """Get a run with its ordered items and acknowledgement."""
    details = await PayrollRunService(db).get_run_details(run_id)
    return RunDetailsResponse(
        run=PayrollRunResponse.model_validate(details.run),
        items=[PayrollRunItemResponse.model_validate(i) for i in details.items],
        acknowledgement=(
            AcknowledgementResponse.model_validate(details.acknowledgement)
            if details.acknowledgement is not None
            else None
        ),
    )


@router.post(
    "/runs/{run_id}/confirm",
    response_model=RunStatusResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def confirm_run(
    db: DbSession,
    teacher_id: RequiredActorId,
    run_id: Annotated[UUID, Path()],
    payload: ConfirmRequest | None = None,
) -> RunStatusResponse:
    """Teacher confirms a pending run. The acting teacher comes from X-Actor-ID."""
    run = await PayrollRunService(db).confirm_run(
        run_id, teacher_id, note=payload.note if payload else None
    )
    return RunStatusResponse(run_id=run.payroll_run_id, status=run.status)


@router.post(
    "/runs/{run_id}/mark-paid",
    response_model=RunStatusResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def mark_paid(
    db: DbSession,
    actor_id: ActorId,
    run_id: Annotated[UUID, Path()],
) -> RunStatusResponse:
    """Mark a confirmed run as paid."""
    run = await PayrollRunService(db).mark_paid(run_id, actor_id)
    return RunStatusResponse(run_id=run.payroll_run_id, status=run.status)
