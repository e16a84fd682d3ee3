"""External substitute ledger endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query

from academy_payroll.api.dependencies import DbSession
from academy_payroll.api.schemas import (
    ErrorResponse,
    ExternalPayStatusResponse,
    ExternalPayStatusUpdate,
    ExternalSubstituteListResponse,
)
from academy_payroll.services.external_substitutes import ExternalSubstituteService

router = APIRouter(prefix="/payroll/external-substitutes", tags=["external-substitutes"])


@router.get("", response_model=ExternalSubstituteListResponse)
async def list_external_substitutes(
    db: DbSession,
    month: Annotated[str | None, Query(description="YYYY-MM")] = None,
) -> ExternalSubstituteListResponse:
    """List the month's approved external-substitute entries."""
    ledger = await ExternalSubstituteService(db).list_for_month(month)
    return ExternalSubstituteListResponse.from_ledger(ledger)


@router.patch(
    "/{entry_id}",
    response_model=ExternalPayStatusResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_external_pay_status(
    db: DbSession,
    entry_id: Annotated[UUID, Path()],
    payload: ExternalPayStatusUpdate,
) -> ExternalPayStatusResponse:
    entry = await ExternalSubstituteService(db).update_pay_status(entry_id, payload.status)
    return ExternalPayStatusResponse(
        entry_id=entry.work_log_entry_id, pay_status=entry.external_teacher_pay_status
    )
