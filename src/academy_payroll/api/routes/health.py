"""Health check endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from academy_payroll import __version__
from academy_payroll.api.dependencies import DbSession
from academy_payroll.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    database: str
    database_dialect: str
    version: str
    engine_version: str


class ReadinessResponse(BaseModel):
    """Settings the payroll computation depends on."""

    status: str
    org_timezone: str
    currency: str


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check(db: DbSession) -> HealthResponse:
    """API and database health, with the calculator version stamped into runs."""
    database = "healthy"
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        database = "unhealthy"

    return HealthResponse(
        status="healthy" if database == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        database=database,
        database_dialect=db.get_bind().dialect.name,
        version=__version__,
        engine_version=get_settings().engine_version,
    )


@router.get("/ready", response_model=ReadinessResponse, status_code=status.HTTP_200_OK)
async def readiness_check() -> ReadinessResponse:
    settings = get_settings()
    return ReadinessResponse(
        status="ready", org_timezone=settings.org_timezone, currency=settings.currency
    )


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
