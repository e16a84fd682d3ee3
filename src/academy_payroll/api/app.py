"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from academy_payroll.api.routes import (
    external_substitutes_router,
    health_router,
    payroll_runs_router,
)
from academy_payroll.database import dispose_db, init_db
from academy_payroll.exceptions import (
    PayrollError,
    PayrollNotFoundError,
    PayrollPreconditionError,
    PayrollStorageError,
    PayrollValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[PayrollError], int] = {
    PayrollValidationError: 422,
    PayrollNotFoundError: 404,
    PayrollPreconditionError: 409,
    PayrollStorageError: 500,
}


def status_code_for(exc: PayrollError) -> int:
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return code
    return 400


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    init_db()
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Academy Payroll API",
        description="Monthly teacher payroll computation and confirmation",
        version="1.0.0",
        lifespan=lifespan,
    )

    @app.exception_handler(PayrollError)
    async def payroll_error_handler(request: Request, exc: PayrollError) -> JSONResponse:
        """Surface payroll errors with their user-facing message."""
        code = status_code_for(exc)
        if code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=code,
            content={"detail": exc.message, "code": exc.code},
        )

    app.include_router(health_router)
    app.include_router(payroll_runs_router, prefix="/api/v1")
    app.include_router(external_substitutes_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
