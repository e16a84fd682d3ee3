"""API routes."""

from academy_payroll.api.routes.external_substitutes import router as external_substitutes_router
from academy_payroll.api.routes.health import router as health_router
from academy_payroll.api.routes.payroll_runs import router as payroll_runs_router

__all__ = ["external_substitutes_router", "health_router", "payroll_runs_router"]
