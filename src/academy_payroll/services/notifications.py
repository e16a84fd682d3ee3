"""Confirmation-pending notification port."""

from __future__ import annotations

import logging
from typing import Protocol
from uuid import UUID

logger = logging.getLogger(__name__)


class ConfirmationNotifier(Protocol):
    async def confirmation_requested(
        self,
        teacher_id: UUID,
        payroll_run_id: UUID,
        period_label: str,
        message: str,
    ) -> None:
        """Tell the teacher a payroll confirmation is pending."""
        ...


class LoggingNotifier:
    """Default notifier: records the signal in the application log only."""

    async def confirmation_requested(
        self,
        teacher_id: UUID,
        payroll_run_id: UUID,
        period_label: str,
        message: str,
    ) -> None:
        logger.info(
            "Payroll confirmation requested: teacher=%s run=%s period=%s",
            teacher_id,
            payroll_run_id,
            period_label,
        )
