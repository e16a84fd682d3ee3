"""Atomic persistence of payroll runs, items and acknowledgements."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from academy_payroll.calculators.line_builder import RunItemCandidate
from academy_payroll.exceptions import PayrollStorageError
from academy_payroll.models import PayrollAcknowledgement, PayrollRun, PayrollRunItem

logger = logging.getLogger(__name__)


class RunPersister:
    """Reads and writes the run aggregate (run row, item set, acknowledgement).

    Key invariants:
    1. One run per (teacher_id, period_start, period_end)
    2. The item set is replaced wholesale, never patched
    3. Item delete, item insert, run upsert and acknowledgement upsert
       succeed or fail together; on failure the session is rolled back
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_run(
        self,
        teacher_id: UUID,
        period_start: date,
        period_end: date,
    ) -> PayrollRun | None:
        result = await self.session.execute(
            select(PayrollRun).where(
                PayrollRun.teacher_id == teacher_id,
                PayrollRun.period_start == period_start,
                PayrollRun.period_end == period_end,
            )
        )
        return result.scalar_one_or_none()

    async def get_run(self, payroll_run_id: UUID) -> PayrollRun | None:
        result = await self.session.execute(
            select(PayrollRun).where(PayrollRun.payroll_run_id == payroll_run_id)
        )
        return result.scalar_one_or_none()

    async def get_items(self, payroll_run_id: UUID) -> list[PayrollRunItem]:
        """Items of a run in display order."""
        result = await self.session.execute(
            select(PayrollRunItem)
            .where(PayrollRunItem.payroll_run_id == payroll_run_id)
            .order_by(PayrollRunItem.order_index)
        )
        return list(result.scalars().all())

    async def get_acknowledgement(self, payroll_run_id: UUID) -> PayrollAcknowledgement | None:
        result = await self.session.execute(
            select(PayrollAcknowledgement).where(
                PayrollAcknowledgement.payroll_run_id == payroll_run_id
            )
        )
        return result.scalar_one_or_none()

    async def get_acknowledgements(
        self, payroll_run_ids: Iterable[UUID]
    ) -> dict[UUID, PayrollAcknowledgement]:
        ids = list(payroll_run_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            select(PayrollAcknowledgement).where(PayrollAcknowledgement.payroll_run_id.in_(ids))
        )
        return {ack.payroll_run_id: ack for ack in result.scalars().all()}

    @staticmethod
    def build_item_rows(
        payroll_run_id: UUID, candidates: Iterable[RunItemCandidate]
    ) -> list[PayrollRunItem]:
        return [
            PayrollRunItem(
                payroll_run_id=payroll_run_id,
                item_kind=candidate.item_kind.value,
                label=candidate.label,
                amount=candidate.amount,
                metadata_json=candidate.metadata,
                order_index=candidate.order_index,
                item_hash=candidate.item_hash,
            )
            for candidate in candidates
        ]

    async def save(
        self,
        run: PayrollRun,
        candidates: list[RunItemCandidate],
        acknowledgement: PayrollAcknowledgement | None = None,
    ) -> None:
        """Replace the run's items and upsert the run (and acknowledgement).

        ``run`` is either a row loaded from this session or a new instance
        with ``payroll_run_id`` already assigned.

        Raises:
            PayrollStorageError: If any write fails; nothing is kept
        """
        run_id = run.payroll_run_id
        teacher_id = run.teacher_id
        period = (run.period_start, run.period_end)

        try:
            await self.session.execute(
                delete(PayrollRunItem).where(PayrollRunItem.payroll_run_id == run_id)
            )
            self.session.add(run)
            # Run row first so items and acknowledgement can reference it
            await self.session.flush()
            self.session.add_all(self.build_item_rows(run_id, candidates))
            if acknowledgement is not None:
                self.session.add(acknowledgement)
            await self.session.flush()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception(
                "Failed to persist payroll run %s (teacher=%s period=%s..%s)",
                run_id,
                teacher_id,
                period[0],
                period[1],
            )
            raise PayrollStorageError() from exc

    async def commit(self, payroll_run_id: UUID) -> None:
        """Commit the unit of work.

        Raises:
            PayrollStorageError: If the commit fails; the session is rolled back
        """
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Failed to commit payroll run %s", payroll_run_id)
            raise PayrollStorageError() from exc
