"""Run item builder with deterministic hashing."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any
from uuid import UUID

from academy_payroll.calculators.types import PayrollBreakdown
from academy_payroll.models.payroll import RunItemKind


@dataclass
class RunItemCandidate:
    """A run item before persistence."""

    item_kind: RunItemKind
    label: str
    amount: Decimal
    order_index: int
    metadata: dict[str, Any] = field(default_factory=dict)
    item_hash: str = ""

    def to_canonical_dict(self, run_id: UUID) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "run_id": str(run_id),
            "order_index": self.order_index,
            "item_kind": self.item_kind.value,
            "label": self.label,
            "amount": str(self.amount),
            "metadata": self.metadata,
        }


class RunItemBuilder:
    """Builds the ordered item list for a payroll run.

    Order (non-negotiable):
    1. hourly wages (always)
    2. weekly holiday allowance (only if > 0)
    3. base salary (only if > 0)
    4. earning adjustments, input order
    5. deduction details, provider order
    6. deduction adjustments, input order
    7. one ``info`` item carrying hour totals and weekly summaries
    """

    HOURLY_LABEL = "Hourly wages"
    ALLOWANCE_LABEL = "Weekly holiday allowance"
    BASE_SALARY_LABEL = "Base salary"
    ADDITION_PREFIX = "Addition"
    DEDUCTION_PREFIX = "Deduction"
    INFO_LABEL = "Total work hours"

    @staticmethod
    def compute_item_hash(run_id: UUID, item: RunItemCandidate) -> str:
        """Identical inputs produce identical hashes."""
        canonical = item.to_canonical_dict(run_id)
        json_str = json.dumps(canonical, sort_keys=True, default=str)
        return hashlib.sha256(json_str.encode()).hexdigest()

    @classmethod
    def build(cls, run_id: UUID, breakdown: PayrollBreakdown) -> list[RunItemCandidate]:
        items: list[RunItemCandidate] = []

        def push(
            kind: RunItemKind,
            label: str,
            amount: Decimal,
            metadata: dict[str, Any] | None = None,
        ) -> None:
            item = RunItemCandidate(
                item_kind=kind,
                label=label,
                amount=amount,
                order_index=len(items),
                metadata=metadata or {},
            )
            item.item_hash = cls.compute_item_hash(run_id, item)
            items.append(item)

        push(
            RunItemKind.EARNING,
            cls.HOURLY_LABEL,
            breakdown.hourly_total,
            {"total_work_hours": str(breakdown.total_work_hours)},
        )
        if breakdown.weekly_holiday_allowance > 0:
            push(
                RunItemKind.EARNING,
                cls.ALLOWANCE_LABEL,
                breakdown.weekly_holiday_allowance,
                {
                    "weekly_holiday_allowance_hours": str(
                        breakdown.weekly_holiday_allowance_hours
                    )
                },
            )
        if breakdown.base_salary_total > 0:
            push(RunItemKind.EARNING, cls.BASE_SALARY_LABEL, breakdown.base_salary_total)

        for addition in breakdown.earning_adjustments:
            push(RunItemKind.EARNING, f"{cls.ADDITION_PREFIX} · {addition.label}", addition.amount)

        for detail in breakdown.deduction_details:
            push(RunItemKind.DEDUCTION, f"{cls.DEDUCTION_PREFIX} · {detail.label}", detail.amount)

        for deduction in breakdown.deduction_adjustments:
            push(
                RunItemKind.DEDUCTION,
                f"{cls.DEDUCTION_PREFIX} · {deduction.label}",
                deduction.amount,
                {"adjustment": True},
            )

        push(
            RunItemKind.INFO,
            cls.INFO_LABEL,
            Decimal("0"),
            {
                "total_work_hours": str(breakdown.total_work_hours),
                "weekly_holiday_allowance_hours": str(breakdown.weekly_holiday_allowance_hours),
                "weekly_summaries": [w.to_dict() for w in breakdown.weekly_summaries],
            },
        )

        return items

    @staticmethod
    def sum_by_kind(items: list[RunItemCandidate]) -> dict[RunItemKind, Decimal]:
        """Sum item amounts by kind."""
        totals: dict[RunItemKind, Decimal] = {kind: Decimal("0") for kind in RunItemKind}
        for item in items:
            totals[item.item_kind] += item.amount
        return totals
