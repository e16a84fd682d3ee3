"""Deduction-detail providers.

Deduction details (insurance, withholding) are computed outside the
wage calculation and handed to the merger as finished line items.
Rates here reproduce the organization's existing setup; they are not a
statement of any jurisdiction's tax law.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from academy_payroll.calculators.types import DeductionDetail, ProfileSnapshot
from academy_payroll.models.teacher import ContractType


class DeductionProvider(Protocol):
    def compute(self, profile: ProfileSnapshot, gross_pay: Decimal) -> list[DeductionDetail]:
        """Return deduction details for the given gross pay."""
        ...


class NoDeductions:
    """Provider that never deducts anything."""

    def compute(self, profile: ProfileSnapshot, gross_pay: Decimal) -> list[DeductionDetail]:
        return []


class StatutoryDeductionProvider:
    """Insurance withholding for enrolled employees, flat withholding for freelancers."""

    HEALTH_INSURANCE_RATE = Decimal("0.045")
    NATIONAL_PENSION_RATE = Decimal("0.03545")
    LONG_TERM_CARE_RATE = Decimal("0.1281")
    EMPLOYMENT_INSURANCE_RATE = Decimal("0.009")
    FREELANCER_WITHHOLDING_RATE = Decimal("0.033")

    def __init__(self, quantum: Decimal = Decimal("1")):
        self.quantum = quantum

    def _round(self, amount: Decimal) -> Decimal:
        return amount.quantize(self.quantum, rounding=ROUND_HALF_UP)

    def compute(self, profile: ProfileSnapshot, gross_pay: Decimal) -> list[DeductionDetail]:
        if profile.contract_type == ContractType.EMPLOYEE and profile.insurance_enrolled:
            return [
                DeductionDetail(
                    "Health insurance (4.5%)",
                    self._round(gross_pay * self.HEALTH_INSURANCE_RATE),
                ),
                DeductionDetail(
                    "National pension (3.545%)",
                    self._round(gross_pay * self.NATIONAL_PENSION_RATE),
                ),
                DeductionDetail(
                    "Long-term care insurance (12.81%)",
                    self._round(
                        gross_pay * self.NATIONAL_PENSION_RATE * self.LONG_TERM_CARE_RATE
                    ),
                ),
                DeductionDetail(
                    "Employment insurance (0.9%)",
                    self._round(gross_pay * self.EMPLOYMENT_INSURANCE_RATE),
                ),
            ]

        if profile.contract_type == ContractType.FREELANCER:
            return [
                DeductionDetail(
                    "Freelancer withholding (3.3%)",
                    self._round(gross_pay * self.FREELANCER_WITHHOLDING_RATE),
                )
            ]

        return []
