"""
Immutable data transfer objects returned by the ledger.

Services and selectors never hand ORM instances to callers; every public
read returns one of these frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from payroll_kernel.domain.kyc import KYCStatus


@dataclass(frozen=True)
class EmployerInfo:
    address: str
    name: str
    verified: bool


@dataclass(frozen=True)
class EmployeeInfo:
    address: str
    name: str
    employer: str
    salary: int
    tax_rate: int
    is_active: bool
    kyc_status: KYCStatus
    kyc_evidence_hash: str
    last_payment_at: datetime | None

    @property
    def is_payable(self) -> bool:
        return self.is_active and self.kyc_status == KYCStatus.VERIFIED

    @property
    def has_been_paid(self) -> bool:
        return self.last_payment_at is not None


@dataclass(frozen=True)
class PaymentInfo:
    """One payment record of the audit trail."""

    seq: int
    employer: str
    employee: str
    amount: int
    tax: int
    paid_at: datetime

    @property
    def gross(self) -> int:
        return self.amount + self.tax


@dataclass(frozen=True)
class PaymentSummary:
    """Totals over a filtered payment history."""

    address: str
    payment_count: int
    total_net: int
    total_tax: int

    @property
    def total_gross(self) -> int:
        return self.total_net + self.total_tax
