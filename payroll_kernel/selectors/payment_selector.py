"""
Module: payroll_kernel.selectors.payment_selector
Responsibility: Read-only views over the payment audit trail, filtered to
    one employer or one employee.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Results preserve insertion order (ordered by PaymentRecord.seq).
    - A filtered view is exactly the subsequence of the full trail whose
      employer (or employee) field matches; no pagination.
"""

from sqlalchemy import select

from payroll_kernel.domain.dtos import PaymentInfo, PaymentSummary
from payroll_kernel.models.payment import PaymentRecord
from payroll_kernel.selectors.base import BaseSelector


class PaymentSelector(BaseSelector[PaymentRecord]):
    """Payment history queries."""

    def _to_dto(self, record: PaymentRecord) -> PaymentInfo:
        return PaymentInfo(
            seq=record.seq,
            employer=record.employer_address,
            employee=record.employee_address,
            amount=record.amount,
            tax=record.tax,
            paid_at=record.paid_at,
        )

    def history_for_employer(self, employer: str) -> list[PaymentInfo]:
        records = self.session.execute(
            select(PaymentRecord)
            .where(PaymentRecord.employer_address == employer)
            .order_by(PaymentRecord.seq)
        ).scalars().all()
        return [self._to_dto(r) for r in records]

    def history_for_employee(self, employee: str) -> list[PaymentInfo]:
        records = self.session.execute(
            select(PaymentRecord)
            .where(PaymentRecord.employee_address == employee)
            .order_by(PaymentRecord.seq)
        ).scalars().all()
        return [self._to_dto(r) for r in records]

    def _summary(self, address: str, column) -> PaymentSummary:
        # Totals are summed here: across many payments they can exceed the
        # 64-bit range of SQL SUM over BigInteger columns.
        rows = self.session.execute(
            select(PaymentRecord.amount, PaymentRecord.tax).where(column == address)
        ).all()
        return PaymentSummary(
            address=address,
            payment_count=len(rows),
            total_net=sum(amount for amount, _ in rows),
            total_tax=sum(tax for _, tax in rows),
        )

    def summary_for_employer(self, employer: str) -> PaymentSummary:
        return self._summary(employer, PaymentRecord.employer_address)

    def summary_for_employee(self, employee: str) -> PaymentSummary:
        return self._summary(employee, PaymentRecord.employee_address)
