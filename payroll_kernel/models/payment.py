"""
Module: payroll_kernel.models.payment
Responsibility: ORM persistence for executed payments -- the payroll audit
    trail -- and for value balances held by the ledger.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - PaymentRecord rows are append-only; UPDATE and DELETE are blocked by
      the ORM listeners in db/immutability.py.
    - seq is unique and strictly increasing in insertion order (allocated
      by SequenceService); it is the total order of the audit trail.
    - amount + tax equals the salary in force when the payment executed.
    - ValueBalance.balance never goes negative (ck_value_balance_non_negative).

Audit relevance:
    PaymentRecord is the authoritative history of what was paid, to whom,
    by whom, and how much tax was withheld.  Payment history queries are
    filtered views over it ordered by seq.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import Base
from payroll_kernel.db.types import Address, Amount, Sequence


class PaymentRecord(Base):
    """
    One executed payment.

    Contract:
        Written once by the payment processor inside the same transaction
        as the value transfer and the employee bookkeeping update.
    """

    __tablename__ = "payment_records"

    __table_args__ = (
        UniqueConstraint("seq", name="uq_payment_seq"),
        Index("idx_payment_employer_seq", "employer_address", "seq"),
        Index("idx_payment_employee_seq", "employee_address", "seq"),
    )

    seq: Mapped[Sequence] = mapped_column(nullable=False)

    employer_address: Mapped[Address] = mapped_column(nullable=False)

    employee_address: Mapped[Address] = mapped_column(nullable=False)

    # Net amount transferred to the employee
    amount: Mapped[Amount] = mapped_column(nullable=False)

    # Tax withheld
    tax: Mapped[Amount] = mapped_column(nullable=False)

    paid_at: Mapped[datetime] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return (
            f"<PaymentRecord #{self.seq} {self.employer_address} -> "
            f"{self.employee_address}: {self.amount} (tax {self.tax})>"
        )


class ValueBalance(Base):
    """Value held for one holder address (employee or the ledger custody)."""

    __tablename__ = "value_balances"

    __table_args__ = (
        UniqueConstraint("holder", name="uq_value_balance_holder"),
        CheckConstraint("balance >= 0", name="ck_value_balance_non_negative"),
    )

    holder: Mapped[Address] = mapped_column(nullable=False)

    balance: Mapped[Amount] = mapped_column(nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ValueBalance {self.holder}: {self.balance}>"
