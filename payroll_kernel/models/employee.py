"""
Module: payroll_kernel.models.employee
Responsibility: ORM persistence for employee payroll profiles: salary, tax
    rate, KYC workflow state and payment bookkeeping.
Architecture position: Kernel > Models.  May import from db/ only.
    The KYC status vocabulary and its transition table live in
    domain/kyc.py; this model stores the status value as a string.

Invariants enforced:
    - salary >= 0 and 0 <= tax_rate <= 100 (ck_employee_salary,
      ck_employee_tax_rate, also validated by the services).
    - kyc_status only moves forward along the KYC transition table; the
      services validate every transition before persisting it.
    - An employee is payable only while is_active and kyc_status is
      "verified" (see ``is_payable``).

Failure modes:
    - IntegrityError on a CHECK violation if a caller bypasses the services.

Audit relevance:
    Each field has exactly one writer: salary/tax_rate/is_active the owning
    employer, kyc_evidence_hash the employee, kyc_status the employee
    (submit) or the administrator (decision), last_payment_at the payment
    processor.
"""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import TrackedBase
from payroll_kernel.db.types import Address, Amount, LongText


class Employee(TrackedBase):
    """Employee payroll profile."""

    __tablename__ = "employees"

    __table_args__ = (
        UniqueConstraint("address", name="uq_employee_address"),
        CheckConstraint("salary >= 0", name="ck_employee_salary"),
        CheckConstraint(
            "tax_rate >= 0 AND tax_rate <= 100", name="ck_employee_tax_rate"
        ),
    )

    address: Mapped[Address] = mapped_column(
        ForeignKey("accounts.address"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # Smallest currency unit
    salary: Mapped[Amount] = mapped_column(nullable=False)

    # Null until the first successful payment
    last_payment_at: Mapped[datetime | None] = mapped_column(nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    kyc_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="not_submitted",
    )

    # Opaque content hash of off-ledger evidence; empty until submitted
    kyc_evidence_hash: Mapped[LongText] = mapped_column(
        nullable=False,
        default="",
    )

    # Integer percentage
    tax_rate: Mapped[int] = mapped_column(
        nullable=False,
        default=0,
    )

    @property
    def is_payable(self) -> bool:
        return self.is_active and self.kyc_status == "verified"

    def __repr__(self) -> str:
        return f"<Employee {self.address}: {self.name} ({self.kyc_status})>"
