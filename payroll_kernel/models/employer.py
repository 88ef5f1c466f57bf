"""
Module: payroll_kernel.models.employer
Responsibility: ORM persistence for employer profiles and the employer ->
    employees relationship index.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - One Employer row per EMPLOYER account (FK to accounts.address).
    - The relationship index is append-only: a link is written once when the
      employer registers the employee and is never moved or removed.
    - An employee appears under exactly one employer
      (uq_employer_link_employee).
    - position is the 0-based insertion order within one employer's list.

Audit relevance:
    The relationship index is the authorization anchor for salary and tax
    mutation and for payment: only the registering employer may act.
"""

from sqlalchemy import Boolean, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import Base, TrackedBase
from payroll_kernel.db.types import Address


class Employer(TrackedBase):
    """
    Employer profile.

    Contract:
        ``verified`` is always True at creation.  It is kept as the hook for
        a future approval gate; every employer-only operation checks it.
    """

    __tablename__ = "employers"

    __table_args__ = (
        UniqueConstraint("address", name="uq_employer_address"),
    )

    address: Mapped[Address] = mapped_column(
        ForeignKey("accounts.address"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    def __repr__(self) -> str:
        return f"<Employer {self.address}: {self.name}>"


class EmployerEmployeeLink(Base):
    """One entry of an employer's ordered employee list."""

    __tablename__ = "employer_employees"

    __table_args__ = (
        UniqueConstraint("employee_address", name="uq_employer_link_employee"),
        UniqueConstraint(
            "employer_address", "position", name="uq_employer_link_position"
        ),
        Index("idx_employer_link_employer", "employer_address"),
    )

    employer_address: Mapped[Address] = mapped_column(
        ForeignKey("employers.address"),
        nullable=False,
    )

    employee_address: Mapped[Address] = mapped_column(
        ForeignKey("employees.address"),
        nullable=False,
    )

    position: Mapped[int] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return (
            f"<EmployerEmployeeLink {self.employer_address}"
            f"[{self.position}] -> {self.employee_address}>"
        )
