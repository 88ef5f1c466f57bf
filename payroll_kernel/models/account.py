"""
Module: payroll_kernel.models.account
Responsibility: ORM persistence for the identity registry -- one row per
    registered address recording its role.
Architecture position: Kernel > Models.  May import from db/ only.
    The role vocabulary (AccountRole) lives in domain/authorization.py;
    this model stores the role value as a string.

Invariants enforced:
    - An address holds at most one role (uq_account_address).
    - The role is set once at registration and never changes; there is no
      unregistration.  An address without a row has role NONE.

Failure modes:
    - IntegrityError on a duplicate address (the registry service checks
      first and raises AlreadyRegisteredError).
"""

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import TrackedBase
from payroll_kernel.db.types import Address


class Account(TrackedBase):
    """Registered address and its role."""

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("address", name="uq_account_address"),
        Index("idx_account_role", "role"),
    )

    address: Mapped[Address] = mapped_column(nullable=False)

    # "employer" or "employee"
    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Account {self.address} ({self.role})>"
