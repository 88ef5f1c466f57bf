"""
Module: payroll_kernel.models.audit_event
Responsibility: ORM persistence for the tamper-evident audit hash chain.
    Every event the ledger emits (registration, KYC transition, salary/tax
    change, payment) is recorded here.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced:
    - Audit records are append-only; no UPDATE or DELETE (ORM listeners).
    - Hash chain integrity: hash = H(entity_type | entity_id | action |
      payload_hash | prev_hash).  Validated by AuditorService.
    - seq is monotonically increasing, allocated by SequenceService.

Failure modes:
    - ImmutabilityViolationError on any UPDATE/DELETE attempt.
    - AuditChainBrokenError when chain validation detects a hash mismatch.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import Base
from payroll_kernel.db.types import Address, PayloadHash, Sequence


class AuditAction(str, Enum):
    """Events emitted by the ledger.

    Contract: every successful state-changing operation records exactly
    one AuditEvent with one of these actions.
    """

    # Identity registry
    EMPLOYER_REGISTERED = "employer_registered"
    EMPLOYEE_REGISTERED = "employee_registered"

    # Employment terms
    SALARY_UPDATED = "salary_updated"
    TAX_RATE_UPDATED = "tax_rate_updated"
    EMPLOYEE_DEACTIVATED = "employee_deactivated"

    # KYC workflow
    KYC_REQUESTED = "kyc_requested"
    KYC_VERIFIED = "kyc_verified"
    KYC_REJECTED = "kyc_rejected"

    # Payments
    PAYMENT_PROCESSED = "payment_processed"


class AuditEvent(Base):
    """
    Audit event with hash chain for tamper evidence.

    Guarantees:
        - seq is globally unique and monotonically increasing.
        - hash = H(entity_type | entity_id | action | payload_hash | prev_hash).
        - prev_hash is None only for the genesis event.

    Non-goals:
        - This model does NOT enforce hash correctness at INSERT time;
          that is the responsibility of AuditorService.
    """

    __tablename__ = "audit_events"

    __table_args__ = (
        Index("idx_audit_entity", "entity_type", "entity_id"),
        Index("idx_audit_action", "action"),
        Index("idx_audit_occurred", "occurred_at"),
    )

    seq: Mapped[Sequence] = mapped_column(
        nullable=False,
        unique=True,
    )

    # "Employer", "Employee" or "PaymentRecord"
    entity_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    # Address of the employer/employee, or the payment record seq
    entity_id: Mapped[Address] = mapped_column(nullable=False)

    action: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    # Caller whose operation emitted the event
    actor: Mapped[Address] = mapped_column(nullable=False)

    occurred_at: Mapped[datetime] = mapped_column(nullable=False)

    payload: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
    )

    payload_hash: Mapped[PayloadHash] = mapped_column(nullable=False)

    # Hash of the previous audit event (null for the first event)
    prev_hash: Mapped[PayloadHash | None] = mapped_column(nullable=True)

    hash: Mapped[PayloadHash] = mapped_column(nullable=False)

    @property
    def audit_action(self) -> AuditAction:
        return AuditAction(self.action)

    @property
    def is_genesis(self) -> bool:
        """First event in the hash chain."""
        return self.prev_hash is None

    def __repr__(self) -> str:
        return f"<AuditEvent {self.action} on {self.entity_type}:{self.entity_id}>"
