"""
AuditorService -- tamper-evident audit trail and hash chain maintenance.

Responsibility:
    Creates immutable, hash-chained audit events for every event the ledger
    emits (registrations, KYC transitions, salary and tax changes,
    deactivations, payments).  Provides chain validation for tamper
    detection and trace queries for review.

Architecture position:
    Kernel > Services -- imperative shell, called by the registry, KYC,
    employment and payment services.

Invariants enforced:
    - Sequence monotonicity via SequenceService (never raw SQL max+1).
    - Audit chain integrity: ``hash = H(entity_type | entity_id | action |
      payload_hash | prev_hash)``.  Every audit event carries a
      cryptographic link to its predecessor.
    - Append-only: audit events are never modified or deleted (ORM
      listeners in db/immutability.py).

Failure modes:
    - AuditChainBrokenError: recomputed hash does not match stored hash,
      or prev_hash does not match the predecessor's hash.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.exceptions import AuditChainBrokenError
from payroll_kernel.logging_config import get_logger
from payroll_kernel.models.audit_event import AuditAction, AuditEvent
from payroll_kernel.services.sequence_service import SequenceService
from payroll_kernel.utils.hashing import hash_audit_event, hash_payload

logger = get_logger("services.auditor")

EMPLOYER_ENTITY = "Employer"
EMPLOYEE_ENTITY = "Employee"


@dataclass(frozen=True)
class AuditTraceEntry:
    """A single entry in an audit trace."""

    seq: int
    entity_type: str
    action: AuditAction
    occurred_at: datetime
    actor: str
    payload: dict[str, Any]
    hash: str


@dataclass(frozen=True)
class AuditTrace:
    """All audit events for one address, in sequence order."""

    entity_id: str
    entries: tuple[AuditTraceEntry, ...]

    @property
    def is_empty(self) -> bool:
        return len(self.entries) == 0

    @property
    def actions(self) -> tuple[AuditAction, ...]:
        return tuple(entry.action for entry in self.entries)

    @property
    def first_action(self) -> AuditAction | None:
        return self.entries[0].action if self.entries else None

    @property
    def last_action(self) -> AuditAction | None:
        return self.entries[-1].action if self.entries else None


class AuditorService:
    """
    Service for creating and validating tamper-evident audit events.

    Guarantees:
        - Every audit event's ``hash`` is a deterministic function of
          ``(entity_type, entity_id, action, payload_hash, prev_hash)``.
        - Sequence numbers are allocated via ``SequenceService``.

    Non-goals:
        - Does NOT call ``session.commit()`` -- caller controls boundaries.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._sequence_service = SequenceService(session)

    def _get_last_hash(self) -> str | None:
        """Get the hash of the most recent audit event."""
        return self._session.execute(
            select(AuditEvent.hash)
            .order_by(AuditEvent.seq.desc())
            .limit(1)
        ).scalar_one_or_none()

    def _create_audit_event(
        self,
        entity_type: str,
        entity_id: str,
        action: AuditAction,
        actor: str,
        payload: dict[str, Any] | None = None,
    ) -> AuditEvent:
        """
        Create a new audit event with hash chain linkage.

        Public callers use the domain-specific ``record_*`` methods.

        Postconditions:
            - A new ``AuditEvent`` row is flushed with a monotonically
              increasing ``seq`` and a valid hash chain link.
        """
        seq = self._sequence_service.next_value(SequenceService.AUDIT_EVENT)
        prev_hash = self._get_last_hash()

        payload_data = payload or {}
        computed_payload_hash = hash_payload(payload_data)

        event_hash = hash_audit_event(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action.value,
            payload_hash=computed_payload_hash,
            prev_hash=prev_hash,
        )

        audit_event = AuditEvent(
            seq=seq,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action.value,
            actor=actor,
            occurred_at=self._clock.now(),
            payload=payload_data,
            payload_hash=computed_payload_hash,
            prev_hash=prev_hash,
            hash=event_hash,
        )

        self._session.add(audit_event)
        self._session.flush()

        logger.info(
            "audit_event_created",
            extra={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "action": action.value,
                "seq": seq,
            },
        )

        return audit_event

    # Domain-specific recording methods

    def record_employer_registered(self, employer: str, name: str) -> AuditEvent:
        return self._create_audit_event(
            entity_type=EMPLOYER_ENTITY,
            entity_id=employer,
            action=AuditAction.EMPLOYER_REGISTERED,
            actor=employer,
            payload={"name": name},
        )

    def record_employee_registered(
        self,
        employee: str,
        employer: str,
        name: str,
        salary: int,
    ) -> AuditEvent:
        return self._create_audit_event(
            entity_type=EMPLOYEE_ENTITY,
            entity_id=employee,
            action=AuditAction.EMPLOYEE_REGISTERED,
            actor=employer,
            payload={"employer": employer, "name": name, "salary": salary},
        )

    def record_salary_updated(
        self,
        employee: str,
        employer: str,
        old_salary: int,
        new_salary: int,
    ) -> AuditEvent:
        return self._create_audit_event(
            entity_type=EMPLOYEE_ENTITY,
            entity_id=employee,
            action=AuditAction.SALARY_UPDATED,
            actor=employer,
            payload={"old_salary": old_salary, "new_salary": new_salary},
        )

    def record_tax_rate_updated(
        self,
        employee: str,
        employer: str,
        old_rate: int,
        new_rate: int,
    ) -> AuditEvent:
        return self._create_audit_event(
            entity_type=EMPLOYEE_ENTITY,
            entity_id=employee,
            action=AuditAction.TAX_RATE_UPDATED,
            actor=employer,
            payload={"old_rate": old_rate, "new_rate": new_rate},
        )

    def record_employee_deactivated(self, employee: str, employer: str) -> AuditEvent:
        return self._create_audit_event(
            entity_type=EMPLOYEE_ENTITY,
            entity_id=employee,
            action=AuditAction.EMPLOYEE_DEACTIVATED,
            actor=employer,
        )

    def record_kyc_requested(self, employee: str, evidence_hash: str) -> AuditEvent:
        return self._create_audit_event(
            entity_type=EMPLOYEE_ENTITY,
            entity_id=employee,
            action=AuditAction.KYC_REQUESTED,
            actor=employee,
            payload={"evidence_hash": evidence_hash},
        )

    def record_kyc_verified(self, employee: str, administrator: str) -> AuditEvent:
        return self._create_audit_event(
            entity_type=EMPLOYEE_ENTITY,
            entity_id=employee,
            action=AuditAction.KYC_VERIFIED,
            actor=administrator,
        )

    def record_kyc_rejected(
        self,
        employee: str,
        administrator: str,
        reason: str,
    ) -> AuditEvent:
        return self._create_audit_event(
            entity_type=EMPLOYEE_ENTITY,
            entity_id=employee,
            action=AuditAction.KYC_REJECTED,
            actor=administrator,
            payload={"reason": reason},
        )

    def record_payment_processed(
        self,
        employee: str,
        employer: str,
        payment_seq: int,
        amount: int,
        tax: int,
        value: int,
    ) -> AuditEvent:
        return self._create_audit_event(
            entity_type=EMPLOYEE_ENTITY,
            entity_id=employee,
            action=AuditAction.PAYMENT_PROCESSED,
            actor=employer,
            payload={
                "payment_seq": payment_seq,
                "amount": amount,
                "tax": tax,
                "value": value,
            },
        )

    # Validation

    def validate_chain(self) -> int:
        """
        Validate the entire audit chain.

        Postconditions:
            - Every event's payload hash and chain hash match the recomputed
              values and every ``prev_hash`` matches its predecessor's hash.

        Returns:
            Number of events validated.

        Raises:
            AuditChainBrokenError: If chain validation fails at any point.
        """
        events = self._session.execute(
            select(AuditEvent).order_by(AuditEvent.seq)
        ).scalars().all()

        prev_hash: str | None = None
        for event in events:
            if event.prev_hash != prev_hash:
                logger.critical("audit_chain_broken", extra={"seq": event.seq})
                raise AuditChainBrokenError(
                    event.seq, prev_hash or "None", event.prev_hash or "None",
                )

            payload_hash = hash_payload(event.payload or {})
            if payload_hash != event.payload_hash:
                logger.critical("audit_chain_broken", extra={"seq": event.seq})
                raise AuditChainBrokenError(
                    event.seq, payload_hash, event.payload_hash,
                )

            expected_hash = hash_audit_event(
                entity_type=event.entity_type,
                entity_id=event.entity_id,
                action=event.action,
                payload_hash=event.payload_hash,
                prev_hash=event.prev_hash,
            )
            if event.hash != expected_hash:
                logger.critical("audit_chain_broken", extra={"seq": event.seq})
                raise AuditChainBrokenError(event.seq, expected_hash, event.hash)

            prev_hash = event.hash

        logger.info("audit_chain_valid", extra={"event_count": len(events)})
        return len(events)

    # Trace and query methods

    def get_trace(self, entity_id: str) -> AuditTrace:
        """All audit events whose entity is ``entity_id``, in seq order."""
        events = self._session.execute(
            select(AuditEvent)
            .where(AuditEvent.entity_id == entity_id)
            .order_by(AuditEvent.seq)
        ).scalars().all()

        return AuditTrace(
            entity_id=entity_id,
            entries=tuple(
                AuditTraceEntry(
                    seq=event.seq,
                    entity_type=event.entity_type,
                    action=AuditAction(event.action),
                    occurred_at=event.occurred_at,
                    actor=event.actor,
                    payload=event.payload or {},
                    hash=event.hash,
                )
                for event in events
            ),
        )
