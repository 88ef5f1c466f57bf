"""
ORM-Level Immutability Enforcement.

===============================================================================
WHY THIS EXISTS
===============================================================================

The payroll audit trail must be tamper-proof.  A payment that was executed
cannot be edited or erased; a correction is a new payment.  The same holds
for the hash-chained audit events that record every state change.

SQLAlchemy fires events before UPDATE/DELETE operations reach the database.
We register listeners that intercept these events:

    session.flush()
         |
         v
    [before_update event] --> _check_*_immutability() --> ImmutabilityViolationError
         |
         v
    [before_delete event] --> _check_*_delete() --------> ImmutabilityViolationError
         |
         v
    SQL sent to database (only if checks pass)

If a check fails, ImmutabilityViolationError is raised and the caller's
transaction is rolled back.  The database is never modified.

===============================================================================
PROTECTED ENTITIES
===============================================================================

Entity          | When Immutable          | Why
----------------|-------------------------|----------------------------------
PaymentRecord   | ALWAYS (from creation)  | Payment history is the audit trail
AuditEvent      | ALWAYS (from creation)  | Hash chain must stay verifiable

===============================================================================
USAGE
===============================================================================

Called once at startup (PayrollLedger.from_config does this):

    from payroll_kernel.db.immutability import register_immutability_listeners
    register_immutability_listeners()

To temporarily disable (TESTS ONLY - never in production):

    from payroll_kernel.db.immutability import unregister_immutability_listeners
    unregister_immutability_listeners()
"""

from sqlalchemy import event

from payroll_kernel.exceptions import ImmutabilityViolationError
from payroll_kernel.logging_config import get_logger

logger = get_logger("db.immutability")


def _block(entity_type: str, entity_id: str, operation: str, reason: str) -> None:
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": entity_id,
            "operation": operation,
        },
    )
    raise ImmutabilityViolationError(
        entity_type=entity_type,
        entity_id=entity_id,
        reason=reason,
    )


# =============================================================================
# PaymentRecord
# =============================================================================


def _check_payment_record_immutability(mapper, connection, target):
    """Prevent any updates to PaymentRecord rows."""
    _block(
        "PaymentRecord",
        str(target.seq),
        "UPDATE",
        "Payment records are immutable and cannot be modified",
    )


def _check_payment_record_delete(mapper, connection, target):
    """Prevent deletion of PaymentRecord rows."""
    _block(
        "PaymentRecord",
        str(target.seq),
        "DELETE",
        "Payment records cannot be deleted",
    )


# =============================================================================
# AuditEvent
# =============================================================================


def _check_audit_event_immutability(mapper, connection, target):
    """Prevent any updates to AuditEvent rows."""
    _block(
        "AuditEvent",
        str(target.seq),
        "UPDATE",
        "Audit events are immutable and cannot be modified",
    )


def _check_audit_event_delete(mapper, connection, target):
    """Prevent deletion of AuditEvent rows."""
    _block(
        "AuditEvent",
        str(target.seq),
        "DELETE",
        "Audit events cannot be deleted",
    )


def _listeners():
    from payroll_kernel.models.audit_event import AuditEvent
    from payroll_kernel.models.payment import PaymentRecord

    return (
        (PaymentRecord, "before_update", _check_payment_record_immutability),
        (PaymentRecord, "before_delete", _check_payment_record_delete),
        (AuditEvent, "before_update", _check_audit_event_immutability),
        (AuditEvent, "before_delete", _check_audit_event_delete),
    )


def register_immutability_listeners():
    """
    Register all immutability enforcement event listeners.

    Idempotent: listeners already registered are skipped.
    """
    for target, event_name, listener_fn in _listeners():
        if not event.contains(target, event_name, listener_fn):
            event.listen(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove immutability enforcement event listeners.

    WARNING: Only use this in tests where you need to intentionally
    violate immutability rules to verify detection.
    """
    for target, event_name, listener_fn in _listeners():
        if event.contains(target, event_name, listener_fn):
            event.remove(target, event_name, listener_fn)
