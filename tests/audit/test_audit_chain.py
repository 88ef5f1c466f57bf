"""
Audit chain validation tests.

Verifies:
- Every state change writes exactly one chained audit event
- The chain links each event to its predecessor from genesis
- Tampering with a payload, a hash or the linkage is detected
"""

from contextlib import contextmanager

import pytest
from sqlalchemy import select, update

from payroll_kernel.db.immutability import (
    register_immutability_listeners,
    unregister_immutability_listeners,
)
from payroll_kernel.exceptions import AuditChainBrokenError
from payroll_kernel.models.audit_event import AuditAction, AuditEvent
from payroll_kernel.utils.hashing import hash_audit_event, hash_payload

ADMIN = "0xADMIN"


@contextmanager
def disabled_immutability():
    """Disable ORM immutability enforcement to simulate tampering."""
    unregister_immutability_listeners()
    try:
        yield
    finally:
        register_immutability_listeners()


@pytest.fixture
def history(services, resolve):
    """A short but complete payroll history, flushed in the test session."""
    services.registry.register_employer("0xA", "Acme")
    services.registry.add_employee(resolve("0xA"), "0xB", "Bob", 100)
    services.kyc.submit_kyc(resolve("0xB"), "h1")
    services.kyc.approve_kyc(resolve(ADMIN), "0xB")
    services.employment.set_tax_rate(resolve("0xA"), "0xB", 20)
    services.payments.process_payment(resolve("0xA"), "0xB", 100)
    return services


def _events(session) -> list[AuditEvent]:
    return list(session.execute(select(AuditEvent).order_by(AuditEvent.seq)).scalars())


class TestChainStructure:
    def test_empty_chain_is_valid(self, auditor_service):
        assert auditor_service.validate_chain() == 0

    def test_one_event_per_operation(self, history, session):
        actions = [AuditAction(e.action) for e in _events(session)]
        assert actions == [
            AuditAction.EMPLOYER_REGISTERED,
            AuditAction.EMPLOYEE_REGISTERED,
            AuditAction.KYC_REQUESTED,
            AuditAction.KYC_VERIFIED,
            AuditAction.TAX_RATE_UPDATED,
            AuditAction.PAYMENT_PROCESSED,
        ]

    def test_genesis_and_linkage(self, history, session):
        events = _events(session)

        assert events[0].is_genesis
        assert events[0].prev_hash is None
        for prev, current in zip(events, events[1:]):
            assert current.prev_hash == prev.hash
            assert not current.is_genesis

    def test_seq_strictly_increasing(self, history, session):
        seqs = [e.seq for e in _events(session)]
        assert seqs == list(range(1, len(seqs) + 1))

    def test_hashes_recompute(self, history, session):
        for event in _events(session):
            assert event.payload_hash == hash_payload(event.payload)
            assert event.hash == hash_audit_event(
                entity_type=event.entity_type,
                entity_id=event.entity_id,
                action=event.action,
                payload_hash=event.payload_hash,
                prev_hash=event.prev_hash,
            )

    def test_validate_chain_counts_events(self, history):
        assert history.auditor.validate_chain() == 6

    def test_occurred_at_from_injected_clock(self, history, session, deterministic_clock):
        assert all(e.occurred_at == deterministic_clock.now() for e in _events(session))


class TestTamperDetection:
    def test_payload_tampering_detected(self, history, session):
        payment_event = _events(session)[-1]

        with disabled_immutability():
            payment_event.payload = {**payment_event.payload, "amount": 1_000_000}
            session.flush()

        with pytest.raises(AuditChainBrokenError) as exc_info:
            history.auditor.validate_chain()
        assert exc_info.value.audit_event_seq == payment_event.seq

    def test_hash_tampering_detected(self, history, session):
        target = _events(session)[2]

        with disabled_immutability():
            target.hash = "0" * 64
            session.flush()

        with pytest.raises(AuditChainBrokenError) as exc_info:
            history.auditor.validate_chain()
        assert exc_info.value.audit_event_seq == target.seq
        assert exc_info.value.actual_hash == "0" * 64

    def test_bulk_sql_tampering_detected(self, history, session):
        """Bulk UPDATE bypasses the ORM listeners; the chain still catches it."""
        session.execute(
            update(AuditEvent)
            .where(AuditEvent.seq == 3)
            .values(prev_hash="f" * 64)
            .execution_options(synchronize_session=False)
        )
        session.expire_all()

        with pytest.raises(AuditChainBrokenError) as exc_info:
            history.auditor.validate_chain()
        assert exc_info.value.audit_event_seq == 3

    def test_validation_failure_logged_critical(self, history, session, captured_logs):
        target = _events(session)[0]
        with disabled_immutability():
            target.entity_id = "0xFORGED"
            session.flush()

        with pytest.raises(AuditChainBrokenError):
            history.auditor.validate_chain()

        broken = [r for r in captured_logs() if r["message"] == "audit_chain_broken"]
        assert broken[0]["level"] == "CRITICAL"
        assert broken[0]["seq"] == 1
