"""
Tests for KYCService.

Covers:
- Submission by the employee, decision by the administrator
- Invalid transitions (resubmission, deciding twice, deciding unsubmitted)
- Rejection is terminal
- Role enforcement
"""

import pytest

from payroll_kernel.domain.kyc import KYCStatus
from payroll_kernel.exceptions import (
    EmployeeNotFoundError,
    InvalidArgumentError,
    InvalidKYCTransitionError,
    UnauthorizedError,
)
from payroll_kernel.models.audit_event import AuditAction

ADMIN = "0xADMIN"


@pytest.fixture
def employee(registry_service, resolve):
    registry_service.register_employer("0xA", "Acme")
    registry_service.add_employee(resolve("0xA"), "0xB", "Bob", 100)
    return "0xB"


class TestSubmitKYC:
    def test_submit_moves_to_pending(self, kyc_service, resolve, employee):
        info = kyc_service.submit_kyc(resolve(employee), "h1")

        assert info.kyc_status == KYCStatus.PENDING
        assert info.kyc_evidence_hash == "h1"

    def test_submit_is_audited(self, kyc_service, auditor_service, resolve, employee):
        kyc_service.submit_kyc(resolve(employee), "h1")

        trace = auditor_service.get_trace(employee)
        assert trace.last_action == AuditAction.KYC_REQUESTED
        assert trace.entries[-1].payload == {"evidence_hash": "h1"}
        assert trace.entries[-1].actor == employee

    def test_resubmission_rejected(self, kyc_service, resolve, employee):
        kyc_service.submit_kyc(resolve(employee), "h1")

        with pytest.raises(InvalidKYCTransitionError) as exc_info:
            kyc_service.submit_kyc(resolve(employee), "h2")

        assert exc_info.value.from_status == "pending"
        assert exc_info.value.to_status == "pending"

    def test_resubmission_keeps_original_hash(
        self, kyc_service, registry_service, resolve, employee,
    ):
        kyc_service.submit_kyc(resolve(employee), "h1")
        with pytest.raises(InvalidKYCTransitionError):
            kyc_service.submit_kyc(resolve(employee), "h2")

        assert registry_service.get_employee(employee).kyc_evidence_hash == "h1"

    def test_employer_cannot_submit(self, kyc_service, resolve, employee):
        with pytest.raises(UnauthorizedError):
            kyc_service.submit_kyc(resolve("0xA"), "h1")

    def test_unregistered_cannot_submit(self, kyc_service, resolve):
        with pytest.raises(UnauthorizedError):
            kyc_service.submit_kyc(resolve("0xZ"), "h1")

    def test_empty_hash_rejected(self, kyc_service, registry_service, resolve, employee):
        with pytest.raises(InvalidArgumentError):
            kyc_service.submit_kyc(resolve(employee), "")

        assert registry_service.get_employee(employee).kyc_status == KYCStatus.NOT_SUBMITTED


class TestKYCDecision:
    def test_approve(self, kyc_service, resolve, employee):
        kyc_service.submit_kyc(resolve(employee), "h1")

        info = kyc_service.approve_kyc(resolve(ADMIN), employee)

        assert info.kyc_status == KYCStatus.VERIFIED
        assert info.is_payable is True

    def test_reject_carries_reason(self, kyc_service, auditor_service, resolve, employee):
        kyc_service.submit_kyc(resolve(employee), "h1")

        info = kyc_service.reject_kyc(resolve(ADMIN), employee, "document expired")

        assert info.kyc_status == KYCStatus.REJECTED
        entry = auditor_service.get_trace(employee).entries[-1]
        assert entry.action == AuditAction.KYC_REJECTED
        assert entry.payload == {"reason": "document expired"}
        assert entry.actor == ADMIN

    def test_approve_not_submitted(self, kyc_service, resolve, employee):
        with pytest.raises(InvalidKYCTransitionError) as exc_info:
            kyc_service.approve_kyc(resolve(ADMIN), employee)
        assert exc_info.value.from_status == "not_submitted"

    def test_reject_not_submitted(self, kyc_service, resolve, employee):
        with pytest.raises(InvalidKYCTransitionError):
            kyc_service.reject_kyc(resolve(ADMIN), employee, "no")

    def test_cannot_decide_twice(self, kyc_service, resolve, employee):
        kyc_service.submit_kyc(resolve(employee), "h1")
        kyc_service.approve_kyc(resolve(ADMIN), employee)

        with pytest.raises(InvalidKYCTransitionError):
            kyc_service.approve_kyc(resolve(ADMIN), employee)
        with pytest.raises(InvalidKYCTransitionError):
            kyc_service.reject_kyc(resolve(ADMIN), employee, "changed my mind")

    def test_rejection_is_terminal(self, kyc_service, registry_service, resolve, employee):
        """A rejected employee cannot resubmit or be approved later."""
        kyc_service.submit_kyc(resolve(employee), "h1")
        kyc_service.reject_kyc(resolve(ADMIN), employee, "mismatch")

        with pytest.raises(InvalidKYCTransitionError):
            kyc_service.submit_kyc(resolve(employee), "h2")
        with pytest.raises(InvalidKYCTransitionError):
            kyc_service.approve_kyc(resolve(ADMIN), employee)

        assert registry_service.get_employee(employee).kyc_status == KYCStatus.REJECTED

    @pytest.mark.parametrize("caller", ["0xA", "0xB", "0xZ"])
    def test_only_administrator_decides(self, kyc_service, resolve, employee, caller):
        kyc_service.submit_kyc(resolve(employee), "h1")

        with pytest.raises(UnauthorizedError):
            kyc_service.approve_kyc(resolve(caller), employee)
        with pytest.raises(UnauthorizedError):
            kyc_service.reject_kyc(resolve(caller), employee, "no")

    def test_unknown_employee(self, kyc_service, resolve):
        with pytest.raises(EmployeeNotFoundError):
            kyc_service.approve_kyc(resolve(ADMIN), "0xNOPE")
