"""
KYCService -- the employee identity-verification workflow.

Responsibility:
    Applies the three KYC transitions: the employee submits evidence, the
    administrator approves or rejects it.  Each transition is validated
    against the transition table in domain/kyc.py before it is persisted.

Architecture position:
    Kernel > Services -- imperative shell over the pure KYC state machine.

Invariants enforced:
    - NOT_SUBMITTED -> PENDING -> {VERIFIED, REJECTED}; VERIFIED and
      REJECTED have no outgoing transitions.
    - Only the employee submits; only the administrator decides.

Failure modes:
    - UnauthorizedError: wrong role.
    - EmployeeNotFoundError: decision on an unknown address.
    - InvalidKYCTransitionError: transition from the wrong status.
    - InvalidArgumentError: empty evidence hash.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from payroll_kernel.domain.authorization import CallerContext
from payroll_kernel.domain.dtos import EmployeeInfo
from payroll_kernel.domain.kyc import KYCStatus, can_transition
from payroll_kernel.domain.validation import require_text
from payroll_kernel.exceptions import InvalidKYCTransitionError
from payroll_kernel.logging_config import get_logger
from payroll_kernel.models.employee import Employee
from payroll_kernel.services.auditor_service import AuditorService
from payroll_kernel.services.base import BaseService
from payroll_kernel.services.registry_service import IdentityRegistryService

logger = get_logger("services.kyc")


class KYCService(BaseService[Employee]):
    """Service driving the per-employee KYC state machine."""

    def __init__(
        self,
        session: Session,
        registry: IdentityRegistryService,
        auditor: AuditorService,
    ):
        super().__init__(session)
        self._registry = registry
        self._auditor = auditor

    def _transition(self, employee: Employee, to_status: KYCStatus) -> KYCStatus:
        from_status = KYCStatus(employee.kyc_status)
        if not can_transition(from_status, to_status):
            logger.warning(
                "kyc_transition_rejected",
                extra={
                    "employee": employee.address,
                    "from_status": from_status.value,
                    "to_status": to_status.value,
                },
            )
            raise InvalidKYCTransitionError(
                employee.address, from_status.value, to_status.value,
            )
        employee.kyc_status = to_status.value
        return from_status

    def submit_kyc(self, caller: CallerContext, evidence_hash: str) -> EmployeeInfo:
        """
        Record the caller's evidence hash and move their KYC to PENDING.

        Raises:
            UnauthorizedError: If the caller is not an employee.
            InvalidArgumentError: If ``evidence_hash`` is empty.
            InvalidKYCTransitionError: If KYC was already submitted.
        """
        self._registry.authorize(caller, "submit_kyc")
        require_text(evidence_hash, "evidence_hash")

        employee = self._registry.get_employee_for_update(caller.address)
        self._transition(employee, KYCStatus.PENDING)
        employee.kyc_evidence_hash = evidence_hash
        self.session.flush()

        self._auditor.record_kyc_requested(employee.address, evidence_hash)

        logger.info("kyc_submitted", extra={"employee": employee.address})
        return self._registry.employee_dto(employee)

    def approve_kyc(self, caller: CallerContext, employee_address: str) -> EmployeeInfo:
        """
        Move a PENDING employee to VERIFIED.

        Raises:
            UnauthorizedError: If the caller is not the administrator.
            EmployeeNotFoundError: If no employee is registered at the address.
            InvalidKYCTransitionError: If the employee is not PENDING.
        """
        self._registry.authorize(caller, "approve_kyc")
        employee = self._registry.get_employee_for_update(employee_address)
        self._transition(employee, KYCStatus.VERIFIED)
        self.session.flush()

        self._auditor.record_kyc_verified(employee.address, caller.address)

        logger.info(
            "kyc_approved",
            extra={"employee": employee.address, "administrator": caller.address},
        )
        return self._registry.employee_dto(employee)

    def reject_kyc(
        self,
        caller: CallerContext,
        employee_address: str,
        reason: str,
    ) -> EmployeeInfo:
        """
        Move a PENDING employee to REJECTED.  Rejection is final.

        Raises:
            UnauthorizedError: If the caller is not the administrator.
            EmployeeNotFoundError: If no employee is registered at the address.
            InvalidKYCTransitionError: If the employee is not PENDING.
        """
        self._registry.authorize(caller, "reject_kyc")
        employee = self._registry.get_employee_for_update(employee_address)
        self._transition(employee, KYCStatus.REJECTED)
        self.session.flush()

        self._auditor.record_kyc_rejected(employee.address, caller.address, reason)

        logger.info(
            "kyc_rejected",
            extra={
                "employee": employee.address,
                "administrator": caller.address,
                "reason": reason,
            },
        )
        return self._registry.employee_dto(employee)
