"""
PaymentService -- the payment processor.

Responsibility:
    Validates payment preconditions, computes tax withholding, moves value
    and appends the payment record to the audit trail.

Architecture position:
    Kernel > Services -- imperative shell.  Withholding math is the pure
    ``compute_withholding`` in domain/tax.py.

Invariants enforced:
    - Only the verified employer that registered the employee may pay it.
    - The employee must be active and KYC-verified.
    - The attached value must cover the salary.  The surplus above salary is
      not refunded; it remains in custody with the withheld tax.
    - Deposit, net transfer, last_payment_at update, payment record and
      audit event happen in one transaction.  Any failure raises and the
      caller's rollback discards all of them.
    - The payout port is called only after the record and audit event are
      flushed, so nothing is delivered for a payment that rolls back.
    - Payment records are numbered by SequenceService in insertion order.

Failure modes:
    - UnauthorizedError, EmployeeNotFoundError, EmployeeInactiveError.
    - KYCNotVerifiedError: KYC status is not verified.
    - InvalidArgumentError: attached value is not an int in 0..MAX_AMOUNT.
    - InsufficientFundsError: attached value below salary.
    - TransferFailedError: the net transfer or its delivery failed.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from payroll_kernel.domain.authorization import CallerContext
from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.domain.dtos import PaymentInfo
from payroll_kernel.domain.kyc import KYCStatus
from payroll_kernel.domain.tax import compute_withholding
from payroll_kernel.domain.validation import require_amount
from payroll_kernel.exceptions import InsufficientFundsError, KYCNotVerifiedError
from payroll_kernel.logging_config import get_logger
from payroll_kernel.models.payment import PaymentRecord
from payroll_kernel.services.auditor_service import AuditorService
from payroll_kernel.services.base import BaseService
from payroll_kernel.services.registry_service import IdentityRegistryService
from payroll_kernel.services.sequence_service import SequenceService
from payroll_kernel.services.value_transfer_service import (
    CUSTODY_HOLDER,
    ValueTransferService,
)

logger = get_logger("services.payment")


class PaymentService(BaseService[PaymentRecord]):
    """Service that executes salary payments."""

    def __init__(
        self,
        session: Session,
        registry: IdentityRegistryService,
        value_transfer: ValueTransferService,
        auditor: AuditorService,
        clock: Clock | None = None,
    ):
        super().__init__(session)
        self._registry = registry
        self._value_transfer = value_transfer
        self._auditor = auditor
        self._clock = clock or SystemClock()
        self._sequence_service = SequenceService(session)

    def process_payment(
        self,
        caller: CallerContext,
        employee_address: str,
        value: int,
    ) -> PaymentInfo:
        """
        Pay the employee's current salary out of ``value``.

        Preconditions:
            - Caller is the verified employer that registered the employee.
            - Employee is active and KYC-verified.
            - ``value >= salary``.

        Postconditions:
            - ``value`` credited to custody, ``net`` moved from custody to
              the employee, ``last_payment_at`` set to now, one
              PaymentRecord appended, one PAYMENT_PROCESSED audit event.

        Returns:
            The appended payment record.
        """
        employee = self._registry.load_managed_employee(
            caller, employee_address, "process_payment",
        )

        if employee.kyc_status != KYCStatus.VERIFIED.value:
            logger.warning(
                "payment_rejected_kyc",
                extra={
                    "employee": employee.address,
                    "kyc_status": employee.kyc_status,
                },
            )
            raise KYCNotVerifiedError(employee.address, employee.kyc_status)

        require_amount(value, "value")
        if value < employee.salary:
            logger.warning(
                "payment_rejected_insufficient_funds",
                extra={
                    "employee": employee.address,
                    "required": employee.salary,
                    "provided": value,
                },
            )
            raise InsufficientFundsError(employee.address, employee.salary, value)

        withholding = compute_withholding(employee.salary, employee.tax_rate)

        self._value_transfer.deposit(CUSTODY_HOLDER, value)
        self._value_transfer.transfer(CUSTODY_HOLDER, employee.address, withholding.net)

        paid_at = self._clock.now()
        employee.last_payment_at = paid_at

        seq = self._sequence_service.next_value(SequenceService.PAYMENT_RECORD)
        record = PaymentRecord(
            seq=seq,
            employer_address=caller.address,
            employee_address=employee.address,
            amount=withholding.net,
            tax=withholding.tax,
            paid_at=paid_at,
        )
        self.session.add(record)
        self.session.flush()

        self._auditor.record_payment_processed(
            employee=employee.address,
            employer=caller.address,
            payment_seq=seq,
            amount=withholding.net,
            tax=withholding.tax,
            value=value,
        )

        # Last: everything above rolls back on failure, a delivery does not.
        self._value_transfer.deliver(employee.address, withholding.net)

        logger.info(
            "payment_processed",
            extra={
                "employer": caller.address,
                "employee": employee.address,
                "seq": seq,
                "amount": withholding.net,
                "tax": withholding.tax,
                "surplus": value - employee.salary,
            },
        )

        return PaymentInfo(
            seq=seq,
            employer=caller.address,
            employee=employee.address,
            amount=withholding.net,
            tax=withholding.tax,
            paid_at=paid_at,
        )
