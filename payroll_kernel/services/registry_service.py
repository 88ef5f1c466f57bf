"""
IdentityRegistryService -- roles, profiles and the employer relationship index.

Responsibility:
    Assigns each address its role exactly once (employer or employee),
    creates the matching profile, maintains the per-employer ordered list
    of employees, and resolves callers into a ``CallerContext`` for the
    authorization predicates.

Architecture position:
    Kernel > Services -- imperative shell.  Authorization decisions are made
    by the pure predicates in domain/authorization.py; this service loads
    the rows they need and raises on denial.

Invariants enforced:
    - An address holds at most one role; re-registration and dual roles
      raise AlreadyRegisteredError.
    - Registration (account row, profile row, relationship link, audit
      event) is one atomic unit within the caller's transaction.
    - Only the registering employer may manage an employee.

Failure modes:
    - AlreadyRegisteredError, UnauthorizedError, EmployeeNotFoundError,
      EmployeeInactiveError, EmployerNotFoundError, InvalidArgumentError.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from payroll_kernel.domain.authorization import (
    AccountRole,
    CallerContext,
    check_operation,
    check_owns_employee,
)
from payroll_kernel.domain.dtos import EmployeeInfo, EmployerInfo
from payroll_kernel.domain.kyc import KYCStatus
from payroll_kernel.domain.validation import (
    require_amount,
    require_registrable_address,
)
from payroll_kernel.exceptions import (
    AlreadyRegisteredError,
    EmployeeInactiveError,
    EmployeeNotFoundError,
    EmployerNotFoundError,
    UnauthorizedError,
)
from payroll_kernel.logging_config import get_logger
from payroll_kernel.models.account import Account
from payroll_kernel.models.employee import Employee
from payroll_kernel.models.employer import Employer, EmployerEmployeeLink
from payroll_kernel.services.auditor_service import AuditorService
from payroll_kernel.services.base import BaseService

logger = get_logger("services.registry")


class IdentityRegistryService(BaseService[Account]):
    """
    Service for the identity registry and the relationship index.

    All public reads return frozen DTOs, never ORM instances.
    """

    def __init__(self, session: Session, auditor: AuditorService):
        super().__init__(session)
        self._auditor = auditor

    # Lookups

    def _get_account(self, address: str) -> Account | None:
        return self.session.execute(
            select(Account).where(Account.address == address)
        ).scalar_one_or_none()

    def _get_employer(self, address: str) -> Employer | None:
        return self.session.execute(
            select(Employer).where(Employer.address == address)
        ).scalar_one_or_none()

    def _get_employee(self, address: str, lock: bool = False) -> Employee:
        stmt = select(Employee).where(Employee.address == address)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        employee = self.session.execute(stmt).scalar_one_or_none()
        if employee is None:
            raise EmployeeNotFoundError(address)
        return employee

    def _to_employee_dto(self, employee: Employee) -> EmployeeInfo:
        return EmployeeInfo(
            address=employee.address,
            name=employee.name,
            employer=self.registering_employer(employee.address) or "",
            salary=employee.salary,
            tax_rate=employee.tax_rate,
            is_active=employee.is_active,
            kyc_status=KYCStatus(employee.kyc_status),
            kyc_evidence_hash=employee.kyc_evidence_hash,
            last_payment_at=employee.last_payment_at,
        )

    def get_role(self, address: str) -> AccountRole:
        """Role held by ``address``; NONE when it never registered."""
        account = self._get_account(address)
        if account is None:
            return AccountRole.NONE
        return AccountRole(account.role)

    def get_employer(self, address: str) -> EmployerInfo:
        """
        Raises:
            EmployerNotFoundError: If no employer is registered at ``address``.
        """
        employer = self._get_employer(address)
        if employer is None:
            raise EmployerNotFoundError(address)
        return EmployerInfo(
            address=employer.address,
            name=employer.name,
            verified=employer.verified,
        )

    def get_employee(self, address: str) -> EmployeeInfo:
        """
        Raises:
            EmployeeNotFoundError: If no employee is registered at ``address``.
        """
        return self._to_employee_dto(self._get_employee(address))

    def get_employee_for_update(self, address: str) -> Employee:
        """Load the employee row with a row lock held until commit."""
        return self._get_employee(address, lock=True)

    def employee_dto(self, employee: Employee) -> EmployeeInfo:
        return self._to_employee_dto(employee)

    # Relationship index

    def registering_employer(self, employee: str) -> str | None:
        """Employer whose relationship list holds ``employee``, if any."""
        return self.session.execute(
            select(EmployerEmployeeLink.employer_address).where(
                EmployerEmployeeLink.employee_address == employee
            )
        ).scalar_one_or_none()

    def is_employer_of(self, employer: str, employee: str) -> bool:
        return self.registering_employer(employee) == employer

    def list_employees(self, employer: str) -> list[str]:
        """
        The employer's employees in the order it registered them.

        Raises:
            EmployerNotFoundError: If no employer is registered at ``employer``.
        """
        if self._get_employer(employer) is None:
            raise EmployerNotFoundError(employer)
        return list(
            self.session.execute(
                select(EmployerEmployeeLink.employee_address)
                .where(EmployerEmployeeLink.employer_address == employer)
                .order_by(EmployerEmployeeLink.position)
            ).scalars().all()
        )

    # Caller resolution and authorization

    def resolve_caller(self, address: str, administrator: str) -> CallerContext:
        role = self.get_role(address)
        employer_verified = False
        if role == AccountRole.EMPLOYER:
            employer = self._get_employer(address)
            employer_verified = employer is not None and employer.verified
        return CallerContext(
            address=address,
            role=role,
            employer_verified=employer_verified,
            is_administrator=address == administrator,
        )

    def authorize(self, caller: CallerContext, operation: str) -> None:
        """
        Raises:
            UnauthorizedError: If the caller's role does not permit ``operation``.
        """
        allowed, reason = check_operation(caller, operation)
        if not allowed:
            logger.warning(
                "authorization_denied",
                extra={
                    "caller": caller.address,
                    "operation": operation,
                    "reason": reason,
                },
            )
            raise UnauthorizedError(caller.address, operation, reason)

    def load_managed_employee(
        self,
        caller: CallerContext,
        employee: str,
        operation: str,
    ) -> Employee:
        """
        Load an employee the caller is about to mutate or pay.

        Checks, in order: the caller's role, that the employee exists, that
        it is active, and that the caller registered it.  The row is locked
        until the surrounding transaction ends.

        Raises:
            UnauthorizedError: Wrong role or not the registering employer.
            EmployeeNotFoundError: No employee at ``employee``.
            EmployeeInactiveError: The employee has been deactivated.
        """
        self.authorize(caller, operation)
        row = self._get_employee(employee, lock=True)
        if not row.is_active:
            raise EmployeeInactiveError(employee)

        allowed, reason = check_owns_employee(
            caller, self.registering_employer(employee)
        )
        if not allowed:
            logger.warning(
                "authorization_denied",
                extra={
                    "caller": caller.address,
                    "operation": operation,
                    "employee": employee,
                    "reason": reason,
                },
            )
            raise UnauthorizedError(caller.address, operation, reason)
        return row

    # Registration

    def _ensure_unregistered(self, address: str) -> None:
        account = self._get_account(address)
        if account is not None:
            raise AlreadyRegisteredError(address, account.role)

    def register_employer(self, address: str, name: str) -> EmployerInfo:
        """
        Register ``address`` as an employer.

        Postconditions:
            - accounts row with role employer, employers row with
              ``verified=True`` and an EMPLOYER_REGISTERED audit event.

        Raises:
            AlreadyRegisteredError: If ``address`` already holds a role.
            InvalidArgumentError: ``address`` is malformed or reserved for
                the ledger itself.
        """
        require_registrable_address(address)
        self._ensure_unregistered(address)

        self.session.add(
            Account(
                address=address,
                role=AccountRole.EMPLOYER.value,
                created_by=address,
            )
        )
        self.session.flush()

        employer = Employer(
            address=address,
            name=name,
            verified=True,
            created_by=address,
        )
        self.session.add(employer)
        self.session.flush()

        self._auditor.record_employer_registered(address, name)

        logger.info("employer_registered", extra={"employer": address})

        return EmployerInfo(
            address=employer.address,
            name=employer.name,
            verified=employer.verified,
        )

    def add_employee(
        self,
        caller: CallerContext,
        employee_address: str,
        name: str,
        salary: int,
    ) -> EmployeeInfo:
        """
        Register ``employee_address`` as an employee of the calling employer.

        Postconditions:
            - accounts row with role employee; employees row with KYC
              not_submitted, tax rate 0, active; the address appended to the
              caller's relationship list; an EMPLOYEE_REGISTERED audit event.

        Raises:
            UnauthorizedError: If the caller is not a verified employer.
            AlreadyRegisteredError: If ``employee_address`` already holds a role.
            InvalidArgumentError: Malformed or reserved address, or a salary
                outside 0..MAX_AMOUNT.
        """
        self.authorize(caller, "add_employee")
        require_registrable_address(employee_address, "employee")
        require_amount(salary, "salary")
        self._ensure_unregistered(employee_address)

        self.session.add(
            Account(
                address=employee_address,
                role=AccountRole.EMPLOYEE.value,
                created_by=caller.address,
            )
        )
        self.session.flush()

        employee = Employee(
            address=employee_address,
            name=name,
            salary=salary,
            is_active=True,
            kyc_status=KYCStatus.NOT_SUBMITTED.value,
            kyc_evidence_hash="",
            tax_rate=0,
            created_by=caller.address,
        )
        self.session.add(employee)
        self.session.flush()

        position = self.session.execute(
            select(func.count())
            .select_from(EmployerEmployeeLink)
            .where(EmployerEmployeeLink.employer_address == caller.address)
        ).scalar_one()
        self.session.add(
            EmployerEmployeeLink(
                employer_address=caller.address,
                employee_address=employee_address,
                position=position,
            )
        )
        self.session.flush()

        self._auditor.record_employee_registered(
            employee_address, caller.address, name, salary,
        )

        logger.info(
            "employee_registered",
            extra={
                "employer": caller.address,
                "employee": employee_address,
                "position": position,
            },
        )

        return self._to_employee_dto(employee)
