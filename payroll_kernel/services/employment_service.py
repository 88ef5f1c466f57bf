"""
EmploymentService -- salary, tax rate and activity of managed employees.

Responsibility:
    Mutations an employer applies to the employees it registered.  Each one
    goes through ``IdentityRegistryService.load_managed_employee`` so the
    role, existence, activity and ownership checks run identically for all
    of them.

Architecture position:
    Kernel > Services -- imperative shell.

Failure modes:
    - UnauthorizedError, EmployeeNotFoundError, EmployeeInactiveError from
      the shared guard.
    - InvalidArgumentError on a malformed salary; InvalidTaxRateError on a
      rate outside 0..100.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from payroll_kernel.domain.authorization import CallerContext
from payroll_kernel.domain.dtos import EmployeeInfo
from payroll_kernel.domain.validation import require_amount, require_tax_rate
from payroll_kernel.logging_config import get_logger
from payroll_kernel.models.employee import Employee
from payroll_kernel.services.auditor_service import AuditorService
from payroll_kernel.services.base import BaseService
from payroll_kernel.services.registry_service import IdentityRegistryService

logger = get_logger("services.employment")


class EmploymentService(BaseService[Employee]):
    """Service for employer-side mutations of employee terms."""

    def __init__(
        self,
        session: Session,
        registry: IdentityRegistryService,
        auditor: AuditorService,
    ):
        super().__init__(session)
        self._registry = registry
        self._auditor = auditor

    def update_salary(
        self,
        caller: CallerContext,
        employee_address: str,
        new_salary: int,
    ) -> EmployeeInfo:
        """
        Set the employee's salary.  Any non-negative int is accepted.

        Raises:
            UnauthorizedError: Not a verified employer, or not the owner.
            EmployeeNotFoundError / EmployeeInactiveError.
            InvalidArgumentError: ``new_salary`` is not a non-negative int.
        """
        employee = self._registry.load_managed_employee(
            caller, employee_address, "update_salary",
        )
        require_amount(new_salary, "salary")

        old_salary = employee.salary
        employee.salary = new_salary
        self.session.flush()

        self._auditor.record_salary_updated(
            employee.address, caller.address, old_salary, new_salary,
        )

        logger.info(
            "salary_updated",
            extra={
                "employee": employee.address,
                "old_salary": old_salary,
                "new_salary": new_salary,
            },
        )
        return self._registry.employee_dto(employee)

    def set_tax_rate(
        self,
        caller: CallerContext,
        employee_address: str,
        rate: int,
    ) -> EmployeeInfo:
        """
        Overwrite the employee's tax rate (integer percent).

        Raises:
            UnauthorizedError: Not a verified employer, or not the owner.
            EmployeeNotFoundError / EmployeeInactiveError.
            InvalidTaxRateError: ``rate`` outside 0..100.
        """
        employee = self._registry.load_managed_employee(
            caller, employee_address, "set_tax_rate",
        )
        require_tax_rate(rate)

        old_rate = employee.tax_rate
        employee.tax_rate = rate
        self.session.flush()

        self._auditor.record_tax_rate_updated(
            employee.address, caller.address, old_rate, rate,
        )

        logger.info(
            "tax_rate_updated",
            extra={
                "employee": employee.address,
                "old_rate": old_rate,
                "new_rate": rate,
            },
        )
        return self._registry.employee_dto(employee)

    def deactivate_employee(
        self,
        caller: CallerContext,
        employee_address: str,
    ) -> EmployeeInfo:
        """
        Mark the employee inactive.  The role is kept; the employee can no
        longer be paid or modified.

        Raises:
            UnauthorizedError: Not a verified employer, or not the owner.
            EmployeeNotFoundError / EmployeeInactiveError.
        """
        employee = self._registry.load_managed_employee(
            caller, employee_address, "deactivate_employee",
        )
        employee.is_active = False
        self.session.flush()

        self._auditor.record_employee_deactivated(employee.address, caller.address)

        logger.info("employee_deactivated", extra={"employee": employee.address})
        return self._registry.employee_dto(employee)
