"""Domain models for the payroll kernel."""

from payroll_kernel.models.account import Account
from payroll_kernel.models.audit_event import AuditAction, AuditEvent
from payroll_kernel.models.employee import Employee
from payroll_kernel.models.employer import Employer, EmployerEmployeeLink
from payroll_kernel.models.payment import PaymentRecord, ValueBalance

__all__ = [
    "Account",
    "AuditAction",
    "AuditEvent",
    "Employee",
    "Employer",
    "EmployerEmployeeLink",
    "PaymentRecord",
    "ValueBalance",
]
