"""
Pure domain layer.

This module contains value objects, the KYC state machine, tax math and
authorization predicates with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- I/O (SystemClock is the one sanctioned time boundary)

All domain objects are immutable and deterministic.
"""

from payroll_kernel.domain.authorization import (
    AccountRole,
    CallerContext,
    check_administrator,
    check_employee,
    check_employer,
    check_operation,
    check_owns_employee,
    check_verified_employer,
)
from payroll_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from payroll_kernel.domain.dtos import (
    EmployeeInfo,
    EmployerInfo,
    PaymentInfo,
    PaymentSummary,
)
from payroll_kernel.domain.kyc import (
    KYC_TRANSITIONS,
    TERMINAL_KYC_STATUSES,
    KYCStatus,
    can_transition,
)
from payroll_kernel.domain.tax import MAX_TAX_RATE, Withholding, compute_withholding

__all__ = [
    "AccountRole",
    "CallerContext",
    "check_administrator",
    "check_employee",
    "check_employer",
    "check_operation",
    "check_owns_employee",
    "check_verified_employer",
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "EmployeeInfo",
    "EmployerInfo",
    "PaymentInfo",
    "PaymentSummary",
    "KYC_TRANSITIONS",
    "TERMINAL_KYC_STATUSES",
    "KYCStatus",
    "can_transition",
    "MAX_TAX_RATE",
    "Withholding",
    "compute_withholding",
]
