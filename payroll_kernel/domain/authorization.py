"""
payroll_kernel.domain.authorization -- Role and ownership checks.

Responsibility:
    Decide whether a resolved caller may perform a ledger operation.  Every
    service calls these predicates at the start of a handler, before any
    mutation, and raises UnauthorizedError with the returned reason when
    access is denied.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.  The services resolve the
    caller (role row, employer verified flag, administrator identity) and
    the employee's registering employer; this module only compares.

Invariants:
    - Exactly three roles: administrator (fixed identity), employer,
      employee.  An address holds at most one registry role.
    - Every check returns ``(allowed, reason)``; reason is empty when
      allowed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AccountRole(str, Enum):
    """Registry role held by an address.  NONE is never persisted."""

    NONE = "none"
    EMPLOYER = "employer"
    EMPLOYEE = "employee"


@dataclass(frozen=True)
class CallerContext:
    """Caller resolved against the identity registry."""

    address: str
    role: AccountRole
    employer_verified: bool = False
    is_administrator: bool = False


# operation -> role required to invoke it
OPERATION_ROLES: dict[str, str] = {
    "add_employee": "verified_employer",
    "update_salary": "verified_employer",
    "set_tax_rate": "verified_employer",
    "deactivate_employee": "verified_employer",
    "process_payment": "verified_employer",
    "view_payment_history": "employer",
    "submit_kyc": "employee",
    "view_my_payment_history": "employee",
    "approve_kyc": "administrator",
    "reject_kyc": "administrator",
}


def check_employer(caller: CallerContext) -> tuple[bool, str]:
    if caller.role != AccountRole.EMPLOYER:
        return (False, "caller is not a registered employer")
    return (True, "")


def check_verified_employer(caller: CallerContext) -> tuple[bool, str]:
    allowed, reason = check_employer(caller)
    if not allowed:
        return (allowed, reason)
    if not caller.employer_verified:
        return (False, "employer is not verified")
    return (True, "")


def check_employee(caller: CallerContext) -> tuple[bool, str]:
    if caller.role != AccountRole.EMPLOYEE:
        return (False, "caller is not a registered employee")
    return (True, "")


def check_administrator(caller: CallerContext) -> tuple[bool, str]:
    if not caller.is_administrator:
        return (False, "caller is not the administrator")
    return (True, "")


_ROLE_CHECKS = {
    "employer": check_employer,
    "verified_employer": check_verified_employer,
    "employee": check_employee,
    "administrator": check_administrator,
}


def check_operation(caller: CallerContext, operation: str) -> tuple[bool, str]:
    """Check the role requirement of ``operation`` for ``caller``.

    Raises:
        KeyError: if ``operation`` is not a role-gated ledger operation.
    """
    return _ROLE_CHECKS[OPERATION_ROLES[operation]](caller)


def check_owns_employee(
    caller: CallerContext,
    registering_employer: str | None,
) -> tuple[bool, str]:
    """The caller must be the verified employer that registered the employee.

    Args:
        caller: Resolved caller.
        registering_employer: Employer address from the relationship index,
            or None when the employee has no link.
    """
    allowed, reason = check_verified_employer(caller)
    if not allowed:
        return (allowed, reason)
    if registering_employer != caller.address:
        return (False, "employee is not registered to this employer")
    return (True, "")
