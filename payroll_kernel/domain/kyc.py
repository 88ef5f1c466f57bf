"""
KYC domain types (``payroll_kernel.domain.kyc``).

Responsibility
--------------
The employee identity-verification lifecycle: the status vocabulary and the
only valid transitions between statuses.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* ``KYC_TRANSITIONS`` defines the only valid status transitions.
* VERIFIED and REJECTED are terminal: no resubmission path exists.  A
  rejected employee stays rejected; this is the fixed business policy.
"""

from __future__ import annotations

from enum import Enum


class KYCStatus(str, Enum):
    """Employee KYC lifecycle states."""

    NOT_SUBMITTED = "not_submitted"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


KYC_TRANSITIONS: dict[KYCStatus, frozenset[KYCStatus]] = {
    KYCStatus.NOT_SUBMITTED: frozenset({KYCStatus.PENDING}),
    KYCStatus.PENDING: frozenset({KYCStatus.VERIFIED, KYCStatus.REJECTED}),
    KYCStatus.VERIFIED: frozenset(),
    KYCStatus.REJECTED: frozenset(),
}

TERMINAL_KYC_STATUSES: frozenset[KYCStatus] = frozenset({
    KYCStatus.VERIFIED,
    KYCStatus.REJECTED,
})


def can_transition(from_status: KYCStatus, to_status: KYCStatus) -> bool:
    """True iff ``from_status -> to_status`` is an edge of the lifecycle."""
    return to_status in KYC_TRANSITIONS.get(from_status, frozenset())
