"""
payroll_kernel.services.container -- per-transaction service wiring.

Responsibility:
    Creates every kernel service exactly once for one Session and wires
    them together.  No service constructs another service internally.

Invariants enforced:
    - Single-instance lifecycle: one AuditorService (and therefore one audit
      chain writer) per transaction.
    - All services share the same Session and Clock.

Non-goals:
    - Does NOT manage transaction boundaries; PayrollLedger owns
      commit/rollback.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.selectors.payment_selector import PaymentSelector
from payroll_kernel.services.auditor_service import AuditorService
from payroll_kernel.services.employment_service import EmploymentService
from payroll_kernel.services.kyc_service import KYCService
from payroll_kernel.services.payment_service import PaymentService
from payroll_kernel.services.registry_service import IdentityRegistryService
from payroll_kernel.services.value_transfer_service import (
    PayoutPort,
    ValueTransferService,
)


class PayrollServices:
    """Kernel services bound to one Session, exposed as public attributes."""

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        payout: PayoutPort | None = None,
    ) -> None:
        self.session = session
        self._clock = clock or SystemClock()

        # Order matters: later services depend on earlier ones
        self.auditor = AuditorService(session, self._clock)
        self.registry = IdentityRegistryService(session, self.auditor)
        self.kyc = KYCService(session, self.registry, self.auditor)
        self.employment = EmploymentService(session, self.registry, self.auditor)
        self.value_transfer = ValueTransferService(session, payout)
        self.payments = PaymentService(
            session,
            self.registry,
            self.value_transfer,
            self.auditor,
            self._clock,
        )
        self.payment_selector = PaymentSelector(session)
