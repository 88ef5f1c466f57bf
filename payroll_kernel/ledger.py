"""
PayrollLedger -- the public entry point of the payroll kernel.

Responsibility:
    One process-wide ledger object.  The administrator address is fixed at
    construction.  Every public operation resolves the caller against the
    identity registry and delegates to the kernel services inside exactly
    one transaction.

Architecture position:
    Kernel top level.  The only place that opens and commits transactions;
    services below only flush.

Invariants enforced:
    - Serialized execution: a process-wide re-entrant lock is held for the
      whole of each operation, and mutations lock the employee row
      (SELECT ... FOR UPDATE) so separate processes serialize too.
    - Atomicity: each operation commits as a whole or rolls back as a whole;
      a rejected operation leaves no trace.
    - The administrator address cannot be changed after construction.

Failure modes:
    - Every PayrollKernelError raised by a service propagates unchanged
      after the transaction is rolled back.

Usage:
    ledger = PayrollLedger.from_config(get_active_config())
    ledger.register_employer("0xA", "Acme")
    ledger.add_employee("0xA", "0xB", "Bob", salary=100)
    ledger.submit_kyc("0xB", "h1")
    ledger.approve_kyc(ledger.administrator, "0xB")
    ledger.process_payment("0xA", "0xB", value=100)
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy.orm import Session, sessionmaker

from payroll_kernel.db.engine import (
    create_tables,
    get_session_factory,
    init_engine_from_url,
    session_scope,
)
from payroll_kernel.db.immutability import register_immutability_listeners
from payroll_kernel.domain.authorization import AccountRole, CallerContext
from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.domain.dtos import (
    EmployeeInfo,
    EmployerInfo,
    PaymentInfo,
    PaymentSummary,
)
from payroll_kernel.domain.validation import require_address
from payroll_kernel.logging_config import LogContext, configure_logging, get_logger
from payroll_kernel.services.auditor_service import AuditTrace
from payroll_kernel.services.container import PayrollServices
from payroll_kernel.services.value_transfer_service import CUSTODY_HOLDER, PayoutPort

if TYPE_CHECKING:
    from payroll_config import LedgerConfig

logger = get_logger("ledger")


class PayrollLedger:
    """
    Payroll ledger with KYC-gated, role-checked payments.

    Every method taking ``caller`` treats it as the authenticated address
    of whoever issued the call.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        administrator: str,
        clock: Clock | None = None,
        payout: PayoutPort | None = None,
    ):
        self._session_factory = session_factory
        self._administrator = require_address(administrator, "administrator")
        self._clock = clock or SystemClock()
        self._payout = payout
        self._lock = threading.RLock()

        logger.info("ledger_initialized", extra={"administrator": administrator})

    @classmethod
    def from_config(
        cls,
        config: LedgerConfig,
        clock: Clock | None = None,
        payout: PayoutPort | None = None,
    ) -> PayrollLedger:
        """
        Initialize the database and logging from ``config`` and build a ledger.

        Creates missing tables and registers the immutability listeners.
        """
        configure_logging(level=config.logging.level)
        init_engine_from_url(
            config.database.url,
            echo=config.database.echo,
            pool_size=config.database.pool_size,
            max_overflow=config.database.max_overflow,
        )
        create_tables()
        register_immutability_listeners()
        return cls(get_session_factory(), config.administrator, clock, payout)

    @property
    def administrator(self) -> str:
        return self._administrator

    @contextmanager
    def _operation(
        self,
        operation: str,
        caller: str | None = None,
        employee: str | None = None,
    ) -> Iterator[PayrollServices]:
        with self._lock, LogContext.bind(
            correlation_id=str(uuid4()),
            operation=operation,
            actor_id=caller,
            employee_id=employee,
        ):
            with session_scope(self._session_factory) as session:
                yield PayrollServices(session, self._clock, self._payout)

    def _resolve(self, services: PayrollServices, caller: str) -> CallerContext:
        require_address(caller, "caller")
        return services.registry.resolve_caller(caller, self._administrator)

    # Identity registry

    def register_employer(self, caller: str, name: str) -> EmployerInfo:
        with self._operation("register_employer", caller) as services:
            return services.registry.register_employer(caller, name)

    def add_employee(
        self,
        caller: str,
        employee: str,
        name: str,
        salary: int,
    ) -> EmployeeInfo:
        with self._operation("add_employee", caller, employee) as services:
            ctx = self._resolve(services, caller)
            return services.registry.add_employee(ctx, employee, name, salary)

    def get_role(self, address: str) -> AccountRole:
        with self._operation("get_role") as services:
            return services.registry.get_role(address)

    def get_employer(self, address: str) -> EmployerInfo:
        with self._operation("get_employer") as services:
            return services.registry.get_employer(address)

    def get_employee(self, address: str) -> EmployeeInfo:
        with self._operation("get_employee", employee=address) as services:
            return services.registry.get_employee(address)

    def is_employer_of(self, employer: str, employee: str) -> bool:
        with self._operation("is_employer_of") as services:
            return services.registry.is_employer_of(employer, employee)

    def list_employees(self, employer: str) -> list[str]:
        with self._operation("list_employees") as services:
            return services.registry.list_employees(employer)

    # Employment terms

    def update_salary(self, caller: str, employee: str, new_salary: int) -> EmployeeInfo:
        with self._operation("update_salary", caller, employee) as services:
            ctx = self._resolve(services, caller)
            return services.employment.update_salary(ctx, employee, new_salary)

    def set_tax_rate(self, caller: str, employee: str, rate: int) -> EmployeeInfo:
        with self._operation("set_tax_rate", caller, employee) as services:
            ctx = self._resolve(services, caller)
            return services.employment.set_tax_rate(ctx, employee, rate)

    def deactivate_employee(self, caller: str, employee: str) -> EmployeeInfo:
        with self._operation("deactivate_employee", caller, employee) as services:
            ctx = self._resolve(services, caller)
            return services.employment.deactivate_employee(ctx, employee)

    # KYC

    def submit_kyc(self, caller: str, evidence_hash: str) -> EmployeeInfo:
        with self._operation("submit_kyc", caller, caller) as services:
            ctx = self._resolve(services, caller)
            return services.kyc.submit_kyc(ctx, evidence_hash)

    def approve_kyc(self, caller: str, employee: str) -> EmployeeInfo:
        with self._operation("approve_kyc", caller, employee) as services:
            ctx = self._resolve(services, caller)
            return services.kyc.approve_kyc(ctx, employee)

    def reject_kyc(self, caller: str, employee: str, reason: str) -> EmployeeInfo:
        with self._operation("reject_kyc", caller, employee) as services:
            ctx = self._resolve(services, caller)
            return services.kyc.reject_kyc(ctx, employee, reason)

    # Payments

    def process_payment(self, caller: str, employee: str, value: int) -> PaymentInfo:
        """Pay ``employee`` its salary out of the attached ``value``.

        Value above the salary is not refunded; it stays in custody.
        """
        with self._operation("process_payment", caller, employee) as services:
            ctx = self._resolve(services, caller)
            return services.payments.process_payment(ctx, employee, value)

    def view_payment_history(self, caller: str) -> list[PaymentInfo]:
        """Every payment the calling employer made, oldest first."""
        with self._operation("view_payment_history", caller) as services:
            ctx = self._resolve(services, caller)
            services.registry.authorize(ctx, "view_payment_history")
            return services.payment_selector.history_for_employer(caller)

    def view_my_payment_history(self, caller: str) -> list[PaymentInfo]:
        """Every payment the calling employee received, oldest first."""
        with self._operation("view_my_payment_history", caller, caller) as services:
            ctx = self._resolve(services, caller)
            services.registry.authorize(ctx, "view_my_payment_history")
            return services.payment_selector.history_for_employee(caller)

    def payment_summary(self, caller: str) -> PaymentSummary:
        """Payment totals for the calling employer or employee."""
        with self._operation("payment_summary", caller) as services:
            ctx = self._resolve(services, caller)
            if ctx.role == AccountRole.EMPLOYEE:
                return services.payment_selector.summary_for_employee(caller)
            services.registry.authorize(ctx, "view_payment_history")
            return services.payment_selector.summary_for_employer(caller)

    def balance_of(self, holder: str) -> int:
        with self._operation("balance_of") as services:
            return services.value_transfer.balance_of(holder)

    def custody_balance(self) -> int:
        """Value held by the ledger: withheld tax plus unrefunded surplus."""
        return self.balance_of(CUSTODY_HOLDER)

    # Audit

    def audit_trail(self, address: str) -> AuditTrace:
        with self._operation("audit_trail") as services:
            return services.auditor.get_trace(address)

    def verify_audit_chain(self) -> int:
        """
        Recompute the whole audit hash chain.

        Returns:
            Number of audit events checked.

        Raises:
            AuditChainBrokenError: On the first mismatch.
        """
        with self._operation("verify_audit_chain") as services:
            return services.auditor.validate_chain()
