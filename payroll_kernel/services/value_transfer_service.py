"""
ValueTransferService -- value custody and net transfers to employees.

Responsibility:
    Tracks value held per holder address.  Value attached to a payment is
    deposited into the ledger's custody holder and the net salary is moved
    from custody to the employee.  Surplus value and withheld tax remain in
    custody.  ``deliver`` hands a transferred amount to the payout port.

Architecture position:
    Kernel > Services -- imperative shell.  The optional ``PayoutPort`` is
    the boundary to whatever rail actually delivers value.  Balance changes
    are rolled back with the surrounding transaction; a delivery is not, so
    callers deliver only after everything else in the operation is flushed.

Invariants enforced:
    - No balance ever goes negative (service check plus
      ck_value_balance_non_negative).
    - No balance ever exceeds MAX_AMOUNT.
    - The custody holder lives in the reserved ``ledger:`` namespace, which
      no employer or employee can register.

Failure modes:
    - TransferFailedError: the source cannot cover the amount, the
      recipient's balance would exceed MAX_AMOUNT, or the payout port
      raised.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.orm import Session

from payroll_kernel.domain.validation import (
    MAX_AMOUNT,
    RESERVED_ADDRESS_PREFIX,
    require_amount,
)
from payroll_kernel.exceptions import PayrollKernelError, TransferFailedError
from payroll_kernel.logging_config import get_logger
from payroll_kernel.models.payment import ValueBalance
from payroll_kernel.services.base import BaseService

logger = get_logger("services.value_transfer")

CUSTODY_HOLDER = f"{RESERVED_ADDRESS_PREFIX}custody"


@runtime_checkable
class PayoutPort(Protocol):
    """
    Delivers value to a recipient outside the ledger.

    Raising from ``send`` aborts the payment that requested the delivery.
    """

    def send(self, recipient: str, amount: int) -> None: ...


class ValueTransferService(BaseService[ValueBalance]):
    """Service for balance custody and transfers."""

    def __init__(self, session: Session, payout: PayoutPort | None = None):
        super().__init__(session)
        self._payout = payout

    def _balance_row(self, holder: str) -> ValueBalance:
        row = self.session.execute(
            select(ValueBalance)
            .where(ValueBalance.holder == holder)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if row is None:
            row = ValueBalance(holder=holder, balance=0)
            self.session.add(row)
            self.session.flush()
        return row

    def _check_headroom(self, row: ValueBalance, amount: int) -> None:
        if row.balance > MAX_AMOUNT - amount:
            raise TransferFailedError(
                row.holder,
                amount,
                f"{row.holder} holds {row.balance}; crediting {amount} "
                f"would exceed {MAX_AMOUNT}",
            )

    def balance_of(self, holder: str) -> int:
        """Balance held for ``holder``; 0 when it never received value."""
        balance = self.session.execute(
            select(ValueBalance.balance).where(ValueBalance.holder == holder)
        ).scalar_one_or_none()
        return balance or 0

    def deposit(self, holder: str, amount: int) -> int:
        """
        Credit ``amount`` to ``holder`` and return the new balance.

        Raises:
            TransferFailedError: The balance would exceed MAX_AMOUNT.
        """
        require_amount(amount, "value")
        row = self._balance_row(holder)
        self._check_headroom(row, amount)
        row.balance += amount
        self.session.flush()
        logger.debug(
            "value_deposited",
            extra={"holder": holder, "amount": amount, "balance": row.balance},
        )
        return row.balance

    def transfer(self, source: str, recipient: str, amount: int) -> None:
        """
        Move ``amount`` from ``source`` to ``recipient`` inside the ledger.

        Raises:
            TransferFailedError: Insufficient source balance, or the
                recipient's balance would exceed MAX_AMOUNT.
        """
        require_amount(amount, "amount")
        source_row = self._balance_row(source)
        if source_row.balance < amount:
            raise TransferFailedError(
                recipient,
                amount,
                f"{source} holds {source_row.balance}",
            )

        recipient_row = self._balance_row(recipient)
        self._check_headroom(recipient_row, amount)
        source_row.balance -= amount
        recipient_row.balance += amount
        self.session.flush()

        logger.info(
            "value_transferred",
            extra={"source": source, "recipient": recipient, "amount": amount},
        )

    def deliver(self, recipient: str, amount: int) -> None:
        """
        Hand ``amount`` to the payout port, if one is attached.

        Must be the last step of an operation: the database work before it
        rolls back on failure, the delivery does not.

        Raises:
            TransferFailedError: The payout port raised.
        """
        if self._payout is None:
            return
        try:
            self._payout.send(recipient, amount)
        except PayrollKernelError:
            raise
        except Exception as exc:
            logger.error(
                "payout_failed",
                extra={"recipient": recipient, "amount": amount},
                exc_info=True,
            )
            raise TransferFailedError(recipient, amount, str(exc)) from exc

        logger.info("value_delivered", extra={"recipient": recipient, "amount": amount})
