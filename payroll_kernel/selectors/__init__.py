"""Selectors for the payroll kernel (read side)."""

from payroll_kernel.selectors.payment_selector import PaymentSelector

__all__ = [
    "PaymentSelector",
]
