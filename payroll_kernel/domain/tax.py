"""
Tax withholding (``payroll_kernel.domain.tax``).

Pure functions for splitting a salary into the withheld tax and the net
amount paid out.  Amounts are whole smallest-currency units; the rate is an
integer percentage.  Withholding rounds down, so the employee never
receives less than ``salary - salary * rate / 100``.
"""

from __future__ import annotations

from dataclasses import dataclass

MAX_TAX_RATE = 100


@dataclass(frozen=True)
class Withholding:
    """Split of one salary payment."""

    salary: int
    tax_rate: int
    tax: int
    net: int


def is_valid_tax_rate(rate: object) -> bool:
    return (
        isinstance(rate, int)
        and not isinstance(rate, bool)
        and 0 <= rate <= MAX_TAX_RATE
    )


def compute_withholding(salary: int, tax_rate: int) -> Withholding:
    """
    Compute ``tax = floor(salary * tax_rate / 100)`` and ``net = salary - tax``.

    Preconditions:
        - ``salary >= 0``; ``0 <= tax_rate <= 100``.

    Raises:
        ValueError: if a precondition does not hold.
    """
    if salary < 0:
        raise ValueError(f"salary must be non-negative, got {salary}")
    if not is_valid_tax_rate(tax_rate):
        raise ValueError(f"tax_rate must be within 0..{MAX_TAX_RATE}, got {tax_rate}")
    tax = salary * tax_rate // 100
    return Withholding(salary=salary, tax_rate=tax_rate, tax=tax, net=salary - tax)
