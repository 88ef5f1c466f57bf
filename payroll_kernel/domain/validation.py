"""
Lightweight domain validation helpers.

Pure checks with no I/O, applied at the ledger boundary before any state
is read or written.
"""

from __future__ import annotations

from typing import Any

from payroll_kernel.domain.tax import is_valid_tax_rate
from payroll_kernel.exceptions import InvalidArgumentError, InvalidTaxRateError


# Largest amount a BigInteger column (signed 64-bit) can hold.  Salaries,
# attached values and every balance stay at or below it.
MAX_AMOUNT = 2**63 - 1

# Namespace for ledger-owned holders such as custody; never registrable.
RESERVED_ADDRESS_PREFIX = "ledger:"


def require_address(value: Any, name: str = "address") -> str:
    """Addresses are non-empty strings without surrounding whitespace."""
    if not isinstance(value, str) or not value or value != value.strip():
        raise InvalidArgumentError(name, value, "must be a non-empty string")
    return value


def require_registrable_address(value: Any, name: str = "address") -> str:
    """An address that may take an employer or employee role."""
    require_address(value, name)
    if value.startswith(RESERVED_ADDRESS_PREFIX):
        raise InvalidArgumentError(
            name, value, f"addresses starting with {RESERVED_ADDRESS_PREFIX!r} are reserved"
        )
    return value


def require_amount(value: Any, name: str = "amount") -> int:
    """Amounts are ints in the smallest currency unit, 0..MAX_AMOUNT."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(name, value, "must be an integer")
    if value < 0:
        raise InvalidArgumentError(name, value, "must be non-negative")
    if value > MAX_AMOUNT:
        raise InvalidArgumentError(name, value, f"must not exceed {MAX_AMOUNT}")
    return value


def require_tax_rate(value: Any) -> int:
    if not is_valid_tax_rate(value):
        raise InvalidTaxRateError(value)
    return value


def require_text(value: Any, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(name, value, "must be a non-empty string")
    return value
