"""
Module: payroll_kernel.db.types
Responsibility: Annotated type aliases and column types shared by every model,
    so that addresses, amounts, hashes and timestamps use identical definitions
    system-wide.
Architecture position: Kernel > DB.  May be imported by models/, services/,
    and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - Amounts are integers in the smallest currency unit.  No floats.
    - Timestamps round-trip as timezone-aware UTC datetimes, including on
      SQLite, which stores them naive.
"""

from datetime import timezone
from typing import Annotated

from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.types import TypeDecorator


# Account identity (opaque address string)
Address = Annotated[str, String(128)]

# Whole amount in the smallest currency unit
Amount = Annotated[int, BigInteger]

# Monotonic sequence number for ordering
Sequence = Annotated[int, BigInteger]

# SHA-256 hash as hex string (64 characters)
PayloadHash = Annotated[str, String(64)]

# Long text for names, reasons and evidence hashes
LongText = Annotated[str, String(4000)]


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime normalized to UTC.

    Guarantees:
        - Naive values are rejected on bind; callers pass aware datetimes
          (the Clock abstraction always produces them).
        - Loaded values are always aware and in UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError(f"Naive datetime not allowed: {value!r}")
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
