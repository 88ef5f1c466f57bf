"""
Injectable time source.

Payment timestamps (``last_payment_at``, ``paid_at``) and audit event times
come from a Clock handed to PayrollLedger, never from ``datetime.now()``
inside a service.  SystemClock is the only place the kernel reads the wall
clock.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

PAYROLL_EPOCH = datetime(2024, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


class Clock(ABC):
    """Source of timezone-aware UTC timestamps."""

    @abstractmethod
    def now(self) -> datetime: ...


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Clock that only moves when told to.

    Repeated ``now()`` calls return the same instant until ``advance()``.
    """

    def __init__(self, start: datetime = PAYROLL_EPOCH):
        if start.tzinfo is None:
            raise ValueError("DeterministicClock needs a timezone-aware start")
        self._current = start.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self._current

    def advance(self, seconds: int = 1) -> datetime:
        """Move forward ``seconds`` and return the new instant."""
        self._current += timedelta(seconds=seconds)
        return self._current
