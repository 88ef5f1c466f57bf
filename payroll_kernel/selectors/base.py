"""
Module: payroll_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
    Selectors are the read side of the ledger: payment history and summaries
    are served from here, never from the services.
Architecture position: Kernel > Selectors.  May import from db/, models/
    and the frozen DTOs in domain/dtos.py.  MUST NOT import from services/
    or outer layers.

Invariants enforced:
    - Read-only access: selectors accept a Session from the caller and never
      call session.add(), session.delete(), session.commit() or
      session.flush().
    - DTO return convention: selectors return frozen dataclasses or computed
      results, never ORM instances.
    - Session ownership: the caller owns the session and its transaction.

Failure modes:
    - None of their own; an empty result is an empty list, never an error.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from payroll_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    """
    Abstract base class for all selectors.

    Guarantees:
        - session is stored as a public attribute for subclass query use.
        - No commit, flush, add, or delete operations are performed.
    """

    def __init__(self, session: Session):
        self.session = session
