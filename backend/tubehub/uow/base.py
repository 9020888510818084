"""
Transaction boundary around one account or session use case.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tubehub.repositories.user import UserRepository


class UnitOfWork(ABC):
    """
    ``with`` block that commits on a clean exit and rolls back otherwise.

    A commit that fails is rolled back before the error propagates.
    Implementations expose ``users`` bound to the transaction and may
    override the exit policy (read-only blocks always roll back).
    """

    users: UserRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
