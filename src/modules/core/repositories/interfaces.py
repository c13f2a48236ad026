"""Generic repository contract.

Services depend on these abstractions and receive concrete Django
repositories through their constructors, so unit tests can hand them a
``MagicMock`` instead of a database.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base contract for a record store of ``T`` entities."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Return the entity, or ``None`` if it is missing or the id is malformed."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """List entities matching Django-style look-ups."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove an entity; ``False`` if nothing matched."""


class ILockingRepository(IRepository[T]):
    """Repository whose rows can be locked for the current transaction."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[T]:
        """Return the entity with a row-level lock (``SELECT ... FOR UPDATE``).

        Must be called inside ``transaction.atomic``; the lock is held until
        the enclosing transaction ends.
        """
