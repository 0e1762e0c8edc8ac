# ==============================================================================
# BASE REPOSITORY - Generic Data Access Abstraction
# ==============================================================================
# Repository Pattern implementation for consistent data access
# Works with both SQL and NoSQL database adapters
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

from order_desk.database.adapters.base_adapter import BaseDatabaseAdapter

# Type variable for the domain entity
ModelType = TypeVar("ModelType")


class BaseRepository(ABC, Generic[ModelType]):
    """
    Abstract base repository.

    Decouples business logic from the database backend. Subclasses
    convert adapter records into domain entities via ``_to_entity``.

    Attributes:
        _adapter: Database adapter for database operations
        _collection_name: Table/collection identifier
    """

    def __init__(
        self,
        adapter: BaseDatabaseAdapter,
        collection_name: str,
    ) -> None:
        self._adapter = adapter
        self._collection_name = collection_name

    @abstractmethod
    def _to_entity(self, data: Dict[str, Any]) -> ModelType:
        """
        Convert database record to domain entity.

        Args:
            data: Record as returned by the adapter

        Returns:
            Domain entity instance
        """
        pass

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """
        Retrieve entity by ID.

        Returns:
            Entity if found, None otherwise
        """
        result = await self._adapter.get_by_id(self._collection_name, id)
        return self._to_entity(result) if result else None

    async def count(
        self,
        filters: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Count entities matching filters."""
        return await self._adapter.count(self._collection_name, filters)
