# ==============================================================================
# BASE DATABASE ADAPTER - Abstract Interface
# ==============================================================================
# Defines the contract for all database adapters
# Ensures consistent API across SQLite and MongoDB
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional


class BaseDatabaseAdapter(ABC):
    """
    Abstract Base Class for Database Adapters.

    Provides a unified interface for record operations across the
    supported backends. Records cross this boundary as plain
    dictionaries with a string ``id`` key, whatever the backend stores
    internally.

    Driver failures are raised as ``DatabaseError`` so callers never
    depend on driver exception types.

    Example:
        >>> adapter = SQLiteAdapter()
        >>> await adapter.connect()
        >>> record = await adapter.create("transactions", {"owner_id": "u1"})
        >>> await adapter.disconnect()
    """

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish database connection.

        Must be called before any database operations.

        Raises:
            DatabaseError: If connection cannot be established
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close database connection and release pooled resources."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        pass

    # ==========================================================================
    # SESSION MANAGEMENT
    # ==========================================================================

    @abstractmethod
    @asynccontextmanager
    async def session(self) -> AsyncIterator[Any]:
        """
        Provide a session scope.

        Yields:
            Session object appropriate for the database type

        Raises:
            RuntimeError: If database is not connected
        """
        yield None

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def create(
        self,
        collection: str,
        data: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Create a new record.

        Args:
            collection: Table/collection name
            data: Record data; an ``id`` key is used as the primary key

        Returns:
            Created record including its ``id``
        """
        pass

    @abstractmethod
    async def get_by_id(
        self,
        collection: str,
        id: Any,
    ) -> Optional[Dict[str, Any]]:
        """
        Retrieve a record by its primary identifier.

        Returns:
            Record if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_all(
        self,
        collection: str,
        skip: int = 0,
        limit: Optional[int] = 100,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[Dict[str, Any]]:
        """
        Retrieve multiple records with pagination and filtering.

        Args:
            collection: Table/collection name
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return, None for all
            filters: Field-value equality pairs
            sort_by: Field name to sort by
            sort_order: Sort direction ("asc" or "desc")

        Returns:
            List of matching records
        """
        pass

    @abstractmethod
    async def update(
        self,
        collection: str,
        id: Any,
        data: Dict[str, Any],
        match: Optional[Dict[str, Any]] = None,
        increment: Optional[Dict[str, int]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Update an existing record in a single conditional write.

        Args:
            collection: Table/collection name
            id: Primary key of record to update
            data: Fields to set (partial update)
            match: Extra equality conditions the stored record must meet
            increment: Numeric fields to increase by the given amount

        Returns:
            Updated record, or None if no record matched id and match
        """
        pass

    @abstractmethod
    async def delete(
        self,
        collection: str,
        id: Any,
    ) -> bool:
        """
        Delete a record by ID.

        Returns:
            True if deleted, False if not found
        """
        pass

    # ==========================================================================
    # QUERY OPERATIONS
    # ==========================================================================

    @abstractmethod
    async def count(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Count records matching filters."""
        pass

    @abstractmethod
    async def find_one(
        self,
        collection: str,
        filters: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """
        Find a single record matching filters.

        Returns:
            First matching record, None if no match
        """
        pass
