# ==============================================================================
# MONGODB ADAPTER - Motor Async Driver Implementation
# ==============================================================================
# Document-oriented database adapter with full async support
# Uses Motor for non-blocking MongoDB operations
# ==============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Dict, Iterator, List, Optional

from bson import ObjectId
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorClientSession,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from order_desk.core.constants import DatabaseConstants
from order_desk.core.settings import settings
from order_desk.core.exceptions import DatabaseError
from order_desk.database.adapters.base_adapter import BaseDatabaseAdapter

logger = logging.getLogger(__name__)


class MongoDBAdapter(BaseDatabaseAdapter):
    """
    MongoDB database adapter using Motor async driver.

    Documents keep the caller supplied id as ``_id``. Records written
    by older clients carry ObjectId keys; lookups by their hex string
    still find them.

    Attributes:
        _connection_url: MongoDB connection string
        _database_name: Target database name
        _client: Motor async client
        _database: Target database instance

    Example:
        >>> adapter = MongoDBAdapter()
        >>> await adapter.connect()
        >>> doc = await adapter.create("transactions", {"id": "t1"})
        >>> print(doc["id"])
    """

    def __init__(
        self,
        connection_url: Optional[str] = None,
        database_name: Optional[str] = None,
    ) -> None:
        """
        Initialize MongoDB adapter.

        Args:
            connection_url: MongoDB connection URI (defaults to settings)
            database_name: Database name (defaults to settings)
        """
        self._connection_url = connection_url or settings.MONGODB_URL
        self._database_name = database_name or settings.MONGODB_DB
        self._client: Optional[AsyncIOMotorClient] = None
        self._database: Optional[AsyncIOMotorDatabase] = None

    # ==========================================================================
    # ID SERIALIZATION HELPERS
    # ==========================================================================

    @staticmethod
    def _serialize_id(document: Dict[str, Any]) -> Dict[str, Any]:
        """Rename ``_id`` to a string ``id``."""
        if document and "_id" in document:
            document["id"] = str(document.pop("_id"))
        return document

    @staticmethod
    def _id_query(id_value: Any) -> Any:
        """
        Build the ``_id`` match for an id string.

        Hex strings may belong to ObjectId keyed legacy documents, so
        both representations are matched.
        """
        if isinstance(id_value, str) and ObjectId.is_valid(id_value):
            return {"$in": [id_value, ObjectId(id_value)]}
        return id_value

    def _build_query(
        self,
        filters: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Build MongoDB query from filter dictionary.

        Handles id -> _id conversion. Operator dictionaries
        ($gt, $in, ...) pass through unchanged.
        """
        if not filters:
            return {}

        query: Dict[str, Any] = {}
        for key, value in filters.items():
            if key == "id":
                query["_id"] = self._id_query(value)
            else:
                query[key] = value

        return query

    def _collection(self, name: str):
        if self._database is None:
            raise RuntimeError("Database not connected")
        return self._database[name]

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        """Re-raise driver failures as DatabaseError."""
        try:
            yield
        except PyMongoError as e:
            logger.error(f"MongoDB {operation} failed: {e}")
            raise DatabaseError(
                f"Store operation '{operation}' failed: {e}",
                operation=operation,
            ) from e

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    async def connect(self) -> None:
        """
        Initialize MongoDB connection.

        Creates Motor client and selects target database.
        """
        try:
            self._client = AsyncIOMotorClient(
                self._connection_url,
                maxPoolSize=settings.DB_POOL_SIZE,
                minPoolSize=1,
                maxIdleTimeMS=settings.DB_POOL_TIMEOUT * 1000,
            )
            self._database = self._client[self._database_name]

            # Verify connection
            await self._client.admin.command("ping")

            await self._database[
                DatabaseConstants.TRANSACTIONS_COLLECTION
            ].create_index("owner_id")

            logger.info(
                f"MongoDB adapter connected to {self._database_name}"
            )

        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise DatabaseError(
                f"MongoDB connection failed: {e}",
                operation="connect",
            ) from e

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB adapter disconnected")

    async def health_check(self) -> bool:
        try:
            if self._client is not None:
                await self._client.admin.command("ping")
                return True
            return False
        except PyMongoError as e:
            logger.warning(f"MongoDB health check failed: {e}")
            return False

    # ==========================================================================
    # SESSION MANAGEMENT
    # ==========================================================================

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncIOMotorClientSession]:
        """
        Provide a client session scope.

        Yields:
            AsyncIOMotorClientSession instance
        """
        if self._client is None:
            raise RuntimeError(
                "Database not connected. Call connect() first."
            )

        async with await self._client.start_session() as session:
            yield session

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    async def create(
        self,
        collection: str,
        data: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Insert a document, using ``data["id"]`` as ``_id`` when given."""
        document = {k: v for k, v in data.items() if k != "id"}
        if data.get("id") is not None:
            document["_id"] = data["id"]

        with self._translate_errors("create"):
            result = await self._collection(collection).insert_one(document)

        document.pop("_id", None)
        document["id"] = str(result.inserted_id)
        return document

    async def get_by_id(
        self,
        collection: str,
        id: Any,
    ) -> Optional[Dict[str, Any]]:
        with self._translate_errors("get"):
            document = await self._collection(collection).find_one(
                {"_id": self._id_query(id)}
            )
        return self._serialize_id(document) if document else None

    async def get_all(
        self,
        collection: str,
        skip: int = 0,
        limit: Optional[int] = 100,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[Dict[str, Any]]:
        """Retrieve multiple documents with pagination."""
        query = self._build_query(filters)

        with self._translate_errors("list"):
            cursor = self._collection(collection).find(query)

            if sort_by:
                direction = ASCENDING if sort_order.lower() == "asc" else DESCENDING
                cursor = cursor.sort(sort_by, direction)

            if skip:
                cursor = cursor.skip(skip)
            if limit is not None:
                cursor = cursor.limit(limit)

            documents = await cursor.to_list(length=limit)

        return [self._serialize_id(doc) for doc in documents]

    async def update(
        self,
        collection: str,
        id: Any,
        data: Dict[str, Any],
        match: Optional[Dict[str, Any]] = None,
        increment: Optional[Dict[str, int]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Apply ``$set``/``$inc`` to the document matching id and match."""
        query = self._build_query(match)
        query["_id"] = self._id_query(id)

        changes: Dict[str, Any] = {}
        fields = {k: v for k, v in data.items() if k != "id"}
        if fields:
            changes["$set"] = fields
        if increment:
            changes["$inc"] = dict(increment)
        if not changes:
            return await self.find_one(collection, query)

        with self._translate_errors("update"):
            result = await self._collection(collection).find_one_and_update(
                query,
                changes,
                return_document=ReturnDocument.AFTER,
            )
        return self._serialize_id(result) if result else None

    async def delete(
        self,
        collection: str,
        id: Any,
    ) -> bool:
        with self._translate_errors("delete"):
            result = await self._collection(collection).delete_one(
                {"_id": self._id_query(id)}
            )
        return result.deleted_count > 0

    # ==========================================================================
    # QUERY OPERATIONS
    # ==========================================================================

    async def count(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
    ) -> int:
        query = self._build_query(filters)
        with self._translate_errors("count"):
            return await self._collection(collection).count_documents(query)

    async def find_one(
        self,
        collection: str,
        filters: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        query = filters if "_id" in filters else self._build_query(filters)
        with self._translate_errors("find"):
            document = await self._collection(collection).find_one(query)
        return self._serialize_id(document) if document else None
