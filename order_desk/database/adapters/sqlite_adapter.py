# ==============================================================================
# SQLITE ADAPTER - SQLAlchemy Async with aiosqlite
# ==============================================================================
# Lightweight database adapter for development and testing
# Full async support using aiosqlite driver
# ==============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager, contextmanager
from typing import Any, AsyncIterator, Dict, Iterator, List, Optional, Type

from sqlalchemy import and_, delete, func, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from order_desk.core.settings import settings
from order_desk.core.exceptions import DatabaseError
from order_desk.database.adapters.base_adapter import BaseDatabaseAdapter
from order_desk.domain_models.base import SQLBase

logger = logging.getLogger(__name__)


class SQLiteAdapter(BaseDatabaseAdapter):
    """
    SQLite database adapter using SQLAlchemy async with aiosqlite.

    Ideal for development, testing, and small-scale deployments.
    Rows are returned as dictionaries so callers see the same shape
    as from the MongoDB adapter.

    Attributes:
        _database_url: SQLite connection string
        _engine: SQLAlchemy async engine
        _session_factory: Session factory for creating sessions
        _model_registry: Mapping of collection names to model classes

    Example:
        >>> adapter = SQLiteAdapter("sqlite:///./orders.db")
        >>> adapter.register_model("transactions", TransactionRecord)
        >>> await adapter.connect()  # Creates tables automatically
    """

    def __init__(self, database_url: Optional[str] = None) -> None:
        """
        Initialize SQLite adapter.

        Args:
            database_url: SQLite connection URL (defaults to settings)
        """
        # Ensure async driver is used
        url = database_url or settings.sqlite_async_url
        if "sqlite://" in url and "aiosqlite" not in url:
            url = url.replace("sqlite://", "sqlite+aiosqlite://")

        self._database_url = url
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._model_registry: Dict[str, Type[SQLBase]] = {}

    # ==========================================================================
    # MODEL REGISTRY
    # ==========================================================================

    def register_model(
        self,
        name: str,
        model: Type[SQLBase],
    ) -> None:
        """
        Register a SQLAlchemy model for table mapping.

        Args:
            name: Collection/table identifier
            model: SQLAlchemy model class
        """
        self._model_registry[name] = model
        logger.debug(f"Registered model '{name}' -> {model.__name__}")

    def _get_model(self, collection: str) -> Type[SQLBase]:
        if collection not in self._model_registry:
            raise ValueError(
                f"Model '{collection}' not registered. "
                f"Available models: {list(self._model_registry.keys())}"
            )
        return self._model_registry[collection]

    @staticmethod
    def _conditions(
        model: Type[SQLBase],
        filters: Optional[Dict[str, Any]],
    ) -> List[Any]:
        """Equality conditions for filter pairs; unknown columns are an error."""
        conditions = []
        for key, value in (filters or {}).items():
            if key not in model.__table__.columns:
                raise ValueError(
                    f"Unknown column '{key}' for {model.__name__}"
                )
            conditions.append(getattr(model, key) == value)
        return conditions

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        """Re-raise driver failures as DatabaseError."""
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"SQLite {operation} failed: {e}")
            raise DatabaseError(
                f"Store operation '{operation}' failed: {e}",
                operation=operation,
            ) from e

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    async def connect(self) -> None:
        """
        Initialize database engine and create tables.

        Creates an async engine and automatically creates all
        mapped tables if they don't exist.
        """
        # Importing the package registers every model on SQLBase.metadata
        import order_desk.domain_models  # noqa: F401

        try:
            self._engine = create_async_engine(
                self._database_url,
                echo=settings.DEBUG,
                connect_args={"check_same_thread": False},
            )

            self._session_factory = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            async with self._engine.begin() as conn:
                await conn.run_sync(SQLBase.metadata.create_all)

            logger.info("SQLite adapter connected successfully")

        except SQLAlchemyError as e:
            logger.error(f"Failed to connect to SQLite: {e}")
            raise DatabaseError(
                f"SQLite connection failed: {e}",
                operation="connect",
            ) from e

    async def disconnect(self) -> None:
        """Close database connections and dispose engine."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("SQLite adapter disconnected")

    async def health_check(self) -> bool:
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, RuntimeError) as e:
            logger.warning(f"SQLite health check failed: {e}")
            return False

    # ==========================================================================
    # SESSION MANAGEMENT
    # ==========================================================================

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide transactional session scope.

        Commits on successful exit, rolls back on exception.

        Raises:
            RuntimeError: If database not connected
        """
        if self._session_factory is None:
            raise RuntimeError(
                "Database not connected. Call connect() first."
            )

        session: AsyncSession = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    # ==========================================================================
    # CRUD OPERATIONS
    # ==========================================================================

    async def create(
        self,
        collection: str,
        data: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Insert a row and return it as a dictionary."""
        model = self._get_model(collection)

        with self._translate_errors("create"):
            async with self.session() as session:
                instance = model(**data)
                session.add(instance)
                await session.flush()
                await session.refresh(instance)
                return instance.to_dict()

    async def get_by_id(
        self,
        collection: str,
        id: Any,
    ) -> Optional[Dict[str, Any]]:
        model = self._get_model(collection)

        with self._translate_errors("get"):
            async with self.session() as session:
                instance = await session.get(model, id)
                return instance.to_dict() if instance else None

    async def get_all(
        self,
        collection: str,
        skip: int = 0,
        limit: Optional[int] = 100,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[Dict[str, Any]]:
        """Retrieve multiple rows with pagination and filtering."""
        model = self._get_model(collection)
        query = select(model)

        conditions = self._conditions(model, filters)
        if conditions:
            query = query.where(and_(*conditions))

        if sort_by and hasattr(model, sort_by):
            order_column = getattr(model, sort_by)
            if sort_order.lower() == "desc":
                order_column = order_column.desc()
            query = query.order_by(order_column)

        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        with self._translate_errors("list"):
            async with self.session() as session:
                result = await session.execute(query)
                return [row.to_dict() for row in result.scalars().all()]

    async def update(
        self,
        collection: str,
        id: Any,
        data: Dict[str, Any],
        match: Optional[Dict[str, Any]] = None,
        increment: Optional[Dict[str, int]] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Conditional UPDATE ... WHERE id = :id AND <match>.

        Returns None when no row satisfied the conditions.
        """
        model = self._get_model(collection)
        conditions = [model.id == id, *self._conditions(model, match)]

        values: Dict[str, Any] = {
            key: value for key, value in data.items()
            if key != "id" and key in model.__table__.columns
        }
        for key, amount in (increment or {}).items():
            values[key] = getattr(model, key) + amount

        with self._translate_errors("update"):
            async with self.session() as session:
                if values:
                    stmt = (
                        update(model)
                        .where(and_(*conditions))
                        .values(**values)
                        .execution_options(synchronize_session=False)
                    )
                    result = await session.execute(stmt)
                    if result.rowcount == 0:
                        return None

                lookup = model.id == id if values else and_(*conditions)
                refreshed = await session.execute(select(model).where(lookup))
                instance = refreshed.scalars().first()
                return instance.to_dict() if instance else None

    async def delete(
        self,
        collection: str,
        id: Any,
    ) -> bool:
        model = self._get_model(collection)

        with self._translate_errors("delete"):
            async with self.session() as session:
                result = await session.execute(
                    delete(model).where(model.id == id)
                )
                return result.rowcount > 0

    # ==========================================================================
    # QUERY OPERATIONS
    # ==========================================================================

    async def count(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
    ) -> int:
        model = self._get_model(collection)
        query = select(func.count()).select_from(model)

        conditions = self._conditions(model, filters)
        if conditions:
            query = query.where(and_(*conditions))

        with self._translate_errors("count"):
            async with self.session() as session:
                result = await session.execute(query)
                return result.scalar() or 0

    async def find_one(
        self,
        collection: str,
        filters: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        results = await self.get_all(
            collection,
            skip=0,
            limit=1,
            filters=filters,
        )
        return results[0] if results else None
