# ==============================================================================
# TRANSACTION REPOSITORY - Sell Order Store Access
# ==============================================================================
# Typed CRUD over the transactions collection with write-once field
# protection and record versioning
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from order_desk.core.constants import (
    DatabaseConstants,
    ErrorMessages,
    TransactionConstants,
)
from order_desk.core.exceptions import (
    ConcurrentModificationError,
    ImmutableFieldViolationError,
    NotFoundError,
    ValidationError,
)
from order_desk.database.adapters.base_adapter import BaseDatabaseAdapter
from order_desk.database.repositories.base_repository import BaseRepository
from order_desk.schemas.transaction import Transaction
from order_desk.utils.helpers import generate_uuid, utc_now

logger = logging.getLogger(__name__)

TransactionPredicate = Callable[[Transaction], bool]


class TransactionRepository(BaseRepository[Transaction]):
    """
    Store access for sell orders.

    Every call reads from or writes to the store; nothing is cached,
    so a read issued after a write always observes that write.

    Updates bump ``version`` and ``updated_at`` in the same write. By
    default concurrent writers follow last-write-wins; passing
    ``expected_version`` turns the update into a compare-and-set.

    Example:
        >>> repo = TransactionRepository(adapter)
        >>> order = await repo.create({"owner_id": "u1", ...})
        >>> order = await repo.update(order.id, {"status": "processing"})
        >>> order.version
        2
    """

    def __init__(self, adapter: BaseDatabaseAdapter) -> None:
        super().__init__(adapter, DatabaseConstants.TRANSACTIONS_COLLECTION)

    def _to_entity(self, data: Dict[str, Any]) -> Transaction:
        return Transaction.model_validate(data)

    def _not_found(self, transaction_id: str) -> NotFoundError:
        return NotFoundError(
            message=f"{ErrorMessages.TRANSACTION_NOT_FOUND}: {transaction_id}",
            resource_type="transaction",
            resource_id=transaction_id,
        )

    # ==========================================================================
    # CREATE / READ
    # ==========================================================================

    async def create(self, data: Dict[str, Any]) -> Transaction:
        """
        Persist a new order.

        The store assigns ``id``, ``created_at``, ``updated_at`` and
        ``version`` unless the caller supplied them.
        """
        record = dict(data)
        record.setdefault("id", generate_uuid())
        record.setdefault("status", TransactionConstants.STATUS_PENDING)
        record.setdefault("created_at", utc_now())
        record.setdefault("updated_at", record["created_at"])
        record.setdefault("version", 1)

        result = await self._adapter.create(self._collection_name, record)
        logger.debug(f"Stored order {result['id']}")
        return self._to_entity(result)

    async def get(self, transaction_id: str) -> Transaction:
        """
        Fetch one order.

        Raises:
            NotFoundError: If no order has this id
        """
        transaction = await self.get_by_id(transaction_id)
        if transaction is None:
            raise self._not_found(transaction_id)
        return transaction

    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        predicate: Optional[TransactionPredicate] = None,
    ) -> List[Transaction]:
        """
        Fetch a snapshot of orders.

        Args:
            filters: Equality filters evaluated by the store
            predicate: Extra in-process filter applied to each order

        Records that cannot be read as an order are skipped with a
        warning rather than failing the whole listing.
        """
        rows = await self._adapter.get_all(
            self._collection_name,
            limit=None,
            filters=filters,
        )

        transactions: List[Transaction] = []
        for row in rows:
            try:
                transaction = self._to_entity(row)
            except PydanticValidationError as e:
                logger.warning(
                    f"Data quality: skipping unreadable order "
                    f"{row.get('id')}: {e.error_count()} invalid field(s)"
                )
                continue
            if predicate is None or predicate(transaction):
                transactions.append(transaction)
        return transactions

    async def list_by_owner(self, owner_id: str) -> List[Transaction]:
        """
        Orders of one owner.

        Matched after loading so that documents keyed only by
        ``userInfo.id`` are included.
        """
        return await self.list(predicate=lambda t: t.owner_id == owner_id)

    # ==========================================================================
    # UPDATE
    # ==========================================================================

    async def update(
        self,
        transaction_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> Transaction:
        """
        Apply a partial update.

        Args:
            transaction_id: Order to update
            fields: Mutable fields to set
            expected_version: Only write if the stored version matches

        Raises:
            ImmutableFieldViolationError: If fields names a write-once field
            ValidationError: If fields names an unknown field
            NotFoundError: If the order does not exist
            ConcurrentModificationError: If expected_version is stale
        """
        protected = set(fields) & TransactionConstants.IMMUTABLE_FIELDS
        if protected:
            raise ImmutableFieldViolationError(transaction_id, protected)

        unknown = set(fields) - set(Transaction.model_fields)
        if unknown:
            raise ValidationError(
                message=f"order {transaction_id} cannot be updated: unknown fields",
                errors={name: "unknown field" for name in sorted(unknown)},
            )

        data = dict(fields)
        data["updated_at"] = utc_now()
        match = None
        if expected_version is not None:
            match = {"version": expected_version}

        result = await self._adapter.update(
            self._collection_name,
            transaction_id,
            data,
            match=match,
            increment={"version": 1},
        )
        if result is not None:
            return self._to_entity(result)

        current = await self._adapter.get_by_id(
            self._collection_name,
            transaction_id,
        )
        if current is None:
            raise self._not_found(transaction_id)

        # Records written before versioning read back as version 1
        if expected_version == 1 and current.get("version") is None:
            data["version"] = 2
            result = await self._adapter.update(
                self._collection_name,
                transaction_id,
                data,
                match={"version": None},
            )
            if result is not None:
                return self._to_entity(result)

        raise ConcurrentModificationError(
            transaction_id,
            expected_version,
            actual_version=current.get("version"),
        )

    # ==========================================================================
    # DELETE
    # ==========================================================================

    async def delete(self, transaction_id: str) -> None:
        """
        Remove one order.

        Raises:
            NotFoundError: If no order has this id
        """
        deleted = await self._adapter.delete(
            self._collection_name,
            transaction_id,
        )
        if not deleted:
            raise self._not_found(transaction_id)

    async def delete_by_owner(self, owner_id: str) -> int:
        """
        Remove every order of one owner; returns how many were removed.

        Deletes exactly the orders ``list_by_owner`` returns, including
        records that carry the owner only in ``userInfo.id``.
        """
        removed = 0
        for transaction in await self.list_by_owner(owner_id):
            if await self._adapter.delete(self._collection_name, transaction.id):
                removed += 1
        logger.debug(f"Removed {removed} order(s) of {owner_id}")
        return removed
