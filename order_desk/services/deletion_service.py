# ==============================================================================
# DELETION SERVICE - Cascading Order & User Removal
# ==============================================================================
# Removes orders together with their proof images and, for whole users,
# their identity record
# ==============================================================================

from __future__ import annotations

import logging
from typing import List, Optional

from order_desk.core.exceptions import DependencyFailureError, NotFoundError
from order_desk.database.repositories.transaction_repository import (
    TransactionRepository,
)
from order_desk.integrations.identity import IdentityDirectoryClient
from order_desk.integrations.storage import ObjectStorageClient
from order_desk.schemas.deletion import BulkDeletionReport, DeletionOutcome
from order_desk.schemas.transaction import Transaction
from order_desk.services.statistics_service import StatisticsService

logger = logging.getLogger(__name__)


class DeletionService:
    """
    Cascading delete coordinator.

    Per order the proof image is deleted first, with exactly one call to
    storage, and the record second. A storage failure is reported as a
    warning and never blocks the record deletion; a store failure stops
    the operation and says whether the image was already gone.

    Example:
        >>> service = DeletionService(repository, storage)
        >>> outcome = await service.delete_transaction(order_id)
        >>> outcome.warnings
        []
    """

    def __init__(
        self,
        repository: TransactionRepository,
        storage: ObjectStorageClient,
        statistics: Optional[StatisticsService] = None,
        identity: Optional[IdentityDirectoryClient] = None,
    ) -> None:
        self._repository = repository
        self._storage = storage
        self._statistics = statistics or StatisticsService(repository)
        self._identity = identity

    async def _delete_image(
        self,
        transaction: Transaction,
        warnings: List[str],
    ) -> bool:
        """Best-effort proof image removal; True if storage confirmed it."""
        if not transaction.proof_image_ref:
            return False
        try:
            await self._storage.delete(transaction.proof_image_ref)
        except DependencyFailureError as e:
            message = (
                f"proof image of order {transaction.id} could not be "
                f"deleted: {e.message}"
            )
            logger.warning(message)
            warnings.append(message)
            return False
        return True

    async def _delete_record(
        self,
        transaction: Transaction,
        image_deleted: bool,
    ) -> None:
        """
        Raises:
            NotFoundError: If the record vanished meanwhile
            DependencyFailureError: If the store failed; details carry
                ``proof_image_deleted``
        """
        try:
            await self._repository.delete(transaction.id)
        except DependencyFailureError as e:
            logger.error(
                f"Order {transaction.id} could not be deleted "
                f"(proof image deleted: {image_deleted}): {e.message}"
            )
            raise DependencyFailureError(
                message=f"order {transaction.id} could not be deleted: {e.message}",
                dependency=e.dependency,
                operation="delete",
                details={
                    "transaction_id": transaction.id,
                    "proof_image_deleted": image_deleted,
                },
            ) from e

    # ==========================================================================
    # SINGLE ORDER
    # ==========================================================================

    async def delete_transaction(self, transaction_id: str) -> DeletionOutcome:
        """
        Delete one order and its proof image.

        Raises:
            NotFoundError: If the order does not exist
            DependencyFailureError: If the record could not be deleted
        """
        transaction = await self._repository.get(transaction_id)

        warnings: List[str] = []
        image_deleted = await self._delete_image(transaction, warnings)
        await self._delete_record(transaction, image_deleted)
        logger.info(f"Deleted order {transaction_id}")

        refresh = await self._statistics.refresh()
        return DeletionOutcome(
            transaction_id=transaction_id,
            owner_id=transaction.owner_id,
            image_deleted=image_deleted,
            warnings=warnings,
            dashboard=refresh.dashboard,
            aggregates_current=refresh.current,
        )

    # ==========================================================================
    # WHOLE USER
    # ==========================================================================

    async def delete_user_and_transactions(
        self,
        owner_id: str,
    ) -> BulkDeletionReport:
        """
        Delete every order of an owner, then the owner's identity.

        Each order is processed independently; failures are collected
        rather than aborting the rest. The identity is only removed once
        no orders remain.

        Raises:
            DependencyFailureError: If the owner's orders cannot be listed
        """
        transactions = await self._repository.list_by_owner(owner_id)
        report = BulkDeletionReport(owner_id=owner_id)

        for transaction in transactions:
            image_deleted = await self._delete_image(transaction, report.warnings)
            try:
                await self._delete_record(transaction, image_deleted)
            except NotFoundError:
                report.warnings.append(
                    f"order {transaction.id} was already deleted"
                )
                report.deleted_ids.append(transaction.id)
            except DependencyFailureError:
                report.failed_ids.append(transaction.id)
            else:
                report.deleted_ids.append(transaction.id)

        if report.success:
            report.identity_deleted = await self._delete_identity(
                owner_id,
                report.warnings,
            )
        else:
            logger.error(
                f"User {owner_id}: {len(report.failed_ids)} of "
                f"{len(transactions)} orders could not be deleted"
            )

        logger.info(
            f"User {owner_id}: deleted {len(report.deleted_ids)} orders"
        )

        refresh = await self._statistics.refresh()
        report.dashboard = refresh.dashboard
        report.aggregates_current = refresh.current
        return report

    async def _delete_identity(self, owner_id: str, warnings: List[str]) -> bool:
        if self._identity is None:
            return False
        try:
            await self._identity.delete_user(owner_id)
        except DependencyFailureError as e:
            message = f"identity of user {owner_id} could not be removed: {e.message}"
            logger.warning(message)
            warnings.append(message)
            return False
        return True
