# ==============================================================================
# DELETION SERVICE TESTS
# ==============================================================================
# Tests for cascading order and user removal
# ==============================================================================

from decimal import Decimal

import pytest

from conftest import FakeIdentity, FakeStorage
from order_desk.core.exceptions import DatabaseError, DependencyFailureError, NotFoundError
from order_desk.database.repositories.transaction_repository import (
    TransactionRepository,
)
from order_desk.schemas.transaction import TransactionCreate
from order_desk.services.deletion_service import DeletionService
from order_desk.services.statistics_service import StatisticsService
from order_desk.services.transaction_service import TransactionService


class FlakyRepository(TransactionRepository):
    """Repository whose deletes fail for selected ids."""

    def __init__(self, adapter, failing_ids=()):
        super().__init__(adapter)
        self.failing_ids = set(failing_ids)

    async def delete(self, transaction_id: str) -> None:
        if transaction_id in self.failing_ids:
            raise DatabaseError("disk I/O error", operation="delete")
        await super().delete(transaction_id)


def payload(image: str = "https://res.cloudinary.com/demo/image/upload/v1/proofs/a.jpg"):
    return TransactionCreate(
        pi_amount=Decimal("100"),
        payment_identifier="alice@upi",
        proof_image_ref=image,
        sell_rate_usd=Decimal("0.5"),
        sell_rate_inr=Decimal("41.5"),
        user_info={"username": "alice"},
    )


class TestDeleteTransaction:
    """Tests for single order removal."""

    @pytest.mark.asyncio
    async def test_deletes_image_then_record(
        self,
        transaction_service: TransactionService,
        deletion_service: DeletionService,
        storage: FakeStorage,
        repository: TransactionRepository,
    ):
        order = await transaction_service.create_transaction("user_1", payload())

        outcome = await deletion_service.delete_transaction(order.id)

        assert outcome.image_deleted is True
        assert outcome.warnings == []
        assert storage.calls == [order.proof_image_ref]
        assert outcome.dashboard.total_orders == 0
        assert outcome.aggregates_current is True
        with pytest.raises(NotFoundError):
            await repository.get(order.id)

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_block_record_delete(
        self,
        transaction_service: TransactionService,
        deletion_service: DeletionService,
        storage: FakeStorage,
        repository: TransactionRepository,
    ):
        order = await transaction_service.create_transaction("user_1", payload())
        storage.fail = True

        outcome = await deletion_service.delete_transaction(order.id)

        assert outcome.image_deleted is False
        assert len(outcome.warnings) == 1
        assert len(storage.calls) == 1
        assert await repository.list() == []

    @pytest.mark.asyncio
    async def test_missing_order(
        self,
        deletion_service: DeletionService,
        storage: FakeStorage,
    ):
        with pytest.raises(NotFoundError):
            await deletion_service.delete_transaction("missing")

        assert storage.calls == []

    @pytest.mark.asyncio
    async def test_store_failure_reports_image_state(
        self,
        adapter,
        transaction_service: TransactionService,
        storage: FakeStorage,
    ):
        order = await transaction_service.create_transaction("user_1", payload())
        repository = FlakyRepository(adapter, failing_ids={order.id})
        service = DeletionService(repository, storage)

        with pytest.raises(DependencyFailureError) as exc_info:
            await service.delete_transaction(order.id)

        assert exc_info.value.details["proof_image_deleted"] is True
        assert exc_info.value.details["transaction_id"] == order.id
        assert (await repository.get(order.id)).id == order.id


class TestDeleteUser:
    """Tests for removing a user with all their orders."""

    @pytest.mark.asyncio
    async def test_deletes_all_orders_then_identity(
        self,
        transaction_service: TransactionService,
        deletion_service: DeletionService,
        storage: FakeStorage,
        identity: FakeIdentity,
        repository: TransactionRepository,
    ):
        first = await transaction_service.create_transaction("user_1", payload())
        second = await transaction_service.create_transaction("user_1", payload())
        other = await transaction_service.create_transaction("user_2", payload())

        report = await deletion_service.delete_user_and_transactions("user_1")

        assert report.success is True
        assert sorted(report.deleted_ids) == sorted([first.id, second.id])
        assert report.failed_ids == []
        assert report.identity_deleted is True
        assert identity.deleted == ["user_1"]
        assert len(storage.calls) == 2
        assert [o.id for o in await repository.list()] == [other.id]
        assert report.dashboard.total_orders == 1

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_identity(
        self,
        adapter,
        transaction_service: TransactionService,
        storage: FakeStorage,
        identity: FakeIdentity,
    ):
        first = await transaction_service.create_transaction("user_1", payload())
        second = await transaction_service.create_transaction("user_1", payload())
        repository = FlakyRepository(adapter, failing_ids={second.id})
        service = DeletionService(
            repository,
            storage,
            statistics=StatisticsService(repository),
            identity=identity,
        )

        report = await service.delete_user_and_transactions("user_1")

        assert report.success is False
        assert report.deleted_ids == [first.id]
        assert report.failed_ids == [second.id]
        assert report.identity_deleted is False
        assert identity.deleted == []
        assert [o.id for o in await repository.list()] == [second.id]

    @pytest.mark.asyncio
    async def test_identity_failure_is_a_warning(
        self,
        transaction_service: TransactionService,
        deletion_service: DeletionService,
        identity: FakeIdentity,
        repository: TransactionRepository,
    ):
        await transaction_service.create_transaction("user_1", payload())
        identity.fail = True

        report = await deletion_service.delete_user_and_transactions("user_1")

        assert report.success is True
        assert report.identity_deleted is False
        assert any("identity" in warning for warning in report.warnings)
        assert await repository.list() == []

    @pytest.mark.asyncio
    async def test_user_without_orders(
        self,
        deletion_service: DeletionService,
        identity: FakeIdentity,
        storage: FakeStorage,
    ):
        report = await deletion_service.delete_user_and_transactions("ghost")

        assert report.success is True
        assert report.deleted_ids == []
        assert storage.calls == []
        assert identity.deleted == ["ghost"]


class TestDeleteOrdering:
    """Tests that storage is called exactly once and before the store."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("storage_fails", [False, True])
    async def test_storage_call_precedes_store_delete(
        self,
        adapter,
        transaction_service: TransactionService,
        storage_fails: bool,
    ):
        events = []

        class RecordingStorage(FakeStorage):
            async def delete(self, reference: str) -> None:
                events.append("storage")
                await super().delete(reference)

        class RecordingRepository(TransactionRepository):
            async def delete(self, transaction_id: str) -> None:
                events.append("store")
                await super().delete(transaction_id)

        order = await transaction_service.create_transaction("user_1", payload())
        storage = RecordingStorage()
        storage.fail = storage_fails
        service = DeletionService(RecordingRepository(adapter), storage)

        await service.delete_transaction(order.id)

        assert events == ["storage", "store"]
