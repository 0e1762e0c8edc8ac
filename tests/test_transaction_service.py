# ==============================================================================
# TRANSACTION SERVICE TESTS
# ==============================================================================
# Tests for order submission and status changes
# ==============================================================================

from decimal import Decimal

import pytest

from order_desk.core.exceptions import (
    AuthorizationError,
    ConcurrentModificationError,
    DatabaseError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from order_desk.core.security import CallerIdentity
from order_desk.database.repositories.transaction_repository import (
    TransactionRepository,
)
from order_desk.schemas.transaction import TransactionCreate
from order_desk.services.statistics_service import StatisticsService
from order_desk.services.status_machine import TRANSITIONS
from order_desk.services.transaction_service import TransactionService


class UnlistableRepository(TransactionRepository):
    """Repository whose listings fail, as if the store went away mid-request."""

    async def list(self, filters=None, predicate=None):
        raise DatabaseError("connection lost", operation="list")


def payload(**overrides) -> TransactionCreate:
    data = {
        "pi_amount": Decimal("100"),
        "payment_identifier": "alice@upi",
        "proof_image_ref": "https://res.cloudinary.com/demo/image/upload/v1/proofs/a.jpg",
        "sell_rate_usd": Decimal("0.5"),
        "sell_rate_inr": Decimal("41.5"),
        "user_info": {"username": "alice", "email": "alice@example.com"},
    }
    data.update(overrides)
    return TransactionCreate(**data)


class TestCreateTransaction:
    """Tests for order submission."""

    @pytest.mark.asyncio
    async def test_quote_is_computed_from_rates(self, transaction_service: TransactionService):
        order = await transaction_service.create_transaction("user_1", payload())

        assert order.status == "pending"
        assert order.owner_id == "user_1"
        assert order.pi_amount == "100"
        assert order.usd_value == "50.00"
        assert order.inr_value == "4150.00"
        assert order.sell_rate_usd == "0.5"

    @pytest.mark.asyncio
    async def test_quote_rounds_half_up(self, transaction_service: TransactionService):
        order = await transaction_service.create_transaction(
            "user_1",
            payload(pi_amount=Decimal("0.01"), sell_rate_usd=Decimal("0.5")),
        )

        assert order.usd_value == "0.01"

    @pytest.mark.asyncio
    async def test_owner_is_required(self, transaction_service: TransactionService):
        with pytest.raises(ValidationError):
            await transaction_service.create_transaction("  ", payload())

    def test_blank_payment_identifier_is_rejected(self):
        with pytest.raises(ValueError):
            payload(payment_identifier="   ")

    def test_non_positive_amount_is_rejected(self):
        with pytest.raises(ValueError):
            payload(pi_amount=Decimal("0"))

    @pytest.mark.parametrize(
        "field, value",
        [
            ("pi_amount", Decimal("1e30")),
            ("sell_rate_usd", Decimal("123456789012345678901")),
            ("sell_rate_inr", Decimal("0.123456789")),
        ],
    )
    def test_out_of_range_amounts_are_rejected(self, field: str, value: Decimal):
        with pytest.raises(ValueError):
            payload(**{field: value})

    @pytest.mark.asyncio
    async def test_large_amounts_are_quoted(
        self,
        transaction_service: TransactionService,
    ):
        order = await transaction_service.create_transaction(
            "user_1",
            payload(
                pi_amount=Decimal("100000000000.5"),
                sell_rate_usd=Decimal("100000000000"),
            ),
        )

        assert order.usd_value == "10000000000050000000000.00"


class TestTransitions:
    """Tests for lifecycle status changes."""

    @pytest.mark.asyncio
    async def test_full_lifecycle_updates_aggregates(
        self,
        transaction_service: TransactionService,
    ):
        order = await transaction_service.create_transaction("user_1", payload())

        await transaction_service.transition(order.id, "processing")
        result = await transaction_service.transition(order.id, "completed")

        assert result.transaction.status == "completed"
        assert result.transaction.version == 3
        assert result.aggregates_current is True
        assert result.dashboard.completed_orders == 1
        assert result.dashboard.total_usd_value == Decimal("50.00")
        assert result.owner_summary.order_count == 1
        assert result.owner_summary.latest_status == "completed"

    @pytest.mark.asyncio
    async def test_invalid_transition_leaves_order_unchanged(
        self,
        transaction_service: TransactionService,
    ):
        order = await transaction_service.create_transaction("user_1", payload())

        with pytest.raises(InvalidTransitionError):
            await transaction_service.transition(order.id, "completed")

        stored = await transaction_service.get_transaction(order.id)
        assert stored.status == "pending"
        assert stored.version == 1

    @pytest.mark.asyncio
    async def test_unknown_target_status(self, transaction_service: TransactionService):
        order = await transaction_service.create_transaction("user_1", payload())

        with pytest.raises(ValidationError):
            await transaction_service.transition(order.id, "shipped")

    @pytest.mark.asyncio
    async def test_missing_order(self, transaction_service: TransactionService):
        with pytest.raises(NotFoundError):
            await transaction_service.transition("missing", "processing")

    @pytest.mark.asyncio
    async def test_stale_version(self, transaction_service: TransactionService):
        order = await transaction_service.create_transaction("user_1", payload())
        await transaction_service.transition(order.id, "processing", expected_version=1)

        with pytest.raises(ConcurrentModificationError):
            await transaction_service.transition(order.id, "rejected", expected_version=1)

    @pytest.mark.asyncio
    async def test_override_bypasses_table_and_logs(
        self,
        transaction_service: TransactionService,
        caplog,
    ):
        order = await transaction_service.create_transaction("user_1", payload())
        await transaction_service.transition(order.id, "processing")
        await transaction_service.transition(order.id, "completed")

        with caplog.at_level("WARNING"):
            result = await transaction_service.force_set_status(
                order.id,
                "processing",
                reason="completed by mistake",
            )

        assert result.transaction.status == "processing"
        assert result.dashboard.completed_orders == 0
        assert "completed by mistake" in caplog.text

    @pytest.mark.asyncio
    async def test_write_survives_failed_recomputation(self, adapter):
        repository = UnlistableRepository(adapter)
        service = TransactionService(repository, StatisticsService(repository))
        order = await service.create_transaction("user_1", payload())

        result = await service.transition(order.id, "processing")

        assert result.transaction.status == "processing"
        assert result.aggregates_current is False
        assert result.dashboard is None
        assert (await repository.get(order.id)).status == "processing"


class TestAccess:
    """Tests for per-caller order visibility."""

    @pytest.mark.asyncio
    async def test_owner_and_admin_can_read(self, transaction_service: TransactionService):
        order = await transaction_service.create_transaction("user_1", payload())

        owner_view = await transaction_service.get_transaction_for(
            order.id, CallerIdentity("user_1")
        )
        admin_view = await transaction_service.get_transaction_for(
            order.id, CallerIdentity("boss", role="admin")
        )

        assert owner_view.id == admin_view.id == order.id

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(self, transaction_service: TransactionService):
        order = await transaction_service.create_transaction("user_1", payload())

        with pytest.raises(AuthorizationError):
            await transaction_service.get_transaction_for(
                order.id, CallerIdentity("user_2")
            )


STATUSES = ["pending", "processing", "approved", "completed", "rejected"]


class TestEveryTransitionPair:
    """Tests that the stored status follows the transition table for all pairs."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("current", STATUSES)
    @pytest.mark.parametrize("target", STATUSES)
    async def test_pair(
        self,
        transaction_service: TransactionService,
        current: str,
        target: str,
    ):
        order = await transaction_service.create_transaction("user_1", payload())
        if current != "pending":
            await transaction_service.force_set_status(order.id, current)

        if target in TRANSITIONS[current]:
            result = await transaction_service.transition(order.id, target)
            assert result.transaction.status == target
        else:
            with pytest.raises(InvalidTransitionError):
                await transaction_service.transition(order.id, target)

        stored = await transaction_service.get_transaction(order.id)
        expected = target if target in TRANSITIONS[current] else current
        assert stored.status == expected
