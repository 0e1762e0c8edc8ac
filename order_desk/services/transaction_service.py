# ==============================================================================
# TRANSACTION SERVICE - Sell Order Lifecycle
# ==============================================================================
# Business logic for order submission, lookup and status changes
# ==============================================================================

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from order_desk.core.constants import APIConstants, ErrorMessages
from order_desk.core.exceptions import AuthorizationError, ValidationError
from order_desk.core.security import CallerIdentity
from order_desk.database.repositories.transaction_repository import (
    TransactionRepository,
)
from order_desk.schemas.transaction import (
    StatusChangeResult,
    Transaction,
    TransactionCreate,
    TransactionView,
)
from order_desk.services.export_service import transactions_to_csv
from order_desk.services.statistics_service import StatisticsService
from order_desk.services.status_machine import (
    require_known_status,
    validate_transition,
)
from order_desk.services.view_builder import ViewQuery, apply_query, build_view
from order_desk.utils.helpers import format_money

logger = logging.getLogger(__name__)


class TransactionService:
    """
    Sell order operations.

    Status changes go through ``transition``, which enforces the
    lifecycle table, or through ``force_set_status``, the logged
    operational override. After either one the dashboard and the
    owner's summary are recomputed from the store.

    Example:
        >>> service = TransactionService(repository, statistics)
        >>> order = await service.create_transaction("user_1", payload)
        >>> result = await service.transition(order.id, "processing")
        >>> result.transaction.status
        'processing'
    """

    def __init__(
        self,
        repository: TransactionRepository,
        statistics: Optional[StatisticsService] = None,
    ) -> None:
        self._repository = repository
        self._statistics = statistics or StatisticsService(repository)

    # ==========================================================================
    # SUBMISSION
    # ==========================================================================

    async def create_transaction(
        self,
        owner_id: str,
        payload: TransactionCreate,
    ) -> Transaction:
        """
        Submit a new order in ``pending`` status.

        Quoted values are ``pi_amount`` times the submitted rates,
        rounded half-up to two places.

        Raises:
            ValidationError: If the owner is missing
        """
        if not owner_id or not owner_id.strip():
            raise ValidationError(
                message="Orders need an owner",
                errors={"owner_id": "missing"},
            )

        data: Dict[str, Any] = {
            "owner_id": owner_id,
            "pi_amount": _decimal_text(payload.pi_amount),
            "usd_value": format_money(payload.pi_amount * payload.sell_rate_usd),
            "inr_value": format_money(payload.pi_amount * payload.sell_rate_inr),
            "sell_rate_usd": _decimal_text(payload.sell_rate_usd),
            "sell_rate_inr": _decimal_text(payload.sell_rate_inr),
            "payment_identifier": payload.payment_identifier,
            "proof_image_ref": payload.proof_image_ref,
            "user_info": payload.user_info.model_dump(),
        }

        transaction = await self._repository.create(data)
        logger.info(
            f"Order {transaction.id} submitted by {owner_id}: "
            f"{transaction.pi_amount} Pi for {transaction.usd_value} USD"
        )
        return transaction

    # ==========================================================================
    # READS
    # ==========================================================================

    async def get_transaction(self, transaction_id: str) -> Transaction:
        return await self._repository.get(transaction_id)

    async def get_transaction_for(
        self,
        transaction_id: str,
        caller: CallerIdentity,
    ) -> Transaction:
        """
        Fetch an order the caller may see: admins see all, users their own.

        Raises:
            NotFoundError: If the order does not exist
            AuthorizationError: If the caller neither owns it nor is admin
        """
        transaction = await self._repository.get(transaction_id)
        if not caller.is_admin and transaction.owner_id != caller.user_id:
            raise AuthorizationError(message=ErrorMessages.RESOURCE_FORBIDDEN)
        return transaction

    async def list_transactions(self, query: ViewQuery) -> TransactionView:
        """Admin listing over a fresh snapshot."""
        transactions = await self._repository.list()
        return apply_query(transactions, query)

    async def list_owner_transactions(
        self,
        owner_id: str,
        page: int = APIConstants.FIRST_PAGE,
        page_size: Optional[int] = None,
    ) -> TransactionView:
        transactions = await self._repository.list_by_owner(owner_id)
        return build_view(transactions, page=page, page_size=page_size)

    async def export_csv(self, owner_id: Optional[str] = None) -> str:
        """CSV of all orders, or of one owner's orders."""
        if owner_id is None:
            transactions = await self._repository.list()
        else:
            transactions = await self._repository.list_by_owner(owner_id)
        return transactions_to_csv(transactions)

    # ==========================================================================
    # STATUS CHANGES
    # ==========================================================================

    async def transition(
        self,
        transaction_id: str,
        target_status: str,
        expected_version: Optional[int] = None,
    ) -> StatusChangeResult:
        """
        Move an order along the lifecycle.

        Raises:
            ValidationError: If target_status is not a lifecycle status
            NotFoundError: If the order does not exist
            InvalidTransitionError: If the move is not allowed
            ConcurrentModificationError: If expected_version is stale
        """
        target = require_known_status(target_status, field="target_status")
        current = await self._repository.get(transaction_id)
        validate_transition(transaction_id, current.status, target)

        updated = await self._repository.update(
            transaction_id,
            {"status": target},
            expected_version=expected_version,
        )
        logger.info(
            f"Order {transaction_id} moved from {current.status} to {target}"
        )
        return await self._with_aggregates(updated)

    async def force_set_status(
        self,
        transaction_id: str,
        status: str,
        reason: Optional[str] = None,
    ) -> StatusChangeResult:
        """
        Set any lifecycle status, bypassing the transition table.

        For operational repair only, e.g. reopening an order completed
        by mistake. Every use is logged at WARNING.
        """
        target = require_known_status(status)
        current = await self._repository.get(transaction_id)

        updated = await self._repository.update(
            transaction_id,
            {"status": target},
        )
        logger.warning(
            f"Status override on order {transaction_id}: "
            f"{current.status} -> {target} "
            f"(reason: {reason or 'not given'})"
        )
        return await self._with_aggregates(updated)

    async def _with_aggregates(self, transaction: Transaction) -> StatusChangeResult:
        refresh = await self._statistics.refresh(owner_id=transaction.owner_id)
        return StatusChangeResult(
            transaction=transaction,
            dashboard=refresh.dashboard,
            owner_summary=refresh.owner_summary,
            aggregates_current=refresh.current,
        )


def _decimal_text(value: Decimal) -> str:
    return f"{value:f}"
