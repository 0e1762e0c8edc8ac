# ==============================================================================
# STATISTICS SERVICE - Aggregates Over the Live Store
# ==============================================================================
# Loads a fresh snapshot of orders and hands it to the aggregation engine
# ==============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from order_desk.core.constants import ErrorMessages
from order_desk.core.exceptions import DependencyFailureError, NotFoundError
from order_desk.database.repositories.transaction_repository import (
    TransactionRepository,
)
from order_desk.schemas.stats import DashboardStats, UserSummary
from order_desk.services.aggregation import (
    RealizedValuePolicy,
    compute_dashboard_stats,
    compute_user_summaries,
    compute_user_summary,
)
from order_desk.services.view_builder import filter_user_summaries

logger = logging.getLogger(__name__)


@dataclass
class AggregateRefresh:
    """Statistics recomputed after a write."""

    dashboard: Optional[DashboardStats] = None
    owner_summary: Optional[UserSummary] = None
    current: bool = True


class StatisticsService:
    """
    Dashboard and user directory statistics.

    Every call lists the store again, so results always reflect writes
    that completed before the call.
    """

    def __init__(
        self,
        repository: TransactionRepository,
        policy: Optional[RealizedValuePolicy] = None,
    ) -> None:
        self._repository = repository
        self._policy = policy or RealizedValuePolicy.from_settings()

    @property
    def policy(self) -> RealizedValuePolicy:
        return self._policy

    async def dashboard(self) -> DashboardStats:
        transactions = await self._repository.list()
        return compute_dashboard_stats(transactions, self._policy)

    async def user_summaries(self, filter_text: str = "") -> List[UserSummary]:
        """All owners with orders, most recently active first."""
        transactions = await self._repository.list()
        summaries = compute_user_summaries(transactions, self._policy)
        return filter_user_summaries(summaries.values(), filter_text)

    async def user_summary(self, owner_id: str) -> UserSummary:
        """
        Raises:
            NotFoundError: If the owner has no orders
        """
        transactions = await self._repository.list_by_owner(owner_id)
        summary = compute_user_summary(transactions, owner_id, self._policy)
        if summary is None:
            raise NotFoundError(
                message=f"{ErrorMessages.USER_NOT_FOUND}: {owner_id}",
                resource_type="user",
                resource_id=owner_id,
            )
        return summary

    async def refresh(self, owner_id: Optional[str] = None) -> AggregateRefresh:
        """
        Recompute statistics after a committed write.

        A store failure here is logged and reported through
        ``current=False``; it never undoes or hides the write itself.
        """
        try:
            transactions = await self._repository.list()
        except DependencyFailureError as e:
            logger.error(f"Statistics recomputation failed: {e.message}")
            return AggregateRefresh(current=False)

        dashboard = compute_dashboard_stats(transactions, self._policy)
        owner_summary = None
        if owner_id is not None:
            owner_summary = compute_user_summary(
                transactions,
                owner_id,
                self._policy,
            )
        return AggregateRefresh(dashboard=dashboard, owner_summary=owner_summary)
