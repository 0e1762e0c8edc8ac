# ==============================================================================
# AGGREGATION - Dashboard & Per-User Statistics
# ==============================================================================
# Pure functions deriving statistics from a snapshot of orders
# ==============================================================================

"""
Aggregation Engine
==================

Statistics are never stored. They are recomputed from whatever list of
orders the caller passes in, so the same snapshot always yields the
same numbers.

Which statuses count toward monetary totals is decided by a single
``RealizedValuePolicy``; counts per status are reported regardless.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from order_desk.core.constants import TransactionConstants
from order_desk.core.settings import settings
from order_desk.schemas.stats import DashboardStats, UserSummary
from order_desk.schemas.transaction import Transaction
from order_desk.utils.helpers import parse_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class RealizedValuePolicy:
    """
    Statuses whose orders contribute to monetary totals.

    Attributes:
        statuses: Realized statuses, default ``{"completed"}``
    """

    statuses: FrozenSet[str] = frozenset({TransactionConstants.STATUS_COMPLETED})

    @classmethod
    def from_settings(cls) -> "RealizedValuePolicy":
        return cls(frozenset(settings.REALIZED_STATUSES))

    def is_realized(self, status: str) -> bool:
        return status in self.statuses


def recency_key(transaction: Transaction) -> Tuple[datetime, str]:
    """Sort key ordering orders by creation time, id breaking ties."""
    return (transaction.created_at or _EPOCH, transaction.id)


def _amount(transaction: Transaction, field: str) -> Decimal:
    """Parsed monetary field; unusable values count as zero."""
    raw = getattr(transaction, field)
    value = parse_decimal(raw)
    if value is None:
        logger.warning(
            f"Data quality: order {transaction.id} has unusable "
            f"{field}={raw!r}, counted as 0"
        )
        return ZERO
    return value


def _realized_totals(
    transactions: Iterable[Transaction],
    policy: RealizedValuePolicy,
) -> Tuple[Decimal, Decimal, Decimal]:
    pi_volume = usd_value = inr_value = ZERO
    for transaction in transactions:
        if not policy.is_realized(transaction.status):
            continue
        pi_volume += _amount(transaction, "pi_amount")
        usd_value += _amount(transaction, "usd_value")
        inr_value += _amount(transaction, "inr_value")
    return pi_volume, usd_value, inr_value


# ==============================================================================
# DASHBOARD
# ==============================================================================

def compute_dashboard_stats(
    transactions: Iterable[Transaction],
    policy: Optional[RealizedValuePolicy] = None,
) -> DashboardStats:
    """
    Global statistics over a snapshot of orders.

    Args:
        transactions: Every order to include
        policy: Realized statuses (defaults to configuration)

    Returns:
        DashboardStats whose status counts sum to ``total_orders``
    """
    policy = policy or RealizedValuePolicy.from_settings()
    transactions = list(transactions)

    counts: Dict[str, int] = {
        status: 0 for status in TransactionConstants.all_statuses()
    }
    counts[TransactionConstants.STATUS_UNKNOWN] = 0
    for transaction in transactions:
        bucket = (
            transaction.status
            if transaction.status in counts
            else TransactionConstants.STATUS_UNKNOWN
        )
        counts[bucket] += 1

    pi_volume, usd_value, inr_value = _realized_totals(transactions, policy)

    return DashboardStats(
        total_orders=len(transactions),
        total_users=len({t.owner_id for t in transactions}),
        status_counts=counts,
        pending_orders=counts[TransactionConstants.STATUS_PENDING],
        processing_orders=counts[TransactionConstants.STATUS_PROCESSING],
        approved_orders=counts[TransactionConstants.STATUS_APPROVED],
        completed_orders=counts[TransactionConstants.STATUS_COMPLETED],
        rejected_orders=counts[TransactionConstants.STATUS_REJECTED],
        total_pi_volume=pi_volume,
        total_usd_value=usd_value,
        total_inr_value=inr_value,
        realized_statuses=sorted(policy.statuses),
    )


# ==============================================================================
# PER-USER SUMMARIES
# ==============================================================================

def _summarize(
    owner_id: str,
    orders: List[Transaction],
    policy: RealizedValuePolicy,
) -> UserSummary:
    latest = max(orders, key=recency_key)
    pi_volume, usd_value, inr_value = _realized_totals(orders, policy)
    return UserSummary(
        owner_id=owner_id,
        username=latest.user_info.username,
        email=latest.user_info.email,
        phone=latest.user_info.phone,
        order_count=len(orders),
        total_pi_volume=pi_volume,
        total_usd_value=usd_value,
        total_inr_value=inr_value,
        latest_status=latest.status,
        last_order_at=latest.created_at,
    )


def compute_user_summaries(
    transactions: Iterable[Transaction],
    policy: Optional[RealizedValuePolicy] = None,
) -> Dict[str, UserSummary]:
    """
    One summary per owner that has at least one order.

    Returns:
        Mapping of owner id to summary, most recently active first
    """
    policy = policy or RealizedValuePolicy.from_settings()

    by_owner: Dict[str, List[Transaction]] = defaultdict(list)
    for transaction in transactions:
        by_owner[transaction.owner_id].append(transaction)

    summaries = [
        _summarize(owner_id, orders, policy)
        for owner_id, orders in by_owner.items()
    ]
    summaries.sort(
        key=lambda s: (s.last_order_at or _EPOCH, s.owner_id),
        reverse=True,
    )
    return {summary.owner_id: summary for summary in summaries}


def compute_user_summary(
    transactions: Iterable[Transaction],
    owner_id: str,
    policy: Optional[RealizedValuePolicy] = None,
) -> Optional[UserSummary]:
    """Summary for a single owner, None if they have no orders."""
    orders = [t for t in transactions if t.owner_id == owner_id]
    if not orders:
        return None
    return _summarize(owner_id, orders, policy or RealizedValuePolicy.from_settings())
