# ==============================================================================
# VIEW BUILDER - Filtered & Paginated Listings
# ==============================================================================
# Pure functions producing admin list views from a snapshot of orders
# ==============================================================================

from __future__ import annotations

from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from order_desk.core.constants import APIConstants
from order_desk.core.exceptions import ValidationError
from order_desk.core.settings import settings
from order_desk.schemas.stats import UserSummary
from order_desk.schemas.transaction import Transaction, TransactionView
from order_desk.services.aggregation import recency_key
from order_desk.services.status_machine import require_known_status
from order_desk.utils.helpers import calculate_page_count, contains_ci


class ViewQuery(BaseModel):
    """
    Admin listing state.

    Pages are zero-indexed. Changing the text or status filter through
    ``refine`` always returns to the first page.
    """

    model_config = ConfigDict(frozen=True)

    filter_text: str = ""
    status_filter: str = APIConstants.STATUS_FILTER_ALL
    page: int = Field(APIConstants.FIRST_PAGE, ge=0)
    page_size: int = Field(
        default_factory=lambda: settings.DEFAULT_PAGE_SIZE,
        ge=APIConstants.MIN_PAGE_SIZE,
    )

    def refine(
        self,
        filter_text: Optional[str] = None,
        status_filter: Optional[str] = None,
        page: Optional[int] = None,
    ) -> "ViewQuery":
        """Return an updated query; a filter change resets the page."""
        changes = {}
        if filter_text is not None and filter_text != self.filter_text:
            changes["filter_text"] = filter_text
        if status_filter is not None and status_filter != self.status_filter:
            changes["status_filter"] = status_filter

        if changes:
            changes["page"] = APIConstants.FIRST_PAGE
        elif page is not None:
            changes["page"] = max(page, APIConstants.FIRST_PAGE)

        return self.model_copy(update=changes)


def _normalize_status_filter(status_filter: Optional[str]) -> Optional[str]:
    """None means no status filtering."""
    if status_filter is None:
        return None
    if status_filter.strip().lower() == APIConstants.STATUS_FILTER_ALL.lower():
        return None
    return require_known_status(status_filter, field="status_filter")


def matches_text(transaction: Transaction, needle: str) -> bool:
    """OR match of a lowercased needle over owner contact and payout fields."""
    info = transaction.user_info
    return (
        contains_ci(info.username, needle)
        or contains_ci(info.email, needle)
        or contains_ci(info.phone, needle)
        or contains_ci(transaction.payment_identifier, needle)
    )


def build_view(
    transactions: Iterable[Transaction],
    filter_text: str = "",
    status_filter: Optional[str] = APIConstants.STATUS_FILTER_ALL,
    page: int = APIConstants.FIRST_PAGE,
    page_size: Optional[int] = None,
) -> TransactionView:
    """
    Filter, order and slice orders for display.

    Args:
        transactions: Snapshot of orders
        filter_text: Case-insensitive substring; empty matches everything
        status_filter: A lifecycle status, or "All"
        page: Requested zero-indexed page, clamped into range
        page_size: Items per page (defaults to configuration)

    Raises:
        ValidationError: On an unknown status filter or page size below 1
    """
    page_size = settings.DEFAULT_PAGE_SIZE if page_size is None else page_size
    if page_size < APIConstants.MIN_PAGE_SIZE:
        raise ValidationError(
            message="Page size must be at least 1",
            errors={"page_size": page_size},
        )

    status = _normalize_status_filter(status_filter)
    needle = (filter_text or "").strip().lower()

    selected: List[Transaction] = [
        t for t in transactions
        if (status is None or t.status == status)
        and (not needle or matches_text(t, needle))
    ]
    selected.sort(key=recency_key, reverse=True)

    total = len(selected)
    page_count = calculate_page_count(total, page_size)
    page = min(max(page, APIConstants.FIRST_PAGE), max(page_count - 1, 0))
    start = page * page_size

    return TransactionView(
        items=selected[start:start + page_size],
        total_count=total,
        page_count=page_count,
        page=page,
        page_size=page_size,
    )


def apply_query(
    transactions: Iterable[Transaction],
    query: ViewQuery,
) -> TransactionView:
    return build_view(
        transactions,
        filter_text=query.filter_text,
        status_filter=query.status_filter,
        page=query.page,
        page_size=query.page_size,
    )


def filter_user_summaries(
    summaries: Iterable[UserSummary],
    filter_text: str = "",
) -> List[UserSummary]:
    """User directory search over username, email and phone."""
    needle = (filter_text or "").strip().lower()
    if not needle:
        return list(summaries)
    return [
        s for s in summaries
        if contains_ci(s.username, needle)
        or contains_ci(s.email, needle)
        or contains_ci(s.phone, needle)
    ]
