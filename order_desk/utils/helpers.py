# ==============================================================================
# HELPER UTILITIES
# ==============================================================================
# Common utility functions used across the application
# ==============================================================================

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Optional
from uuid import uuid4
import math

from order_desk.core.constants import TransactionConstants


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid4())


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes.

    SQLite and MongoDB both hand back naive datetimes that were
    written as UTC.
    """
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def parse_decimal(value: Any) -> Optional[Decimal]:
    """
    Parse a stored monetary value.

    Args:
        value: Decimal, int, float or numeric string

    Returns:
        Finite Decimal, or None if the value is missing or malformed
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except (InvalidOperation, ValueError):
            return None
    return result if result.is_finite() else None


def quantize_money(value: Decimal) -> Decimal:
    """
    Round a monetary amount to 2 places, half-up.

    Precision is widened to fit every integer digit, so large sums are
    rounded rather than rejected by the default 28 digit context.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(
            Decimal(TransactionConstants.MONEY_PLACES),
            rounding=ROUND_HALF_UP,
        )


def format_money(value: Decimal) -> str:
    """Render a monetary amount as a fixed 2-place decimal string."""
    return f"{quantize_money(value):f}"


def calculate_page_count(total: int, page_size: int) -> int:
    """Number of pages needed for `total` items, 0 when empty."""
    return math.ceil(total / page_size) if total > 0 else 0


def contains_ci(haystack: Optional[str], needle: str) -> bool:
    """Case-insensitive substring test that tolerates missing values."""
    if not haystack:
        return False
    return needle in str(haystack).lower()
