# ==============================================================================
# STATISTICS SCHEMAS - Derived Aggregates
# ==============================================================================
# Dashboard and per-user statistics computed from order snapshots
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import Field, field_serializer

from order_desk.schemas.base import BaseSchema
from order_desk.utils.helpers import format_money


class DashboardStats(BaseSchema):
    """
    Global order statistics.

    Sums are kept at full precision and rendered with two decimal
    places only when serialized. ``status_counts`` has one entry per
    known status plus ``unknown`` and always sums to ``total_orders``.
    """

    total_orders: int = 0
    total_users: int = 0
    status_counts: Dict[str, int] = Field(default_factory=dict)

    pending_orders: int = 0
    processing_orders: int = 0
    approved_orders: int = 0
    completed_orders: int = 0
    rejected_orders: int = 0

    total_pi_volume: Decimal = Decimal("0")
    total_usd_value: Decimal = Decimal("0")
    total_inr_value: Decimal = Decimal("0")

    realized_statuses: List[str] = Field(default_factory=list)

    @field_serializer("total_pi_volume", "total_usd_value", "total_inr_value")
    def serialize_money(self, value: Decimal) -> str:
        return format_money(value)


class UserSummary(BaseSchema):
    """Per-owner order statistics with the latest identity snapshot."""

    owner_id: str
    username: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    order_count: int = 0
    total_pi_volume: Decimal = Decimal("0")
    total_usd_value: Decimal = Decimal("0")
    total_inr_value: Decimal = Decimal("0")

    latest_status: Optional[str] = None
    last_order_at: Optional[datetime] = None

    @field_serializer("total_pi_volume", "total_usd_value", "total_inr_value")
    def serialize_money(self, value: Decimal) -> str:
        return format_money(value)
