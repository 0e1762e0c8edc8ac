# ==============================================================================
# RATE SCHEMAS - Price Quotes
# ==============================================================================

from __future__ import annotations

from decimal import Decimal

from pydantic import Field, field_serializer

from order_desk.schemas.base import BaseSchema


class SellRates(BaseSchema):
    """Per-Pi sell rates offered to sellers."""

    usd: Decimal = Field(..., gt=0)
    inr: Decimal = Field(..., gt=0)

    @field_serializer("usd", "inr")
    def serialize_rate(self, value: Decimal) -> str:
        return f"{value:f}"
