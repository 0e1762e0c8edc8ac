# ==============================================================================
# TRANSACTION MODEL - Sell Orders
# ==============================================================================
# Relational mapping of a sell order for the SQL adapter
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from order_desk.core.constants import TransactionConstants
from order_desk.domain_models.base import SQLBase, TimestampMixin


class TransactionRecord(SQLBase, TimestampMixin):
    """
    Sell order row.

    Monetary values are stored as decimal strings so that the SQL and
    document stores keep exactly what was quoted. Status is a plain
    string column so legacy values still load.

    Attributes:
        owner_id: Identity provider id of the seller
        pi_amount: Quantity of Pi sold
        usd_value / inr_value: Quoted value at submission time
        sell_rate_usd / sell_rate_inr: Rate snapshot used for the quote
        payment_identifier: Payout destination (e.g. UPI id)
        proof_image_ref: URL of the proof-of-payment image
        status: Current lifecycle status
        user_info: Owner identity snapshot at submission time
        version: Monotonic write counter
    """

    __tablename__ = "transactions"

    owner_id: Mapped[str] = mapped_column(
        String(128),
        index=True,
        nullable=False,
    )

    # Quote
    pi_amount: Mapped[str] = mapped_column(String(64), nullable=False)
    usd_value: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    inr_value: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    sell_rate_usd: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    sell_rate_inr: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # Payout
    payment_identifier: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    proof_image_ref: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    status: Mapped[str] = mapped_column(
        String(32),
        default=TransactionConstants.STATUS_PENDING,
        index=True,
        nullable=False,
    )

    user_info: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
    )

    version: Mapped[int] = mapped_column(
        Integer,
        default=1,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<TransactionRecord(id={self.id}, owner_id={self.owner_id}, "
            f"status={self.status})>"
        )
