# ==============================================================================
# EXPORT SERVICE - CSV Reports
# ==============================================================================

from __future__ import annotations

import csv
import io
from typing import Iterable, Optional

from order_desk.schemas.transaction import Transaction
from order_desk.services.aggregation import recency_key

CSV_HEADER = [
    "Order ID",
    "Username",
    "Email",
    "Phone",
    "Pi Amount",
    "USD Value",
    "INR Value",
    "Payment Identifier",
    "Status",
    "Created At",
    "Sell Rate USD",
    "Sell Rate INR",
]


def _cell(value: Optional[object]) -> str:
    return "" if value is None else str(value)


def transactions_to_csv(transactions: Iterable[Transaction]) -> str:
    """
    Render orders as CSV, newest first.

    Stored values are written as-is; quoting is left to the csv module.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for t in sorted(transactions, key=recency_key, reverse=True):
        writer.writerow([
            t.id,
            _cell(t.user_info.username),
            _cell(t.user_info.email),
            _cell(t.user_info.phone),
            _cell(t.pi_amount),
            _cell(t.usd_value),
            _cell(t.inr_value),
            t.payment_identifier,
            t.status,
            t.created_at.isoformat() if t.created_at else "",
            _cell(t.sell_rate_usd),
            _cell(t.sell_rate_inr),
        ])

    return buffer.getvalue()
