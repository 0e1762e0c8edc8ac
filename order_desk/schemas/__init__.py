# ==============================================================================
# SCHEMAS PACKAGE INITIALIZATION
# ==============================================================================

"""
Pydantic Schemas
================

Request/Response validation schemas for API endpoints:
- Base: Common schemas and the response envelope
- Transaction: Sell orders, status changes and listings
- Stats: Dashboard and per-user aggregates
- Deletion: Cascading delete results
- Rates: Price quotes
"""

from order_desk.schemas.base import (
    APIResponse,
    BaseSchema,
    HealthResponse,
    TimestampSchema,
)
from order_desk.schemas.stats import DashboardStats, UserSummary
from order_desk.schemas.transaction import (
    OwnerSnapshot,
    StatusChangeResult,
    StatusOverrideRequest,
    StatusUpdateRequest,
    Transaction,
    TransactionCreate,
    TransactionView,
)
from order_desk.schemas.deletion import BulkDeletionReport, DeletionOutcome
from order_desk.schemas.rates import SellRates

__all__ = [
    "APIResponse",
    "BaseSchema",
    "HealthResponse",
    "TimestampSchema",
    "DashboardStats",
    "UserSummary",
    "OwnerSnapshot",
    "StatusChangeResult",
    "StatusOverrideRequest",
    "StatusUpdateRequest",
    "Transaction",
    "TransactionCreate",
    "TransactionView",
    "BulkDeletionReport",
    "DeletionOutcome",
    "SellRates",
]
