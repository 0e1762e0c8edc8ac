# ==============================================================================
# SERVICES PACKAGE INITIALIZATION
# ==============================================================================

"""
Service Layer
=============

Business logic for sell orders:
- status_machine: Lifecycle transition table
- aggregation: Pure dashboard and per-user statistics
- view_builder: Pure filtering and pagination of listings
- export_service: CSV reports
- StatisticsService: Aggregates over the live store
- TransactionService: Submission, lookup and status changes
- DeletionService: Cascading order and user removal
"""

from order_desk.services.aggregation import (
    RealizedValuePolicy,
    compute_dashboard_stats,
    compute_user_summaries,
    compute_user_summary,
)
from order_desk.services.deletion_service import DeletionService
from order_desk.services.statistics_service import StatisticsService
from order_desk.services.transaction_service import TransactionService
from order_desk.services.view_builder import (
    ViewQuery,
    build_view,
    filter_user_summaries,
)

__all__ = [
    "RealizedValuePolicy",
    "compute_dashboard_stats",
    "compute_user_summaries",
    "compute_user_summary",
    "DeletionService",
    "StatisticsService",
    "TransactionService",
    "ViewQuery",
    "build_view",
    "filter_user_summaries",
]
