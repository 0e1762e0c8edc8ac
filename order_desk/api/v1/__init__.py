# ==============================================================================
# API V1 ENDPOINTS PACKAGE
# ==============================================================================

"""
API V1 Endpoints
================

Version 1 API endpoint implementations.
"""

from order_desk.api.v1.transactions import router as transactions_router
from order_desk.api.v1.users import router as users_router
from order_desk.api.v1.dashboard import router as dashboard_router
from order_desk.api.v1.rates import router as rates_router

__all__ = [
    "transactions_router",
    "users_router",
    "dashboard_router",
    "rates_router",
]
