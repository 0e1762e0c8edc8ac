# ==============================================================================
# MAIN API ROUTER - Route Aggregation
# ==============================================================================
# Combines all API version routers
# ==============================================================================

from __future__ import annotations

from fastapi import APIRouter

from order_desk.core.settings import settings
from order_desk.api.v1 import (
    dashboard_router,
    rates_router,
    transactions_router,
    users_router,
)

# Create main API router
api_router = APIRouter()

# Include v1 routers with API prefix
api_router.include_router(transactions_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(users_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(dashboard_router, prefix=settings.API_V1_PREFIX)
api_router.include_router(rates_router, prefix=settings.API_V1_PREFIX)
