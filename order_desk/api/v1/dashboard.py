# ==============================================================================
# DASHBOARD ENDPOINTS - Operational Statistics
# ==============================================================================

from __future__ import annotations

from fastapi import APIRouter

from order_desk.api.dependencies import AdminCaller, StatisticsServiceDep
from order_desk.schemas.base import APIResponse
from order_desk.schemas.stats import DashboardStats

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "/stats",
    response_model=APIResponse[DashboardStats],
    summary="Dashboard statistics",
    description="Order counts per status and realized totals (admin).",
)
async def get_dashboard_stats(
    _: AdminCaller,
    statistics: StatisticsServiceDep,
) -> APIResponse[DashboardStats]:
    stats = await statistics.dashboard()
    return APIResponse.ok(data=stats)
