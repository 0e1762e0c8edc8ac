# ==============================================================================
# USERS ENDPOINTS - Seller Directory
# ==============================================================================
# Per-user summaries, exports and cascading user removal (admin only)
# ==============================================================================

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query, Response

from order_desk.api.dependencies import (
    AdminCaller,
    DeletionServiceDep,
    StatisticsServiceDep,
    TransactionServiceDep,
)
from order_desk.api.v1.transactions import csv_response
from order_desk.core.constants import SuccessMessages
from order_desk.core.exceptions import PartialFailureError
from order_desk.schemas.base import APIResponse
from order_desk.schemas.deletion import BulkDeletionReport
from order_desk.schemas.stats import UserSummary

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=APIResponse[List[UserSummary]],
    summary="List users",
    description="Every seller with at least one order, most recent first.",
)
async def list_users(
    _: AdminCaller,
    statistics: StatisticsServiceDep,
    q: str = Query("", description="Matches username, email or phone"),
) -> APIResponse[List[UserSummary]]:
    summaries = await statistics.user_summaries(filter_text=q)
    return APIResponse.ok(data=summaries)


@router.get(
    "/{owner_id}/summary",
    response_model=APIResponse[UserSummary],
    summary="User summary",
)
async def get_user_summary(
    owner_id: str,
    _: AdminCaller,
    statistics: StatisticsServiceDep,
) -> APIResponse[UserSummary]:
    summary = await statistics.user_summary(owner_id)
    return APIResponse.ok(data=summary)


@router.get(
    "/{owner_id}/export",
    response_class=Response,
    summary="Export user orders",
    description="CSV export of one seller's orders.",
)
async def export_user_transactions(
    owner_id: str,
    _: AdminCaller,
    service: TransactionServiceDep,
) -> Response:
    content = await service.export_csv(owner_id=owner_id)
    return csv_response(content, f"orders-{owner_id}.csv")


@router.delete(
    "/{owner_id}",
    response_model=APIResponse[BulkDeletionReport],
    summary="Delete user",
    description=(
        "Delete all of a seller's orders and proof images, then the "
        "seller's identity. Responds 207 listing the orders that remain "
        "if any could not be deleted."
    ),
)
async def delete_user(
    owner_id: str,
    _: AdminCaller,
    service: DeletionServiceDep,
) -> APIResponse[BulkDeletionReport]:
    report = await service.delete_user_and_transactions(owner_id)
    if not report.success:
        raise PartialFailureError(
            message=(
                f"user {owner_id} could only be partially deleted: "
                f"{len(report.failed_ids)} order(s) remain"
            ),
            succeeded=report.deleted_ids,
            failed=report.failed_ids,
            details={"warnings": report.warnings},
        )
    return APIResponse.ok(data=report, message=SuccessMessages.USER_DELETED)
