# ==============================================================================
# TRANSACTIONS ENDPOINTS - Sell Order Routes
# ==============================================================================
# Order submission, admin review, status changes and deletion
# ==============================================================================

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, Response, status

from order_desk.api.dependencies import (
    AdminCaller,
    CurrentCaller,
    DeletionServiceDep,
    TransactionServiceDep,
)
from order_desk.core.constants import APIConstants, SuccessMessages
from order_desk.core.settings import settings
from order_desk.schemas.base import APIResponse
from order_desk.schemas.deletion import DeletionOutcome
from order_desk.schemas.transaction import (
    StatusChangeResult,
    StatusOverrideRequest,
    StatusUpdateRequest,
    Transaction,
    TransactionCreate,
    TransactionView,
)
from order_desk.services.view_builder import ViewQuery

router = APIRouter(prefix="/transactions", tags=["Transactions"])


def csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=APIConstants.CSV_CONTENT_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "",
    response_model=APIResponse[Transaction],
    status_code=status.HTTP_201_CREATED,
    summary="Submit order",
    description="Submit a sell order; it starts in pending status.",
)
async def create_transaction(
    caller: CurrentCaller,
    payload: TransactionCreate,
    service: TransactionServiceDep,
) -> APIResponse[Transaction]:
    transaction = await service.create_transaction(caller.user_id, payload)
    return APIResponse.ok(data=transaction, message=SuccessMessages.TRANSACTION_CREATED)


@router.get(
    "",
    response_model=APIResponse[TransactionView],
    summary="List orders",
    description="Filtered, paginated listing of all orders (admin).",
)
async def list_transactions(
    _: AdminCaller,
    service: TransactionServiceDep,
    q: str = Query("", description="Matches username, email, phone or payment id"),
    status_filter: str = Query(
        APIConstants.STATUS_FILTER_ALL,
        alias="status",
        description="Lifecycle status or 'All'",
    ),
    page: int = Query(APIConstants.FIRST_PAGE, ge=0),
    page_size: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE),
) -> APIResponse[TransactionView]:
    query = ViewQuery(
        filter_text=q,
        status_filter=status_filter,
        page=page,
        page_size=page_size or settings.DEFAULT_PAGE_SIZE,
    )
    view = await service.list_transactions(query)
    return APIResponse.ok(data=view)


@router.get(
    "/mine",
    response_model=APIResponse[TransactionView],
    summary="My orders",
    description="Orders submitted by the caller, newest first.",
)
async def list_my_transactions(
    caller: CurrentCaller,
    service: TransactionServiceDep,
    page: int = Query(APIConstants.FIRST_PAGE, ge=0),
    page_size: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE),
) -> APIResponse[TransactionView]:
    view = await service.list_owner_transactions(
        caller.user_id,
        page=page,
        page_size=page_size,
    )
    return APIResponse.ok(data=view)


@router.get(
    "/export",
    response_class=Response,
    summary="Export orders",
    description="CSV export of all orders (admin).",
)
async def export_transactions(
    _: AdminCaller,
    service: TransactionServiceDep,
) -> Response:
    content = await service.export_csv()
    return csv_response(content, "orders.csv")


@router.get(
    "/{transaction_id}",
    response_model=APIResponse[Transaction],
    summary="Get order",
    description="Get one order; users may only read their own.",
)
async def get_transaction(
    transaction_id: str,
    caller: CurrentCaller,
    service: TransactionServiceDep,
) -> APIResponse[Transaction]:
    transaction = await service.get_transaction_for(transaction_id, caller)
    return APIResponse.ok(data=transaction)


@router.patch(
    "/{transaction_id}/status",
    response_model=APIResponse[StatusChangeResult],
    summary="Change order status",
    description="Move an order along its lifecycle (admin).",
)
async def update_status(
    transaction_id: str,
    request: StatusUpdateRequest,
    _: AdminCaller,
    service: TransactionServiceDep,
) -> APIResponse[StatusChangeResult]:
    result = await service.transition(
        transaction_id,
        request.target_status,
        expected_version=request.expected_version,
    )
    return APIResponse.ok(
        data=result,
        message=f"Order status changed to {result.transaction.status}",
    )


@router.put(
    "/{transaction_id}/status/override",
    response_model=APIResponse[StatusChangeResult],
    summary="Override order status",
    description="Set any status regardless of lifecycle rules (admin, logged).",
)
async def override_status(
    transaction_id: str,
    request: StatusOverrideRequest,
    caller: AdminCaller,
    service: TransactionServiceDep,
) -> APIResponse[StatusChangeResult]:
    reason = request.reason
    if reason:
        reason = f"{reason} (by {caller.user_id})"
    else:
        reason = f"by {caller.user_id}"
    result = await service.force_set_status(transaction_id, request.status, reason)
    return APIResponse.ok(
        data=result,
        message=f"Order status set to {result.transaction.status}",
    )


@router.delete(
    "/{transaction_id}",
    response_model=APIResponse[DeletionOutcome],
    summary="Delete order",
    description="Delete an order together with its proof image (admin).",
)
async def delete_transaction(
    transaction_id: str,
    _: AdminCaller,
    service: DeletionServiceDep,
) -> APIResponse[DeletionOutcome]:
    outcome = await service.delete_transaction(transaction_id)
    return APIResponse.ok(data=outcome, message=SuccessMessages.TRANSACTION_DELETED)
