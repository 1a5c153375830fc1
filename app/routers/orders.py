# =============================================================================
# app/routers/orders.py - Order Endpoints
# =============================================================================
# Order intake and the order tables.
# All endpoints require authentication; edits and resends require admin.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query

from app.dependencies import AdminDep, CurrentUserDep
from app.routers.tasks import TaskSubmitResponse
from core.models.order import (
    OrderCreateRequest,
    OrderCreateResponse,
    OrderDeleteResponse,
    OrderList,
    OrderUpdateRequest,
    OrderUpdateResponse,
)
from core.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=OrderList)
async def list_orders(
    user: CurrentUserDep,
    agency_name: Annotated[str | None, Query(description="Exact agency name")] = None,
    month: Annotated[
        str | None,
        Query(pattern=r"^\d{4}-\d{2}$", description="Delivery month, YYYY-MM"),
    ] = None,
):
    """
    List orders, newest first.

    Administrators see every order. Other users see the orders of their
    agency and the orders they placed themselves.
    """
    return OrderService.list_orders(user, agency_name=agency_name, month=month)


@router.post("", response_model=OrderCreateResponse)
def create_order(request: OrderCreateRequest, user: CurrentUserDep):
    """
    Place an order.

    The order is validated, numbered, priced, saved and announced by
    email. When mail is not configured the order is saved as pending
    and email_sent is false.
    """
    return OrderService.create_order(request, user)


@router.patch(
    "/{order_id}",
    response_model=OrderUpdateResponse | OrderDeleteResponse,
)
async def update_order(
    order_id: Annotated[UUID, Path(description="Order UUID")],
    request: OrderUpdateRequest,
    admin: AdminDep,
):
    """
    Overwrite the status and pricing of an order.

    status=canceled deletes the order.
    """
    logger.info(f"Admin {admin.id} updating order {order_id}")
    return OrderService.update_order(order_id, request)


@router.post("/{order_id}/notify", response_model=TaskSubmitResponse)
async def resend_order_email(
    order_id: Annotated[UUID, Path(description="Order UUID")],
    admin: AdminDep,
):
    """
    Re-send the notification email of an order in the background.

    Use GET /api/v1/tasks/{task_id} to follow the task.
    """
    OrderService.get_order(order_id)

    try:
        from workers.tasks import send_order_notification

        result = send_order_notification.delay(str(order_id))
    except Exception as e:
        logger.error(f"Error queueing notification for order {order_id}: {e}")
        raise HTTPException(
            status_code=503,
            detail=f"Failed to queue the email. Is Redis running? Error: {e}",
        )

    logger.info(f"Admin {admin.id} queued notification task {result.id} for order {order_id}")
    return TaskSubmitResponse(
        task_id=result.id,
        status="PENDING",
        message="Email queued. Use GET /api/v1/tasks/{task_id} to check status.",
    )
