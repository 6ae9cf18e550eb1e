"""
Orders Router

Order creation, history and refunds over wc/v3. Orders are placed as
guest orders: a customer_id in the body is dropped. Order reads always go
to upstream so status changes show up at once.
"""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from bff.errors import (
    ERROR_BILLING_REQUIRED,
    ERROR_ORDER_ITEMS_REQUIRED,
    ERROR_REFUND_AMOUNT_REQUIRED,
    ValidationError,
)
from bff.logging import get_logger, sanitize_id_for_logging
from bff.upstream import CommerceClient

from .deps import commerce_client
from .models import paginated, query_params

logger = get_logger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201)
async def create_order(
    body: Optional[dict[str, Any]] = Body(None),
    client: CommerceClient = Depends(commerce_client),
):
    body = body or {}
    order_data = dict(body)
    if order_data.pop("customer_id", None):
        logger.warning("Dropped customer_id from guest order")

    if not order_data.get("line_items"):
        raise ValidationError(ERROR_ORDER_ITEMS_REQUIRED)
    if not order_data.get("billing"):
        raise ValidationError(ERROR_BILLING_REQUIRED)

    order = await client.post("/orders", order_data)
    logger.info("Order created: %s", sanitize_id_for_logging(str((order or {}).get("id", ""))))
    return {"success": True, "data": order, "message": "Order created successfully"}


@router.get("")
async def list_orders(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    customer: Optional[int] = None,
    status: Optional[str] = None,
    orderby: str = "date",
    order: str = "desc",
    client: CommerceClient = Depends(commerce_client),
):
    params = query_params(
        page=page, per_page=per_page, customer=customer, status=status or None,
        orderby=orderby, order=order,
    )
    orders = await client.get("/orders", params, use_cache=False)
    return paginated(orders, page, per_page)


@router.get("/{order_id}")
async def get_order(order_id: int, client: CommerceClient = Depends(commerce_client)):
    return {"success": True, "data": await client.get(f"/orders/{order_id}", use_cache=False)}


@router.post("/{order_id}/refunds", status_code=201)
async def create_refund(
    order_id: int,
    body: Optional[dict[str, Any]] = Body(None),
    client: CommerceClient = Depends(commerce_client),
):
    body = body or {}
    if not body.get("amount"):
        raise ValidationError(ERROR_REFUND_AMOUNT_REQUIRED)

    refund = await client.post(f"/orders/{order_id}/refunds", body)
    return {"success": True, "data": refund, "message": "Refund created successfully"}
