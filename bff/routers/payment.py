"""Payment Router - Razorpay orders for WooCommerce orders."""
from fastapi import APIRouter, Depends

from bff.config import get_settings
from bff.errors import (
    ERROR_ORDER_ID_REQUIRED,
    ERROR_ORDER_NOT_FOUND,
    ERROR_PAYMENT_UNCONFIGURED,
    ValidationError,
)
from bff.logging import get_logger
from bff.payments import RazorpayService, build_checkout_payload
from bff.upstream import CommerceClient, UpstreamError

from .deps import commerce_client, razorpay_service
from .models import RazorpayOrderRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/payment", tags=["payment"])


@router.post("/razorpay-order")
async def create_razorpay_order(
    body: RazorpayOrderRequest,
    client: CommerceClient = Depends(commerce_client),
    razorpay: RazorpayService = Depends(razorpay_service),
):
    """Create a gateway order for the WooCommerce order's total."""
    if not razorpay.is_configured:
        raise ValidationError(ERROR_PAYMENT_UNCONFIGURED)
    if not body.order_id:
        raise ValidationError(ERROR_ORDER_ID_REQUIRED)

    try:
        order = await client.get(f"/orders/{body.order_id}", use_cache=False)
    except UpstreamError as e:
        logger.warning("Order lookup failed for %s: %s", body.order_id, e.code)
        raise ValidationError(ERROR_ORDER_NOT_FOUND) from e

    rz_order = await razorpay.create_order(
        amount=order.get("total") or 0,
        currency=order.get("currency") or "INR",
        receipt=f"order_{body.order_id}",
    )
    logger.info("Razorpay order %s created for order %s", rz_order.get("id"), body.order_id)

    return build_checkout_payload(
        rz_order, order, body.order_id, razorpay.key_id, get_settings().store_name
    )
