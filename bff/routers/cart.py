"""
Cart Router

Stateless cart checks against the product catalog: availability/stock
validation and price totals. The session-bound upstream cart lives in the
store router.
"""
from decimal import Decimal, InvalidOperation

from fastapi import APIRouter, Depends

from bff.errors import ERROR_CART_ITEMS_REQUIRED, ValidationError
from bff.logging import get_logger
from bff.upstream import CommerceClient, UpstreamError

from .deps import commerce_client
from .models import CartItemsRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])


def _to_decimal(value) -> Decimal:
    try:
        return Decimal(str(value)) if value not in (None, "") else Decimal("0")
    except InvalidOperation:
        return Decimal("0")


@router.post("/validate")
async def validate_cart(body: CartItemsRequest, client: CommerceClient = Depends(commerce_client)):
    """Check each item is published, in stock and has enough stock."""
    if not body.items:
        raise ValidationError(ERROR_CART_ITEMS_REQUIRED)

    results = []
    for item in body.items:
        try:
            product = await client.get(f"/products/{item.product_id}")
        except UpstreamError as e:
            logger.warning("Cart validation lookup failed for product %s: %s", item.product_id, e.code)
            results.append({"product_id": item.product_id, "valid": False, "errors": ["Product not found"]})
            continue

        if not isinstance(product, dict):
            results.append({"product_id": item.product_id, "valid": False, "errors": ["Product not available"]})
            continue

        errors = []
        if product.get("status") != "publish":
            errors.append("Product not available")
        stock_quantity = product.get("stock_quantity")
        if product.get("manage_stock") and stock_quantity is not None and stock_quantity < item.quantity:
            errors.append(f"Only {stock_quantity} items available")
        if product.get("stock_status") != "instock":
            errors.append("Product out of stock")

        results.append({
            "product_id": item.product_id,
            "valid": not errors,
            "errors": errors,
            "product": {
                "id": product.get("id"),
                "name": product.get("name"),
                "price": product.get("price"),
                "stock_status": product.get("stock_status"),
            },
        })

    return {
        "success": True,
        "valid": all(r["valid"] for r in results),
        "items": results,
    }


@router.post("/calculate")
async def calculate_cart(body: CartItemsRequest, client: CommerceClient = Depends(commerce_client)):
    """Price x quantity per item and the cart subtotal."""
    if not body.items:
        raise ValidationError(ERROR_CART_ITEMS_REQUIRED)

    subtotal = Decimal("0")
    calculated = []
    for item in body.items:
        product = await client.get(f"/products/{item.product_id}")
        price = _to_decimal(product.get("price"))
        total = price * item.quantity
        subtotal += total
        calculated.append({
            "product_id": item.product_id,
            "name": product.get("name"),
            "quantity": item.quantity,
            "price": float(price),
            "total": float(total),
        })

    subtotal_str = str(subtotal.quantize(Decimal("0.01")))
    return {
        "success": True,
        "cart": {
            "items": calculated,
            "subtotal": subtotal_str,
            "total": subtotal_str,
        },
    }
