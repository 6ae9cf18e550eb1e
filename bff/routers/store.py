"""
Store Router

Storefront cart endpoints proxied to the WooCommerce Store API.

The mobile client round-trips its session through headers:
- request:  X-WC-Store-API-Nonce, Cookie, X-WC-Payment-Method
- response: X-WC-Store-API-Nonce, Cart-Token, Set-Cookie
"""
from datetime import datetime, timezone
from functools import partial
from typing import Any, Awaitable, Callable, Optional

from fastapi import APIRouter, Body, Depends, Request, Response

from bff.config import ADMIN_NAMESPACE
from bff.db import TTL
from bff.logging import get_logger
from bff.store import (
    CartSynchronizer,
    Session,
    StoreCartClient,
    ensure_session,
    execute_with_retry,
    extract_session,
    fetch_new_session,
    forward_session_headers,
    parse_desired_items,
    update_from_response_headers,
)
from bff.upstream import CommerceClient, UpstreamResponse

from .deps import cart_synchronizer, commerce_client, store_cart_client
from .models import SyncCartRequest

logger = get_logger(__name__)

router = APIRouter(prefix="/store", tags=["store"])


async def _run_store_action(
    request: Request,
    response: Response,
    cart_client: StoreCartClient,
    action: Callable[[Session], Awaitable[UpstreamResponse]],
) -> Any:
    """Ensure a session, run the action with stale-nonce retry, forward the new session."""
    session = await ensure_session(cart_client, extract_session(request.headers))
    result, used = await execute_with_retry(
        action, session, partial(fetch_new_session, cart_client)
    )
    forward_session_headers(
        response, update_from_response_headers(used, result.headers), cart_client.set_cookies
    )
    return result.data


@router.get("/cart")
async def get_cart(
    request: Request,
    response: Response,
    cart_client: StoreCartClient = Depends(store_cart_client),
):
    """Read the upstream cart with whatever session the client already has."""
    session = extract_session(request.headers)
    result = await cart_client.get_cart(session)
    forward_session_headers(
        response, update_from_response_headers(session, result.headers), cart_client.set_cookies
    )
    return result.data


@router.post("/cart/update-customer")
async def update_customer(
    request: Request,
    response: Response,
    payload: Optional[dict] = Body(default=None),
    cart_client: StoreCartClient = Depends(store_cart_client),
):
    """Set billing/shipping address on the upstream cart."""
    return await _run_store_action(
        request, response, cart_client,
        partial(cart_client.update_customer, body=payload or {}),
    )


@router.post("/cart/select-shipping-rate")
async def select_shipping_rate(
    request: Request,
    response: Response,
    payload: Optional[dict] = Body(default=None),
    cart_client: StoreCartClient = Depends(store_cart_client),
):
    return await _run_store_action(
        request, response, cart_client,
        partial(cart_client.select_shipping_rate, body=payload or {}),
    )


@router.post("/cart/coupons")
async def apply_coupon(
    request: Request,
    response: Response,
    payload: Optional[dict] = Body(default=None),
    cart_client: StoreCartClient = Depends(store_cart_client),
):
    return await _run_store_action(
        request, response, cart_client,
        partial(cart_client.apply_coupon, body=payload or {}),
    )


@router.delete("/cart/coupons/{code}")
async def remove_coupon(
    code: str,
    request: Request,
    response: Response,
    cart_client: StoreCartClient = Depends(store_cart_client),
):
    return await _run_store_action(
        request, response, cart_client,
        partial(cart_client.remove_coupon, code=code),
    )


def _coupon_expired(coupon: dict, now: datetime) -> bool:
    raw = coupon.get("date_expires_gmt") or coupon.get("date_expires")
    if not raw:
        return False
    try:
        expires = datetime.fromisoformat(raw)
    except (TypeError, ValueError):
        logger.warning("Unparseable coupon expiry %r on coupon %s", raw, coupon.get("id"))
        return False
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)
    return expires < now


@router.get("/coupons")
async def list_coupons(client: CommerceClient = Depends(commerce_client)):
    """Published, unexpired coupons, simplified for the app (cached 1h)."""
    coupons = await client.get(
        "/coupons",
        {"per_page": 50, "status": "publish"},
        namespace=ADMIN_NAMESPACE,
        use_cache=True,
        cache_ttl=TTL.COUPONS,
    )

    now = datetime.now(timezone.utc)
    return [
        {
            "id": c.get("id"),
            "code": c.get("code"),
            "amount": c.get("amount"),
            "discount_type": c.get("discount_type"),
            "description": c.get("description"),
            "minimum_amount": c.get("minimum_amount"),
            "maximum_amount": c.get("maximum_amount"),
            "date_expires": c.get("date_expires"),
        }
        for c in coupons or []
        if not _coupon_expired(c, now)
    ]


@router.post("/cart/sync")
async def sync_cart(
    body: SyncCartRequest,
    request: Request,
    response: Response,
    synchronizer: CartSynchronizer = Depends(cart_synchronizer),
):
    """
    Set the upstream cart to exactly the given items.

    Items missing from the body are removed upstream. Failed individual
    operations are skipped; the response is always the final upstream cart.
    """
    desired = parse_desired_items(item.model_dump() for item in body.items)
    result = await synchronizer.sync(extract_session(request.headers), desired)

    if result.failures:
        logger.warning("Cart sync finished with %s failed operations", len(result.failures))

    forward_session_headers(response, result.session, result.set_cookies)
    return result.cart
