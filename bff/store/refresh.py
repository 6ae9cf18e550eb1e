"""Session refresh: mint a fresh nonce/cookie by reading the cart."""

from dataclasses import replace
from typing import Optional

from bff.logging import get_logger
from bff.upstream import UpstreamError

from .cart_api import StoreCartClient
from .session import CART_TOKEN_HEADER, Session, joined_set_cookie, response_nonce

logger = get_logger(__name__)


async def fetch_new_session(
    cart_client: StoreCartClient,
    cookie: Optional[str] = None,
    payment_method: Optional[str] = None,
) -> Session:
    """
    Get a brand-new session from the upstream cart.

    Presents only the optional cookie (to keep the same upstream cart) and
    payment-method hint. Never raises: on failure returns Session() with every
    field unset, which callers must treat as "refresh failed".
    """
    try:
        response = await cart_client.get_cart(
            Session(session_cookie=cookie, payment_method=payment_method)
        )
    except UpstreamError as e:
        logger.error("Failed to fetch new session: %s (%s)", e.message, e.code)
        return Session()
    except Exception:
        logger.exception("Failed to fetch new session")
        return Session()

    return Session(
        security_token=response_nonce(response.headers),
        cart_token=response.headers.get(CART_TOKEN_HEADER),
        session_cookie=joined_set_cookie(response.headers) or cookie,
        payment_method=payment_method,
    )


async def ensure_session(cart_client: StoreCartClient, session: Session) -> Session:
    """Use the inbound session if it can mutate the cart, else fetch a new one."""
    if session.is_complete:
        return session

    refreshed = await fetch_new_session(
        cart_client, session.session_cookie, session.payment_method
    )
    return replace(refreshed, payment_method=session.payment_method)
