"""
Store API session and header mapping.

A Session is the {nonce, cart token, cookie, payment method} a mobile client
round-trips through its own request headers. It lives for one inbound request
and is never mutated: every upstream response produces a new value.
"""

from dataclasses import dataclass, replace
from typing import Iterable, Mapping, Optional, Union

import httpx
from starlette.responses import Response

# Inbound / outbound header names
NONCE_HEADER = "X-WC-Store-API-Nonce"
LEGACY_NONCE_HEADER = "Nonce"
CART_TOKEN_HEADER = "Cart-Token"
COOKIE_HEADER = "Cookie"
SET_COOKIE_HEADER = "Set-Cookie"
PAYMENT_METHOD_HEADER = "X-WC-Payment-Method"

EXPOSED_HEADERS = f"{NONCE_HEADER}, {SET_COOKIE_HEADER}, {CART_TOKEN_HEADER}"

HeadersLike = Union[httpx.Headers, Mapping[str, str]]


@dataclass(frozen=True)
class Session:
    """Upstream cart credentials. None means absent, "" is a present value."""
    security_token: Optional[str] = None
    cart_token: Optional[str] = None
    session_cookie: Optional[str] = None
    payment_method: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return (
            self.security_token is None
            and self.cart_token is None
            and self.session_cookie is None
        )

    @property
    def is_complete(self) -> bool:
        """Carries both a nonce and a cookie, enough to mutate the cart."""
        return bool(self.security_token) and bool(self.session_cookie)


def _as_headers(headers: HeadersLike) -> httpx.Headers:
    return headers if isinstance(headers, httpx.Headers) else httpx.Headers(headers)


def extract_session(headers: HeadersLike) -> Session:
    """Read the session the client sent on its own request."""
    headers = _as_headers(headers)
    return Session(
        security_token=headers.get(NONCE_HEADER),
        session_cookie=headers.get(COOKIE_HEADER),
        payment_method=headers.get(PAYMENT_METHOD_HEADER),
    )


def to_outbound_headers(session: Session) -> dict[str, str]:
    """Headers for a Store API call. Unset fields produce no header."""
    headers: dict[str, str] = {}
    if session.security_token is not None:
        headers[NONCE_HEADER] = session.security_token
        headers[LEGACY_NONCE_HEADER] = session.security_token
    if session.cart_token is not None:
        headers[CART_TOKEN_HEADER] = session.cart_token
    if session.session_cookie is not None:
        headers[COOKIE_HEADER] = session.session_cookie
    if session.payment_method is not None:
        headers[PAYMENT_METHOD_HEADER] = session.payment_method
    return headers


def joined_set_cookie(headers: HeadersLike) -> Optional[str]:
    """All Set-Cookie values joined by '; ', or None when there are none."""
    values = _as_headers(headers).get_list(SET_COOKIE_HEADER)
    return "; ".join(values) if values else None


def response_nonce(headers: HeadersLike) -> Optional[str]:
    headers = _as_headers(headers)
    return headers.get(LEGACY_NONCE_HEADER) or headers.get(NONCE_HEADER) or None


def update_from_response_headers(session: Session, headers: HeadersLike) -> Session:
    """New session with whatever credentials the upstream response rotated."""
    headers = _as_headers(headers)
    changes = {}

    nonce = response_nonce(headers)
    if nonce:
        changes["security_token"] = nonce

    cart_token = headers.get(CART_TOKEN_HEADER)
    if cart_token:
        changes["cart_token"] = cart_token

    cookie = joined_set_cookie(headers)
    if cookie:
        changes["session_cookie"] = cookie

    return replace(session, **changes) if changes else session


def merge_set_cookies(cookies: Iterable[str]) -> list[str]:
    """
    Collapse Set-Cookie values to one per cookie name.

    The last value seen for a name wins, so a cookie rotated later in the
    request replaces the one minted earlier.
    """
    merged: dict[str, str] = {}
    for cookie in cookies:
        name = cookie.split("=", 1)[0].strip()
        merged.pop(name, None)
        merged[name] = cookie
    return list(merged.values())


def forward_session_headers(
    response: Response,
    session: Session,
    set_cookies: Iterable[str] = (),
) -> None:
    """Write the session onto the outgoing response for the client's next call."""
    if session.security_token:
        response.headers[NONCE_HEADER] = session.security_token
    if session.cart_token:
        response.headers[CART_TOKEN_HEADER] = session.cart_token

    response.headers["Access-Control-Expose-Headers"] = EXPOSED_HEADERS

    for cookie in merge_set_cookies(set_cookies):
        response.headers.append(SET_COOKIE_HEADER, cookie)
