"""
Store API cart client.

Thin binding of CommerceClient to the wc/store/v1 cart endpoints. Every call
takes the Session to present and returns UpstreamResponse (body + headers)
so the caller can fold rotated credentials back into its session.
"""

from typing import Any, Optional
from urllib.parse import quote

from bff.config import STORE_NAMESPACE
from bff.upstream import CommerceClient, UpstreamResponse, get_commerce_client

from .session import SET_COOKIE_HEADER, Session, to_outbound_headers


class StoreCartClient:
    """
    Upstream storefront cart endpoints.

    Every Set-Cookie the upstream sends back is recorded in set_cookies, in
    arrival order, so a route can hand the client cookies minted by any call
    it made (session bootstrap, refresh, retry), not only the last one.
    One instance serves one inbound request.
    """

    def __init__(self, client: Optional[CommerceClient] = None):
        self._client = client
        self.set_cookies: list[str] = []

    @property
    def client(self) -> CommerceClient:
        if self._client is None:
            self._client = get_commerce_client()
        return self._client

    async def call(
        self,
        method: str,
        path: str,
        session: Session,
        body: Any = None,
        params: Optional[dict] = None,
    ) -> UpstreamResponse:
        """One Store API call presenting the session's credentials."""
        result = await self._send(method, path, to_outbound_headers(session), body, params)
        self.set_cookies.extend(result.headers.get_list(SET_COOKIE_HEADER))
        return result

    async def _send(
        self, method: str, path: str, headers: dict, body: Any, params: Optional[dict]
    ) -> UpstreamResponse:
        if method == "GET":
            return await self.client.get(
                path, params, namespace=STORE_NAMESPACE, auth=False,
                headers=headers, return_headers=True, use_cache=False,
            )
        if method == "POST":
            return await self.client.post(
                path, body, params, namespace=STORE_NAMESPACE, auth=False,
                headers=headers, return_headers=True,
            )
        if method == "DELETE":
            return await self.client.delete(
                path, params, namespace=STORE_NAMESPACE, auth=False,
                headers=headers, return_headers=True,
            )
        raise ValueError(f"Unsupported Store API method: {method}")

    async def get_cart(self, session: Session) -> UpstreamResponse:
        return await self.call("GET", "/cart", session)

    async def add_item(
        self, session: Session, product_id: int, quantity: int, variation_id: int = 0
    ) -> UpstreamResponse:
        return await self.call(
            "POST", "/cart/add-item", session,
            {"id": product_id, "quantity": quantity, "variation_id": variation_id},
        )

    async def update_item(self, session: Session, item_key: str, quantity: int) -> UpstreamResponse:
        return await self.call(
            "POST", "/cart/update-item", session, {"key": item_key, "quantity": quantity}
        )

    async def remove_item(self, session: Session, item_key: str) -> UpstreamResponse:
        return await self.call("POST", "/cart/remove-item", session, {"key": item_key})

    async def update_customer(self, session: Session, body: dict) -> UpstreamResponse:
        return await self.call("POST", "/cart/update-customer", session, body)

    async def select_shipping_rate(self, session: Session, body: dict) -> UpstreamResponse:
        return await self.call("POST", "/cart/select-shipping-rate", session, body)

    async def apply_coupon(self, session: Session, body: dict) -> UpstreamResponse:
        return await self.call("POST", "/cart/coupons", session, body)

    async def remove_coupon(self, session: Session, code: str) -> UpstreamResponse:
        return await self.call("DELETE", f"/cart/coupons/{quote(code, safe='')}", session)
