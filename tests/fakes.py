"""Fake upstream services shared by the tests"""
import json
from typing import Any, Callable, Dict, List, Optional

import httpx

from bff.cache import CacheManager
from bff.upstream import CommerceClient

STORE_PREFIX = "/wp-json/wc/store/v1"
ADMIN_PREFIX = "/wp-json/wc/v3"


class FakeStoreAPI:
    """
    In-memory WooCommerce Store API cart served through httpx.MockTransport.

    Every cart read mints a new nonce; mutations require a minted nonce.
    """

    def __init__(self, items: Optional[List[Dict[str, Any]]] = None):
        self.items: Dict[str, Dict[str, Any]] = {}
        for item in items or []:
            self.items[item["key"]] = dict(item)
        self.nonce_counter = 0
        self.valid_nonces: set = set()
        self.requests: List[Dict[str, Any]] = []
        self.stale_once: set = set()  # paths answering 403 once
        self.failures: Dict[str, tuple] = {}  # path -> (status, code)
        self.cart_read_fails = False
        self.rotate_on_write = False
        self.cookie_responses_left: Optional[int] = None  # None: every response sets cookies
        self._next_key = 100

    # ---- helpers ----

    def mint_nonce(self) -> str:
        self.nonce_counter += 1
        nonce = f"nonce-{self.nonce_counter}"
        self.valid_nonces.add(nonce)
        return nonce

    def cart_body(self) -> Dict[str, Any]:
        return {"items": list(self.items.values()), "items_count": len(self.items)}

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [r["path"] for r in self.requests if method is None or r["method"] == method]

    def _response(self, status: int, body: Any, nonce: Optional[str] = None) -> httpx.Response:
        headers = [("Cart-Token", "cart-token-1")]
        if nonce:
            headers.append(("Nonce", nonce))
        if self.cookie_responses_left is None or self.cookie_responses_left > 0:
            headers.append(("Set-Cookie", "wp_woocommerce_session=abc; path=/"))
            headers.append(("Set-Cookie", "woocommerce_items_in_cart=1; path=/"))
            if self.cookie_responses_left is not None:
                self.cookie_responses_left -= 1
        return httpx.Response(status, json=body, headers=headers)

    def _error(self, status: int, code: str, message: str = "error") -> httpx.Response:
        return httpx.Response(status, json={"code": code, "message": message, "data": {"status": status}})

    # ---- transport ----

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith(STORE_PREFIX):
            path = path[len(STORE_PREFIX):]
        body = json.loads(request.content) if request.content else None
        nonce = request.headers.get("X-WC-Store-API-Nonce")
        self.requests.append({
            "method": request.method,
            "path": path,
            "nonce": nonce,
            "legacy_nonce": request.headers.get("Nonce"),
            "cookie": request.headers.get("Cookie"),
            "payment_method": request.headers.get("X-WC-Payment-Method"),
            "json": body,
        })

        if request.method == "GET" and path == "/cart":
            if self.cart_read_fails:
                return self._error(500, "internal_server_error")
            return self._response(200, self.cart_body(), self.mint_nonce())

        if path in self.stale_once:
            self.stale_once.discard(path)
            return self._error(403, "woocommerce_rest_nonce_invalid", "Nonce is invalid.")
        if nonce not in self.valid_nonces:
            return self._error(403, "woocommerce_rest_nonce_invalid", "Nonce is invalid.")
        if path in self.failures:
            status, code = self.failures[path]
            return self._error(status, code)

        if path == "/cart/remove-item":
            self.items.pop(body["key"], None)
        elif path == "/cart/update-item":
            self.items[body["key"]]["quantity"] = body["quantity"]
        elif path == "/cart/add-item":
            key = f"k{self._next_key}"
            self._next_key += 1
            self.items[key] = {
                "key": key,
                "id": body["id"],
                "variation_id": body.get("variation_id") or 0,
                "quantity": body["quantity"],
            }
        elif path.startswith("/cart/coupons") or path in ("/cart/update-customer", "/cart/select-shipping-rate"):
            pass
        else:
            return self._error(404, "rest_no_route")

        return self._response(200, self.cart_body(), self.mint_nonce() if self.rotate_on_write else nonce)


def make_commerce_client(
    handler: Callable[[httpx.Request], httpx.Response],
    base_url: str = "https://shop.test",
    cache: Optional[CacheManager] = None,
) -> CommerceClient:
    return CommerceClient(
        base_url=base_url,
        consumer_key="ck_test_consumer_key",
        consumer_secret="cs_test_consumer_secret",
        cache=cache or CacheManager(redis_client=None, default_ttl=60),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class FakeAdminAPI:
    """
    Canned wc/v3 admin endpoints served through httpx.MockTransport.

    GET answers come from `routes` (path -> body, or a callable taking the
    query params). Writes echo their JSON body back with an id.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = dict(routes or {})
        self.requests: List[Dict[str, Any]] = []

    def calls(self, path: str, method: str = "GET") -> List[Dict[str, Any]]:
        return [r for r in self.requests if r["path"] == path and r["method"] == method]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path[len(ADMIN_PREFIX):]
        params = {
            k: v for k, v in request.url.params.multi_items()
            if k not in ("consumer_key", "consumer_secret")
        }
        body = json.loads(request.content) if request.content else None
        self.requests.append({"method": request.method, "path": path, "params": params, "json": body})

        if request.method in ("POST", "PUT"):
            return httpx.Response(201 if request.method == "POST" else 200, json={"id": 99, **(body or {})})

        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, json={"code": "woocommerce_rest_invalid_id", "message": "Invalid ID."})
        return httpx.Response(200, json=route(params) if callable(route) else route)
