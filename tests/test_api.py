"""
Tests for the HTTP API
"""
import os

import httpx
import pytest
from fastapi.testclient import TestClient

from api.index import app
from bff.routers import deps
from bff.store import CartSynchronizer, StoreCartClient

from .fakes import ADMIN_PREFIX, make_commerce_client

API = "/api/v1"
HEADERS = {"X-API-Key": os.environ["API_KEY"]}

PRODUCTS = {
    1: {
        "id": 1, "name": "Kajal", "price": "199.50", "status": "publish",
        "stock_status": "instock", "manage_stock": True, "stock_quantity": 3,
    },
    2: {
        "id": 2, "name": "Lip Balm", "price": "99", "status": "draft",
        "stock_status": "outofstock", "manage_stock": False, "stock_quantity": None,
    },
}

COUPONS = [
    {"id": 1, "code": "WELCOME10", "amount": "10", "discount_type": "percent", "date_expires": None},
    {"id": 2, "code": "DIWALI", "amount": "100", "discount_type": "fixed_cart",
     "date_expires": "2020-11-15T00:00:00", "date_expires_gmt": "2020-11-14T18:30:00"},
    {"id": 3, "code": "FOREVER", "amount": "5", "discount_type": "percent",
     "date_expires": "2999-01-01T00:00:00"},
]


@pytest.fixture
def upstream(fake_store):
    """Fake WooCommerce: admin catalog endpoints plus the Store API cart."""
    calls = {"coupons": 0}

    def handler(request):
        path = request.url.path
        if path.startswith(f"{ADMIN_PREFIX}/products/"):
            product = PRODUCTS.get(int(path.rsplit("/", 1)[1]))
            if product is None:
                return httpx.Response(404, json={"code": "woocommerce_rest_product_invalid_id", "message": "Invalid ID."})
            return httpx.Response(200, json=product)
        if path == f"{ADMIN_PREFIX}/coupons":
            calls["coupons"] += 1
            return httpx.Response(200, json=COUPONS)
        if path == "/wp-json/muo/v1/config":
            return httpx.Response(404, json={"code": "rest_no_route", "message": "No route was found."})
        return fake_store(request)

    fake_store.calls = calls
    return fake_store, handler


@pytest.fixture
def client(upstream, memory_cache):
    fake_store, handler = upstream
    commerce = make_commerce_client(handler, cache=memory_cache)

    app.dependency_overrides[deps.commerce_client] = lambda: commerce
    app.dependency_overrides[deps.store_cart_client] = lambda: StoreCartClient(commerce)
    app.dependency_overrides[deps.cart_synchronizer] = lambda: CartSynchronizer(StoreCartClient(commerce), timeout=5)
    app.dependency_overrides[deps.response_cache] = lambda: memory_cache
    yield TestClient(app)
    app.dependency_overrides.clear()


# ==================== ROOT / HEALTH / AUTH ====================

def test_root_banner(client):
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["endpoints"]["store"] == f"{API}/store"


def test_health_needs_no_api_key(client):
    response = client.get(f"{API}/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_health_detailed_reports_cache(client):
    response = client.get(f"{API}/health/detailed")

    data = response.json()
    assert data["cache"]["type"] == "memory"
    assert data["services"]["woocommerce"]["status"] == "disconnected"
    assert data["status"] == "degraded"


def test_cache_clear(client, memory_cache):
    response = client.post(f"{API}/health/cache/clear")

    assert response.json()["success"] is True


def test_missing_api_key_is_401(client):
    response = client.get(f"{API}/config")

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "API key is required", "code": "missing_api_key"}


def test_wrong_api_key_is_403(client):
    response = client.get(f"{API}/config", headers={"X-API-Key": "wrong-key-wrong-key"})

    assert response.status_code == 403
    assert response.json()["code"] == "invalid_api_key"


def test_unknown_route_is_404(client):
    response = client.get(f"{API}/nope", headers=HEADERS)

    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "route_not_found"
    assert data["path"] == f"{API}/nope"
    assert data["method"] == "GET"


# ==================== STORE ====================

def test_get_cart_forwards_session_headers(client, upstream):
    fake_store, _ = upstream

    response = client.get(f"{API}/store/cart", headers=HEADERS)

    assert response.status_code == 200
    assert len(response.json()["items"]) == 3
    assert response.headers["X-WC-Store-API-Nonce"] == "nonce-1"
    assert response.headers["Cart-Token"] == "cart-token-1"
    assert "X-WC-Store-API-Nonce" in response.headers["Access-Control-Expose-Headers"]
    assert "wp_woocommerce_session=abc" in response.headers["set-cookie"]
    assert fake_store.paths() == ["/cart"]


def test_sync_sets_cart_and_returns_session(client, upstream):
    fake_store, _ = upstream
    body = {"items": [
        {"product_id": 10, "variation_id": 2, "quantity": 4},
        {"product_id": 77, "variation_id": None, "quantity": 1},
    ]}

    response = client.post(f"{API}/store/cart/sync", json=body, headers=HEADERS)

    assert response.status_code == 200
    items = response.json()["items"]
    assert sorted((i["id"], i["quantity"]) for i in items) == [(10, 4), (77, 1)]
    assert response.headers["X-WC-Store-API-Nonce"] == f"nonce-{fake_store.nonce_counter}"
    assert response.headers["Cart-Token"] == "cart-token-1"


def test_sync_without_items_clears_cart(client, upstream):
    fake_store, _ = upstream

    response = client.post(f"{API}/store/cart/sync", json={}, headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["items"] == []
    assert fake_store.items == {}


def test_sync_forwards_cookie_minted_by_bootstrap(client, upstream):
    fake_store, _ = upstream
    fake_store.cookie_responses_left = 1

    response = client.post(f"{API}/store/cart/sync", json={"items": []}, headers=HEADERS)

    assert response.status_code == 200
    cookies = response.headers.get_list("set-cookie")
    assert "wp_woocommerce_session=abc; path=/" in cookies
    assert "woocommerce_items_in_cart=1; path=/" in cookies


def test_store_action_forwards_cookie_from_refresh(client, upstream):
    fake_store, _ = upstream
    fake_store.cookie_responses_left = 1
    headers = {**HEADERS, "X-WC-Store-API-Nonce": "expired", "Cookie": "wp_woocommerce_session=abc"}

    response = client.post(f"{API}/store/cart/coupons", json={"code": "WELCOME10"}, headers=headers)

    assert response.status_code == 200
    assert fake_store.paths() == ["/cart/coupons", "/cart", "/cart/coupons"]
    assert response.headers.get_list("set-cookie") == [
        "wp_woocommerce_session=abc; path=/",
        "woocommerce_items_in_cart=1; path=/",
    ]


def test_sync_rejects_negative_quantity(client):
    body = {"items": [{"product_id": 10, "quantity": -1}]}

    response = client.post(f"{API}/store/cart/sync", json=body, headers=HEADERS)

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "validation_error"
    assert data["errors"][0]["field"] == "items.0.quantity"


def test_store_action_retries_stale_client_nonce(client, upstream):
    fake_store, _ = upstream
    headers = {**HEADERS, "X-WC-Store-API-Nonce": "expired", "Cookie": "wp_woocommerce_session=abc"}

    response = client.post(
        f"{API}/store/cart/update-customer",
        json={"billing_address": {"first_name": "Asha"}},
        headers=headers,
    )

    assert response.status_code == 200
    assert fake_store.paths() == ["/cart/update-customer", "/cart", "/cart/update-customer"]
    assert fake_store.requests[-1]["nonce"] == "nonce-1"
    assert fake_store.requests[-1]["json"] == {"billing_address": {"first_name": "Asha"}}
    assert response.headers["X-WC-Store-API-Nonce"] == "nonce-1"


def test_store_action_bootstraps_missing_session(client, upstream):
    fake_store, _ = upstream

    response = client.post(f"{API}/store/cart/coupons", json={"code": "WELCOME10"}, headers=HEADERS)

    assert response.status_code == 200
    assert fake_store.paths() == ["/cart", "/cart/coupons"]
    assert fake_store.requests[1]["json"] == {"code": "WELCOME10"}


def test_store_action_passes_through_upstream_rejection(client, upstream):
    fake_store, _ = upstream
    fake_store.failures["/cart/coupons/BOGUS"] = (404, "woocommerce_rest_cart_coupon_invalid_code")

    response = client.delete(f"{API}/store/cart/coupons/BOGUS", headers=HEADERS)

    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "woocommerce_rest_cart_coupon_invalid_code"
    assert data["woocommerce_error"] == {"status": 404}


def test_select_shipping_rate(client, upstream):
    fake_store, _ = upstream

    response = client.post(
        f"{API}/store/cart/select-shipping-rate",
        json={"package_id": 0, "rate_id": "flat_rate:1"},
        headers={**HEADERS, "X-WC-Payment-Method": "cod"},
    )

    assert response.status_code == 200
    assert {r["payment_method"] for r in fake_store.requests} == {"cod"}


def test_list_coupons_drops_expired_and_caches(client, upstream):
    fake_store, _ = upstream

    first = client.get(f"{API}/store/coupons", headers=HEADERS)
    second = client.get(f"{API}/store/coupons", headers=HEADERS)

    assert [c["code"] for c in first.json()] == ["WELCOME10", "FOREVER"]
    assert second.json() == first.json()
    assert fake_store.calls["coupons"] == 1


# ==================== CART / CONFIG ====================

def test_validate_cart(client):
    body = {"items": [
        {"product_id": 1, "quantity": 5},
        {"product_id": 2, "quantity": 1},
        {"product_id": 404, "quantity": 1},
    ]}

    response = client.post(f"{API}/cart/validate", json=body, headers=HEADERS)

    data = response.json()
    assert data["valid"] is False
    assert data["items"][0]["errors"] == ["Only 3 items available"]
    assert data["items"][1]["errors"] == ["Product not available", "Product out of stock"]
    assert data["items"][2]["errors"] == ["Product not found"]


def test_validate_cart_requires_items(client):
    response = client.post(f"{API}/cart/validate", json={"items": []}, headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["message"] == "Cart items are required"


def test_calculate_cart(client):
    body = {"items": [{"product_id": 1, "quantity": 2}, {"product_id": 2, "quantity": 1}]}

    response = client.post(f"{API}/cart/calculate", json=body, headers=HEADERS)

    cart = response.json()["cart"]
    assert cart["subtotal"] == "498.00"
    assert cart["total"] == "498.00"
    assert cart["items"][0]["total"] == 399.0


def test_config_falls_back_to_defaults(client):
    response = client.get(f"{API}/config", headers=HEADERS)

    assert response.status_code == 200
    assert response.json() == {"cod_fee": 20, "shipping_cost": 79, "free_shipping_threshold": 500}


def test_development_skips_api_key(client, reset_settings):
    reset_settings.setenv("ENVIRONMENT", "development")

    response = client.get(f"{API}/config")

    assert response.status_code == 200
