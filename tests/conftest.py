"""Pytest configuration and fixtures"""
import os

import pytest

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("WOOCOMMERCE_URL", "https://shop.test")
os.environ.setdefault("WOOCOMMERCE_CONSUMER_KEY", "ck_test_consumer_key")
os.environ.setdefault("WOOCOMMERCE_CONSUMER_SECRET", "cs_test_consumer_secret")
os.environ.setdefault("API_KEY", "test-api-key-0123456789")
os.environ.setdefault("RATE_LIMIT_MAX_REQUESTS", "100000")
os.environ.setdefault("SYNC_TIMEOUT_SECONDS", "10")

from bff.cache import CacheManager  # noqa: E402
from bff.config import get_settings  # noqa: E402

from .fakes import FakeStoreAPI, make_commerce_client  # noqa: E402


@pytest.fixture
def memory_cache():
    """In-memory response cache"""
    return CacheManager(redis_client=None, default_ttl=60)


@pytest.fixture
def fake_store():
    """Upstream cart with two lines of product 10 (variations 1 and 2) and product 20"""
    return FakeStoreAPI(items=[
        {"key": "k1", "id": 10, "variation_id": 1, "quantity": 1},
        {"key": "k2", "id": 10, "variation_id": 2, "quantity": 1},
        {"key": "k3", "id": 20, "variation_id": 0, "quantity": 2},
    ])


@pytest.fixture
def store_client(fake_store, memory_cache):
    """CommerceClient talking to fake_store"""
    return make_commerce_client(fake_store, cache=memory_cache)


@pytest.fixture
def reset_settings(monkeypatch):
    """Clear cached settings before and after a test that edits the environment"""
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
