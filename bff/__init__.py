"""
Commerce BFF Package

Backend-for-frontend in front of a WooCommerce-style commerce API:
- config: environment settings and validation
- logging: centralized logger setup
- cache: Upstash Redis / in-memory response cache
- upstream: HTTP client for the commerce REST API
- store: session-aware storefront cart proxy and cart sync
- payments: Razorpay order creation
- routers: FastAPI routers for the mobile app

Note: Imports are lazy to keep module loading cheap in serverless environments.
"""

__all__ = [
    "get_settings",
    "get_cache",
    "get_commerce_client",
]


def __getattr__(name):
    """Lazy attribute access for clean serverless loading."""
    if name == "get_settings":
        from bff.config import get_settings
        return get_settings
    elif name == "get_cache":
        from bff.cache import get_cache
        return get_cache
    elif name == "get_commerce_client":
        from bff.upstream import get_commerce_client
        return get_commerce_client
    raise AttributeError(f"module 'bff' has no attribute '{name}'")
