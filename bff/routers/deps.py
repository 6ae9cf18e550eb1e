"""
Shared Dependencies for Routers

Lazy-loaded singletons exposed as FastAPI dependencies so tests can swap
them with app.dependency_overrides.
"""

from bff.cache import CacheManager, get_cache
from bff.payments import RazorpayService, get_razorpay_service
from bff.store import CartSynchronizer, StoreCartClient
from bff.upstream import CommerceClient, get_commerce_client


def commerce_client() -> CommerceClient:
    return get_commerce_client()


def store_cart_client() -> StoreCartClient:
    return StoreCartClient(get_commerce_client())


def cart_synchronizer() -> CartSynchronizer:
    return CartSynchronizer(StoreCartClient(get_commerce_client()))


def response_cache() -> CacheManager:
    return get_cache()


def razorpay_service() -> RazorpayService:
    return get_razorpay_service()
