"""API Routers.

Builds the versioned API router (/api/{API_VERSION}). Health checks are
public; every other router requires the X-API-Key header.
"""

from fastapi import APIRouter, Depends

from bff.auth import verify_api_key

from .attributes import router as attributes_router
from .cart import router as cart_router
from .categories import router as categories_router
from .config import router as config_router
from .customers import router as customers_router
from .health import router as health_router
from .orders import router as orders_router
from .payment import router as payment_router
from .products import router as products_router
from .store import router as store_router
from .tags import router as tags_router


def build_api_router(api_version: str) -> APIRouter:
    router = APIRouter(prefix=f"/api/{api_version}")

    router.include_router(health_router)

    protected = APIRouter(dependencies=[Depends(verify_api_key)])
    protected.include_router(products_router)
    protected.include_router(categories_router)
    protected.include_router(tags_router)
    protected.include_router(attributes_router)
    protected.include_router(customers_router)
    protected.include_router(orders_router)
    protected.include_router(cart_router)
    protected.include_router(store_router)
    protected.include_router(payment_router)
    protected.include_router(config_router)
    router.include_router(protected)

    return router


__all__ = ["build_api_router"]
