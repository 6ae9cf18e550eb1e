"""
Health Router

Liveness, upstream reachability and cache status. Mounted without the
API key dependency.
"""
import platform
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from bff.cache import CacheManager
from bff.config import get_settings
from bff.upstream import CommerceClient

from .deps import commerce_client, response_cache

router = APIRouter(prefix="/health", tags=["health"])

_started_at = time.monotonic()


def _uptime_seconds() -> int:
    return int(time.monotonic() - _started_at)


@router.get("")
async def health():
    uptime = _uptime_seconds()
    return {
        "success": True,
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": f"{uptime // 60} minutes",
        "environment": get_settings().environment,
    }


@router.get("/detailed")
async def health_detailed(
    client: CommerceClient = Depends(commerce_client),
    cache: CacheManager = Depends(response_cache),
):
    """Health including upstream connectivity and cache stats."""
    upstream = await client.health_check()
    uptime = _uptime_seconds()
    return {
        "success": True,
        "status": "healthy" if upstream["status"] == "connected" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": {"seconds": uptime, "formatted": f"{uptime // 60} minutes"},
        "services": {"woocommerce": upstream},
        "cache": {
            "enabled": True,
            "type": "redis" if cache.is_using_redis() else "memory",
            "stats": await cache.get_stats(),
        },
        "environment": get_settings().environment,
        "pythonVersion": platform.python_version(),
    }


@router.get("/cache/stats")
async def cache_stats(cache: CacheManager = Depends(response_cache)):
    return {
        "success": True,
        "type": "redis" if cache.is_using_redis() else "memory",
        "cache": await cache.get_stats(),
    }


@router.post("/cache/clear")
async def cache_clear(cache: CacheManager = Depends(response_cache)):
    cleared = await cache.flush()
    return {
        "success": cleared,
        "message": "Cache cleared successfully" if cleared else "Failed to clear cache",
    }
