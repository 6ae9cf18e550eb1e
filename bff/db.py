"""
Redis Module - Upstash Redis client

Provides a singleton async Upstash Redis client used for:
- Upstream response cache
- Rate limiting counters
"""

from typing import Optional

from upstash_redis.asyncio import Redis as AsyncRedis

from bff.config import get_settings

_redis_client: Optional[AsyncRedis] = None


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        if not settings.redis_configured:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(
            url=settings.upstash_redis_rest_url,
            token=settings.upstash_redis_rest_token,
        )

    return _redis_client


def get_redis_optional() -> Optional[AsyncRedis]:
    """Get the Redis client, or None when Redis is not configured."""
    if not get_settings().redis_configured:
        return None
    return get_redis()


class RedisKeys:
    """Redis key prefixes for different data types."""

    # Upstream response cache
    CACHE = "cache:"  # cache:{namespace}_{endpoint}_{params}

    # Rate limiting
    RATE_LIMIT = "rate_limit:"  # rate_limit:{ip}

    @staticmethod
    def cache_key(key: str) -> str:
        return f"{RedisKeys.CACHE}{key}"

    @staticmethod
    def rate_limit_key(client_ip: str) -> str:
        return f"{RedisKeys.RATE_LIMIT}{client_ip}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    COUPONS = 3600  # 1 hour
