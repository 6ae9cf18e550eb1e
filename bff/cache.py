"""
Upstream response cache.

Stores JSON-serializable upstream bodies in Upstash Redis when it is
configured, otherwise in an in-process dict with per-key expiry. Cache
failures are logged and behave like a miss; they never fail a request.
"""

import fnmatch
import json
import time
from typing import Any, Optional

from bff.config import get_settings
from bff.db import RedisKeys, get_redis_optional
from bff.logging import get_logger

logger = get_logger(__name__)


class CacheManager:
    """Response cache with Redis or in-memory backend."""

    def __init__(self, redis_client: Any = None, default_ttl: int | None = None):
        self.redis = redis_client
        self.default_ttl = default_ttl or get_settings().cache_ttl_seconds
        self._memory: dict[str, tuple[float, Any]] = {}
        self.hits = 0
        self.misses = 0
        logger.info(
            "Cache initialized (backend=%s, TTL=%ss)",
            "redis" if self.redis else "memory",
            self.default_ttl,
        )

    def is_using_redis(self) -> bool:
        return self.redis is not None

    async def get(self, key: str) -> Optional[Any]:
        try:
            if self.redis:
                raw = await self.redis.get(RedisKeys.cache_key(key))
                value = json.loads(raw) if raw is not None else None
            else:
                value = self._memory_get(key)
        except Exception as e:
            logger.error("Cache GET error for key %s: %s", key, e)
            value = None

        if value is None:
            self.misses += 1
            logger.debug("Cache MISS: %s", key)
            return None

        self.hits += 1
        logger.debug("Cache HIT: %s", key)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        ttl = ttl or self.default_ttl
        try:
            if self.redis:
                await self.redis.set(RedisKeys.cache_key(key), json.dumps(value), ex=ttl)
            else:
                self._memory[key] = (time.monotonic() + ttl, value)
            logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
            return True
        except Exception as e:
            logger.error("Cache SET error for key %s: %s", key, e)
            return False

    async def delete(self, key: str) -> int:
        try:
            if self.redis:
                return int(await self.redis.delete(RedisKeys.cache_key(key)))
            return 1 if self._memory.pop(key, None) is not None else 0
        except Exception as e:
            logger.error("Cache DEL error for key %s: %s", key, e)
            return 0

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern (e.g. '*products*')."""
        try:
            if self.redis:
                keys = await self.redis.keys(RedisKeys.cache_key(pattern))
                if not keys:
                    return 0
                return int(await self.redis.delete(*keys))

            matched = [key for key in self._memory if fnmatch.fnmatchcase(key, pattern)]
            for key in matched:
                del self._memory[key]
            return len(matched)
        except Exception as e:
            logger.error("Cache DEL pattern error for %s: %s", pattern, e)
            return 0

    async def flush(self) -> bool:
        try:
            if self.redis:
                keys = await self.redis.keys(RedisKeys.cache_key("*"))
                if keys:
                    await self.redis.delete(*keys)
            else:
                self._memory.clear()
            self.hits = 0
            self.misses = 0
            logger.info("Cache flushed successfully")
            return True
        except Exception as e:
            logger.error("Cache FLUSH error: %s", e)
            return False

    async def get_stats(self) -> Optional[dict]:
        try:
            if self.redis:
                keys = len(await self.redis.keys(RedisKeys.cache_key("*")))
            else:
                self._evict_expired()
                keys = len(self._memory)
            return {"keys": keys, "hits": self.hits, "misses": self.misses}
        except Exception as e:
            logger.error("Cache STATS error: %s", e)
            return None

    def _memory_get(self, key: str) -> Optional[Any]:
        entry = self._memory.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= time.monotonic():
            del self._memory[key]
            logger.debug("Cache EXPIRED: %s", key)
            return None
        return value

    def _evict_expired(self) -> None:
        now = time.monotonic()
        for key in [k for k, (expires_at, _) in self._memory.items() if expires_at <= now]:
            del self._memory[key]


_cache: Optional[CacheManager] = None


def get_cache() -> CacheManager:
    """Get or create CacheManager singleton (lazy loaded)."""
    global _cache
    if _cache is None:
        _cache = CacheManager(redis_client=get_redis_optional())
    return _cache
