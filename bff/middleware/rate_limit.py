"""Rate Limiting Middleware for FastAPI.

Fixed-window per-IP limit on /api/ paths, using Upstash Redis when
available and an in-memory window otherwise.
"""

import time
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from bff.db import RedisKeys
from bff.logging import get_logger

logger = get_logger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware.

    Limits requests per client IP within a fixed window.
    """

    def __init__(
        self,
        app: Any,
        max_requests: int = 100,
        window_seconds: int = 900,
        redis_client: Any = None,
        enabled: bool = True,
        path_prefix: str = "/api/",
    ) -> None:
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.redis_client = redis_client
        self.enabled = enabled
        self.path_prefix = path_prefix
        self._cache: dict[str, tuple[float, int]] = {}  # Fallback: key -> (window start, count)

    async def dispatch(self, request: Request, call_next: Callable[..., Any]) -> Response:
        if not self.enabled or not request.url.path.startswith(self.path_prefix):
            return await call_next(request)  # type: ignore[no-any-return]

        client_ip = request.client.host if request.client else "unknown"
        if forwarded_for := request.headers.get("X-Forwarded-For"):
            # First IP is the original client
            client_ip = forwarded_for.split(",")[0].strip()

        key = RedisKeys.rate_limit_key(client_ip)
        count = await self._hit(key)

        if count > self.max_requests:
            logger.warning("Rate limit exceeded for IP: %s", client_ip)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "success": False,
                    "message": "Too many requests, please try again later.",
                    "retryAfter": self.window_seconds,
                },
                headers={"Retry-After": str(self.window_seconds)},
            )

        return await call_next(request)  # type: ignore[no-any-return]

    async def _hit(self, key: str) -> int:
        """Record a request and return the count in the current window."""
        if self.redis_client:
            try:
                count = int(await self.redis_client.incr(key))
                if count == 1:
                    # First hit opens the window
                    await self.redis_client.expire(key, self.window_seconds)
                return count
            except Exception as e:
                logger.warning(f"Redis rate limit failed: {e}, falling back to in-memory")

        now = time.time()
        self._evict_expired(now)
        started, count = self._cache.get(key, (now, 0))
        count += 1
        self._cache[key] = (started, count)
        return count

    def _evict_expired(self, now: float) -> None:
        """Drop windows that have closed so idle clients do not pile up."""
        expired = [k for k, (started, _) in self._cache.items() if now - started >= self.window_seconds]
        for key in expired:
            del self._cache[key]
