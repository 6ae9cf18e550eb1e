"""Access log: one line per request, level by status class."""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from bff.logging import get_logger, sanitize_string_for_logging

logger = get_logger("bff.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - started) * 1000)

        path = sanitize_string_for_logging(request.url.path, max_length=120)
        message = "%s %s %s - %sms"
        args = (request.method, path, response.status_code, duration_ms)
        if response.status_code >= 500:
            logger.error(message, *args)
        elif response.status_code >= 400:
            logger.warning(message, *args)
        else:
            logger.info(message, *args)
        return response
