"""HTTP middleware: security headers, rate limiting, access log."""
from .access_log import AccessLogMiddleware
from .rate_limit import RateLimitMiddleware
from .security import SecurityHeadersMiddleware

__all__ = [
    "AccessLogMiddleware",
    "RateLimitMiddleware",
    "SecurityHeadersMiddleware",
]
