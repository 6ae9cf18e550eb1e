"""
Security headers for every BFF response.

Only JSON is served, to a native app, so the content policy is "self" only
and no browser features are granted.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; frame-ancestors 'none'",
    # 31536000 = 1 year
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Sets SECURITY_HEADERS and strips framework banners."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)

        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value

        if "X-Powered-By" in response.headers:
            del response.headers["X-Powered-By"]

        return response
