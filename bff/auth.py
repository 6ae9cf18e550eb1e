"""API key authentication for the mobile app."""
import hmac

from fastapi import Header

from bff.config import get_settings
from bff.errors import (
    ERROR_API_KEY_INVALID,
    ERROR_API_KEY_REQUIRED,
    ForbiddenError,
    UnauthorizedError,
)
from bff.logging import get_logger

logger = get_logger(__name__)


async def verify_api_key(x_api_key: str | None = Header(None, alias="X-API-Key")):
    """
    Verify the X-API-Key header against API_KEY.

    Skipped in development for browser testing. Use as a router dependency
    on everything except health checks.
    """
    settings = get_settings()
    if settings.is_development:
        return True

    if not x_api_key:
        raise UnauthorizedError(ERROR_API_KEY_REQUIRED, code="missing_api_key")

    if not settings.api_key or not hmac.compare_digest(x_api_key, settings.api_key):
        logger.warning("Rejected request with invalid API key")
        raise ForbiddenError(ERROR_API_KEY_INVALID, code="invalid_api_key")

    return True
