"""Upstream commerce API: client, response wrapper and typed errors."""
from typing import Optional

from .client import CommerceClient, UpstreamResponse
from .errors import NONCE_INVALID_CODE, UpstreamError, UpstreamErrorKind

_commerce_client: Optional[CommerceClient] = None


def get_commerce_client() -> CommerceClient:
    """Get or create CommerceClient singleton (lazy loaded)."""
    global _commerce_client
    if _commerce_client is None:
        _commerce_client = CommerceClient()
    return _commerce_client


async def close_commerce_client() -> None:
    global _commerce_client
    if _commerce_client is not None:
        await _commerce_client.aclose()
        _commerce_client = None


__all__ = [
    "CommerceClient",
    "UpstreamResponse",
    "UpstreamError",
    "UpstreamErrorKind",
    "NONCE_INVALID_CODE",
    "get_commerce_client",
    "close_commerce_client",
]
