"""Typed errors raised by the commerce API client."""

from enum import Enum
from typing import Any

import httpx

from bff.errors import ERROR_UPSTREAM, ERROR_UPSTREAM_UNAVAILABLE, AppError

# Store API code for a rotated-out nonce
NONCE_INVALID_CODE = "woocommerce_rest_nonce_invalid"


class UpstreamErrorKind(str, Enum):
    """Closed set of upstream failure classes."""

    STALE_CREDENTIAL = "stale_credential"
    UNAVAILABLE = "unavailable"
    REJECTED = "rejected"


class UpstreamError(AppError):
    """Failure of one upstream call, classified once at the client boundary."""

    def __init__(
        self,
        kind: UpstreamErrorKind,
        status_code: int,
        code: str,
        message: str,
        data: Any = None,
    ):
        super().__init__(message, status_code, code, details=data)
        self.kind = kind
        self.data = data

    @property
    def is_stale_credential(self) -> bool:
        return self.kind is UpstreamErrorKind.STALE_CREDENTIAL

    @classmethod
    def from_response(cls, response: httpx.Response) -> "UpstreamError":
        """Build from an upstream error response ({code, message, data} body)."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        code = body.get("code") or "woocommerce_error"
        status = response.status_code
        if status == 403 or code == NONCE_INVALID_CODE:
            kind = UpstreamErrorKind.STALE_CREDENTIAL
        else:
            kind = UpstreamErrorKind.REJECTED

        return cls(
            kind=kind,
            status_code=status,
            code=code,
            message=body.get("message") or ERROR_UPSTREAM,
            data=body.get("data"),
        )

    @classmethod
    def unavailable(cls, reason: str | None = None) -> "UpstreamError":
        return cls(
            kind=UpstreamErrorKind.UNAVAILABLE,
            status_code=503,
            code="service_unavailable",
            message=ERROR_UPSTREAM_UNAVAILABLE,
            data={"reason": reason} if reason else None,
        )

    def __repr__(self) -> str:
        return f"UpstreamError({self.kind.value}, {self.status_code}, {self.code!r})"
