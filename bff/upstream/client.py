"""
Commerce API Client

Async httpx client for the WooCommerce REST API (`/wp-json/<namespace>`).

- Admin namespace (wc/v3) calls are authenticated with consumer keys:
  query params over HTTPS, OAuth 1.0a (HMAC-SHA256) over plain HTTP.
- Store API (wc/store/v1) calls pass auth=False and carry session headers.
- GET bodies are cached; writes invalidate related cache keys.
- Failures are raised as UpstreamError. This layer never retries.
"""

import base64
import hashlib
import hmac
import json
import secrets
import time
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import quote

import httpx

from bff.cache import CacheManager, get_cache
from bff.config import ADMIN_NAMESPACE, get_settings
from bff.logging import get_logger
from bff.upstream.errors import UpstreamError

logger = get_logger(__name__)

USER_AGENT = "WooCommerce-BFF-Server/1.0.0"


@dataclass
class UpstreamResponse:
    """Parsed body plus response headers, for callers that need both."""
    data: Any
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    status_code: int = 200


def _oauth_quote(value: str) -> str:
    return quote(str(value), safe="~")


def build_oauth_header(
    method: str,
    url: str,
    params: dict,
    consumer_key: str,
    consumer_secret: str,
    nonce: str | None = None,
    timestamp: str | None = None,
) -> str:
    """
    Build an OAuth 1.0a Authorization header (HMAC-SHA256, one-legged).

    The signature covers the request query params plus the oauth_* params.
    """
    oauth_params = {
        "oauth_consumer_key": consumer_key,
        "oauth_nonce": nonce or secrets.token_hex(16),
        "oauth_signature_method": "HMAC-SHA256",
        "oauth_timestamp": timestamp or str(int(time.time())),
        "oauth_version": "1.0",
    }
    all_params = {**{k: str(v) for k, v in params.items()}, **oauth_params}
    normalized = "&".join(
        f"{_oauth_quote(k)}={_oauth_quote(v)}"
        for k, v in sorted(all_params.items())
    )
    base_string = "&".join([method.upper(), _oauth_quote(url), _oauth_quote(normalized)])
    signing_key = f"{_oauth_quote(consumer_secret)}&"
    digest = hmac.new(signing_key.encode(), base_string.encode(), hashlib.sha256).digest()
    oauth_params["oauth_signature"] = base64.b64encode(digest).decode()

    return "OAuth " + ", ".join(
        f'{k}="{_oauth_quote(v)}"' for k, v in sorted(oauth_params.items())
    )


class CommerceClient:
    """Client for the upstream commerce REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        consumer_key: str | None = None,
        consumer_secret: str | None = None,
        timeout: float | None = None,
        cache: CacheManager | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.woocommerce_url).rstrip("/")
        self.consumer_key = consumer_key or settings.woocommerce_consumer_key
        self.consumer_secret = consumer_secret or settings.woocommerce_consumer_secret
        self.timeout = timeout or settings.upstream_timeout_seconds
        self._cache = cache
        self._http_client = http_client

        if not self.base_url or not self.consumer_key or not self.consumer_secret:
            logger.warning("WooCommerce credentials not fully configured")

        self.is_https = self.base_url.startswith("https://") if self.base_url else True

    @property
    def cache(self) -> CacheManager:
        if self._cache is None:
            self._cache = get_cache()
        return self._cache

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
                headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def build_url(self, endpoint: str, namespace: str = ADMIN_NAMESPACE) -> str:
        return f"{self.base_url}/wp-json/{namespace}{endpoint}"

    def _build_request(
        self,
        method: str,
        endpoint: str,
        namespace: str,
        params: Optional[dict],
        auth: bool,
        headers: Optional[dict],
    ) -> tuple[str, dict, dict]:
        url = self.build_url(endpoint, namespace)
        request_params = dict(params or {})
        request_headers = dict(headers or {})

        if auth:
            if self.is_https:
                # Query params instead of Basic Auth: some hosts strip Authorization
                request_params["consumer_key"] = self.consumer_key
                request_params["consumer_secret"] = self.consumer_secret
            else:
                request_headers["Authorization"] = build_oauth_header(
                    method, url, request_params, self.consumer_key, self.consumer_secret
                )

        return url, request_params, request_headers

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json_data: Any = None,
        params: Optional[dict] = None,
        namespace: str = ADMIN_NAMESPACE,
        auth: bool = True,
        headers: Optional[dict] = None,
    ) -> UpstreamResponse:
        """Perform one upstream call and return body + headers."""
        url, request_params, request_headers = self._build_request(
            method, endpoint, namespace, params, auth, headers
        )
        logger.info("WooCommerce API Request: %s /%s%s", method.upper(), namespace, endpoint)
        if "X-WC-Payment-Method" in request_headers:
            logger.info("Sending payment method: %s", request_headers["X-WC-Payment-Method"])

        client = await self._get_http_client()
        started = time.perf_counter()
        try:
            response = await client.request(
                method.upper(),
                url,
                params=request_params,
                json=json_data,
                headers=request_headers,
            )
            duration_ms = int((time.perf_counter() - started) * 1000)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = UpstreamError.from_response(e.response)
            logger.error(
                "WooCommerce API Error: %s (%sms) - %s [%s]",
                e.response.status_code, duration_ms, error.message, error.code,
            )
            raise error from e
        except httpx.RequestError as e:
            logger.error("WooCommerce API Error: %s", e)
            raise UpstreamError.unavailable(str(e)) from e

        logger.info("WooCommerce API Response: %s (%sms)", response.status_code, duration_ms)
        return UpstreamResponse(
            data=self._parse_body(response),
            headers=response.headers,
            status_code=response.status_code,
        )

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except json.JSONDecodeError:
            return response.text

    async def get(
        self,
        endpoint: str,
        params: Optional[dict] = None,
        *,
        namespace: str = ADMIN_NAMESPACE,
        auth: bool = True,
        headers: Optional[dict] = None,
        return_headers: bool = False,
        use_cache: bool = True,
        cache_ttl: int | None = None,
    ) -> Any:
        """
        GET an upstream resource.

        Args:
            endpoint: Path under the namespace (e.g. "/products/12")
            params: Query params
            namespace: API namespace (default wc/v3)
            auth: Attach consumer-key authentication
            headers: Extra request headers
            return_headers: Return UpstreamResponse instead of the body
            use_cache: Serve/store the body from the response cache
            cache_ttl: Cache TTL override in seconds

        Returns:
            Parsed JSON body, or UpstreamResponse when return_headers is set
        """
        # Header-returning calls are session reads and must hit upstream
        use_cache = use_cache and not return_headers
        cache_key = f"{namespace}_{endpoint}_{json.dumps(params or {}, sort_keys=True)}"

        if use_cache:
            cached = await self.cache.get(cache_key)
            if cached is not None:
                logger.info("Cache hit for: %s", endpoint)
                return cached

        result = await self.request(
            "GET", endpoint, params=params, namespace=namespace, auth=auth, headers=headers
        )

        if return_headers:
            return result
        if use_cache:
            await self.cache.set(cache_key, result.data, cache_ttl)
        return result.data

    async def post(
        self,
        endpoint: str,
        data: Any = None,
        params: Optional[dict] = None,
        *,
        namespace: str = ADMIN_NAMESPACE,
        auth: bool = True,
        headers: Optional[dict] = None,
        return_headers: bool = False,
    ) -> Any:
        result = await self.request(
            "POST", endpoint, json_data=data if data is not None else {},
            params=params, namespace=namespace, auth=auth, headers=headers,
        )
        await self.invalidate_cache(endpoint)
        return result if return_headers else result.data

    async def put(
        self,
        endpoint: str,
        data: Any = None,
        params: Optional[dict] = None,
        *,
        namespace: str = ADMIN_NAMESPACE,
        auth: bool = True,
        headers: Optional[dict] = None,
        return_headers: bool = False,
    ) -> Any:
        result = await self.request(
            "PUT", endpoint, json_data=data if data is not None else {},
            params=params, namespace=namespace, auth=auth, headers=headers,
        )
        await self.invalidate_cache(endpoint)
        return result if return_headers else result.data

    async def delete(
        self,
        endpoint: str,
        params: Optional[dict] = None,
        *,
        namespace: str = ADMIN_NAMESPACE,
        auth: bool = True,
        headers: Optional[dict] = None,
        return_headers: bool = False,
    ) -> Any:
        result = await self.request(
            "DELETE", endpoint, params=params, namespace=namespace, auth=auth, headers=headers,
        )
        await self.invalidate_cache(endpoint)
        return result if return_headers else result.data

    async def invalidate_cache(self, endpoint: str) -> None:
        """Drop cached bodies whose key mentions the endpoint's first segment."""
        segments = endpoint.split("/")
        pattern = segments[1] if len(segments) > 1 else ""
        if not pattern:
            return
        removed = await self.cache.delete_pattern(f"*{pattern}*")
        if removed:
            logger.info("Cache invalidated for pattern: %s (%s keys)", pattern, removed)

    async def health_check(self) -> dict:
        try:
            await self.get("/system_status", use_cache=False)
            return {"status": "connected", "message": "WooCommerce API is reachable"}
        except UpstreamError as e:
            return {
                "status": "disconnected",
                "message": "Cannot reach WooCommerce API",
                "error": e.message,
            }
