"""Payment Service - Razorpay Orders API integration over httpx."""

from typing import Any

import httpx

from bff.config import get_settings
from bff.errors import ERROR_PAYMENT_FAILED, ERROR_PAYMENT_UNCONFIGURED, ValidationError
from bff.logging import get_logger

logger = get_logger(__name__)

RAZORPAY_API_URL = "https://api.razorpay.com/v1"


def to_minor_units(amount: Any) -> int:
    """Rupees (or any 2-decimal currency) to paise."""
    return int(round(float(amount) * 100))


class RazorpayService:
    """Creates Razorpay orders for WooCommerce orders."""

    def __init__(self, key_id: str | None = None, key_secret: str | None = None, api_url: str | None = None):
        settings = get_settings()
        self.key_id = key_id or settings.razorpay_key_id
        self.key_secret = key_secret or settings.razorpay_key_secret
        self.api_url = (api_url or RAZORPAY_API_URL).rstrip("/")

        # HTTP client (lazy init)
        self._http_client: httpx.AsyncClient | None = None

        if not self.is_configured:
            logger.warning("Razorpay keys missing. Payment routes will fail.")

    @property
    def is_configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(10.0, connect=5.0, read=10.0, write=10.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def create_order(self, amount: Any, currency: str, receipt: str) -> dict[str, Any]:
        """
        Create a Razorpay order.

        Args:
            amount: Order total in major units (e.g. "499.00")
            currency: ISO currency code
            receipt: Merchant receipt reference

        Returns:
            Razorpay order object ({id, amount, currency, ...})

        Raises:
            ValidationError: gateway not configured, rejected or unreachable
        """
        if not self.is_configured:
            raise ValidationError(ERROR_PAYMENT_UNCONFIGURED)

        payload = {
            "amount": to_minor_units(amount),
            "currency": currency,
            "receipt": receipt,
        }
        client = await self._get_http_client()

        try:
            response = await client.post(
                f"{self.api_url}/orders",
                json=payload,
                auth=(self.key_id, self.key_secret),
            )
            logger.info("Razorpay API response status: %s for %s", response.status_code, receipt)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            try:
                error = e.response.json().get("error") or {}
                description = error.get("description") or ERROR_PAYMENT_FAILED
            except ValueError:
                description = ERROR_PAYMENT_FAILED
            logger.error("Razorpay API error %s for %s: %s", e.response.status_code, receipt, description)
            raise ValidationError(description) from e
        except httpx.RequestError as e:
            logger.error("Razorpay network error: %s", e)
            raise ValidationError(f"Failed to connect to Razorpay API: {e}") from e


def build_checkout_payload(rz_order: dict, order: dict, order_id: Any, key_id: str, store_name: str) -> dict:
    """Response shape the mobile checkout sheet expects."""
    billing = order.get("billing") or {}
    return {
        "razorpay_order_id": rz_order["id"],
        "key_id": key_id,
        "amount": rz_order["amount"],
        "currency": rz_order["currency"],
        "name": store_name,
        "description": f"Order #{order_id}",
        "prefill": {
            "name": f"{billing.get('first_name', '')} {billing.get('last_name', '')}".strip(),
            "email": billing.get("email"),
            "contact": billing.get("phone"),
        },
    }
