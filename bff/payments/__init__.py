"""Payment gateway package."""
from typing import Optional

from .razorpay import RazorpayService, build_checkout_payload, to_minor_units

_razorpay_service: Optional[RazorpayService] = None


def get_razorpay_service() -> RazorpayService:
    """Get or create RazorpayService singleton (lazy loaded)."""
    global _razorpay_service
    if _razorpay_service is None:
        _razorpay_service = RazorpayService()
    return _razorpay_service


async def close_razorpay_service() -> None:
    global _razorpay_service
    if _razorpay_service is not None:
        await _razorpay_service.aclose()
        _razorpay_service = None


__all__ = [
    "RazorpayService",
    "build_checkout_payload",
    "to_minor_units",
    "get_razorpay_service",
    "close_razorpay_service",
]
