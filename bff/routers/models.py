"""
API Request Models

Shared pydantic models for the mobile app endpoints.
"""
from typing import Optional, Union

from pydantic import BaseModel, Field


# ==================== CART MODELS ====================

class CartItemRequest(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=0)


class CartItemsRequest(BaseModel):
    items: list[CartItemRequest] = Field(default_factory=list)


# ==================== STORE SYNC MODELS ====================

class SyncItemRequest(BaseModel):
    product_id: int
    variation_id: Optional[int] = None
    quantity: int = Field(ge=0)  # 0 is kept as a quantity; omit the item to remove it


class SyncCartRequest(BaseModel):
    items: list[SyncItemRequest] = Field(default_factory=list)


# ==================== PAYMENT MODELS ====================

class RazorpayOrderRequest(BaseModel):
    order_id: Optional[Union[int, str]] = None


# ==================== CATALOG MODELS ====================

class ReviewRequest(BaseModel):
    product_id: Optional[int] = None
    review: Optional[str] = None
    reviewer: Optional[str] = None
    reviewer_email: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=0, le=5)


def query_params(**params) -> dict:
    """Upstream query params with unset (None) values left out."""
    return {k: v for k, v in params.items() if v is not None}


def paginated(data, page: int, per_page: int) -> dict:
    return {
        "success": True,
        "data": data,
        "pagination": {"page": page, "per_page": per_page, "total": len(data or [])},
    }
