"""
Products Router

Catalog reads over the wc/v3 products endpoints, plus review submission.
Bodies are the upstream product objects, passed through unchanged.

Fixed paths (/featured/list, /on-sale/list, /slug/..., /related/...) are
declared before /{product_id}.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from bff.errors import (
    ERROR_PRODUCT_NOT_FOUND,
    ERROR_REVIEW_FIELDS_REQUIRED,
    NotFoundError,
    ValidationError,
)
from bff.logging import get_logger
from bff.upstream import CommerceClient

from .deps import commerce_client
from .models import ReviewRequest, paginated, query_params

logger = get_logger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
async def list_products(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    featured: Optional[bool] = None,
    on_sale: Optional[bool] = None,
    min_price: Optional[str] = None,
    max_price: Optional[str] = None,
    orderby: str = "date",
    order: str = "desc",
    status: str = "publish",
    attribute: Optional[str] = None,
    attribute_term: Optional[str] = None,
    include: Optional[str] = None,
    client: CommerceClient = Depends(commerce_client),
):
    params = query_params(
        page=page, per_page=per_page, search=search, category=category, tag=tag,
        featured=featured, on_sale=on_sale, min_price=min_price, max_price=max_price,
        orderby=orderby, order=order, status=status,
        attribute=attribute, attribute_term=attribute_term, include=include,
    )
    products = await client.get("/products", params)
    return paginated(products, page, per_page)


@router.get("/featured/list")
async def featured_products(
    per_page: int = Query(10, ge=1, le=100),
    client: CommerceClient = Depends(commerce_client),
):
    products = await client.get("/products", {"featured": True, "per_page": per_page, "status": "publish"})
    return {"success": True, "data": products, "count": len(products or [])}


@router.get("/on-sale/list")
async def on_sale_products(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    client: CommerceClient = Depends(commerce_client),
):
    params = {"on_sale": True, "page": page, "per_page": per_page, "status": "publish"}
    products = await client.get("/products", params)
    return paginated(products, page, per_page)


@router.get("/slug/{slug}")
async def product_by_slug(slug: str, client: CommerceClient = Depends(commerce_client)):
    products = await client.get("/products", {"slug": slug})
    if not products:
        raise NotFoundError(ERROR_PRODUCT_NOT_FOUND, code="product_not_found")
    return {"success": True, "data": products[0]}


@router.get("/related/{product_id}")
async def related_products(
    product_id: int,
    per_page: int = Query(4, ge=1, le=100),
    client: CommerceClient = Depends(commerce_client),
):
    """Products sharing a category with product_id, excluding itself."""
    product = await client.get(f"/products/{product_id}")
    category_ids = [str(c["id"]) for c in (product or {}).get("categories") or [] if "id" in c]
    if not category_ids:
        return {"success": True, "data": [], "count": 0}

    params = {
        "category": ",".join(category_ids),
        # one extra in case the product itself slips through the exclude
        "per_page": per_page + 1,
        "exclude": [product_id],
        "status": "publish",
    }
    related = [p for p in await client.get("/products", params) if p.get("id") != product_id]
    related = related[:per_page]
    return {"success": True, "data": related, "count": len(related)}


@router.post("/reviews", status_code=201)
async def create_review(body: ReviewRequest, client: CommerceClient = Depends(commerce_client)):
    if not (body.product_id and body.review and body.reviewer and body.reviewer_email and body.rating):
        raise ValidationError(ERROR_REVIEW_FIELDS_REQUIRED)

    review = await client.post("/products/reviews", {
        "product_id": body.product_id,
        "review": body.review,
        "reviewer": body.reviewer,
        "reviewer_email": body.reviewer_email,
        "rating": body.rating,
        "verified": True,
    })
    logger.info("Review submitted for product %s", body.product_id)
    return {"success": True, "data": review, "message": "Review submitted successfully"}


@router.get("/{product_id}")
async def get_product(product_id: int, client: CommerceClient = Depends(commerce_client)):
    return {"success": True, "data": await client.get(f"/products/{product_id}")}


@router.get("/{product_id}/variations")
async def product_variations(
    product_id: int,
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    client: CommerceClient = Depends(commerce_client),
):
    variations = await client.get(f"/products/{product_id}/variations", {"page": page, "per_page": per_page})
    return {"success": True, "data": variations, "count": len(variations or [])}


@router.get("/{product_id}/reviews")
async def product_reviews(
    product_id: int,
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    client: CommerceClient = Depends(commerce_client),
):
    params = {"product": [product_id], "page": page, "per_page": per_page}
    reviews = await client.get("/products/reviews", params)
    return paginated(reviews, page, per_page)
