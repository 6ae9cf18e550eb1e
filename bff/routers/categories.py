"""Categories Router - product categories from wc/v3."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from bff.upstream import CommerceClient

from .deps import commerce_client
from .models import query_params

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("")
async def list_categories(
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    parent: Optional[int] = None,
    hide_empty: bool = True,
    orderby: str = "name",
    order: str = "asc",
    slug: Optional[str] = None,
    client: CommerceClient = Depends(commerce_client),
):
    params = query_params(
        page=page, per_page=per_page, parent=parent, hide_empty=hide_empty,
        orderby=orderby, order=order, slug=slug,
    )
    categories = await client.get("/products/categories", params)
    return {"success": True, "data": categories, "count": len(categories or [])}


@router.get("/{category_id}")
async def get_category(category_id: int, client: CommerceClient = Depends(commerce_client)):
    return {"success": True, "data": await client.get(f"/products/categories/{category_id}")}
