"""Tags Router - product tags from wc/v3."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from bff.upstream import CommerceClient

from .deps import commerce_client
from .models import query_params

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("")
async def list_tags(
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    search: Optional[str] = None,
    orderby: str = "name",
    order: str = "asc",
    hide_empty: bool = False,
    client: CommerceClient = Depends(commerce_client),
):
    params = query_params(
        page=page, per_page=per_page, search=search,
        orderby=orderby, order=order, hide_empty=hide_empty,
    )
    tags = await client.get("/products/tags", params)
    return {"success": True, "data": tags, "count": len(tags or [])}


@router.get("/{tag_id}")
async def get_tag(tag_id: int, client: CommerceClient = Depends(commerce_client)):
    return {"success": True, "data": await client.get(f"/products/tags/{tag_id}")}
