"""
Attributes Router

Global product attributes (size, colour, ...) and their terms, used by the
app to build catalog filters.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from bff.upstream import CommerceClient

from .deps import commerce_client
from .models import query_params

router = APIRouter(prefix="/attributes", tags=["attributes"])


@router.get("")
async def list_attributes(
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    orderby: Optional[str] = None,
    order: Optional[str] = None,
    hide_empty: bool = False,
    client: CommerceClient = Depends(commerce_client),
):
    params = query_params(page=page, per_page=per_page, orderby=orderby, order=order, hide_empty=hide_empty)
    attributes = await client.get("/products/attributes", params)
    return {"success": True, "data": attributes, "count": len(attributes or [])}


@router.get("/{attribute_id}")
async def get_attribute(attribute_id: int, client: CommerceClient = Depends(commerce_client)):
    return {"success": True, "data": await client.get(f"/products/attributes/{attribute_id}")}


@router.get("/{attribute_id}/terms")
async def attribute_terms(
    attribute_id: int,
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    search: Optional[str] = None,
    orderby: Optional[str] = None,
    order: Optional[str] = None,
    hide_empty: bool = False,
    client: CommerceClient = Depends(commerce_client),
):
    params = query_params(
        page=page, per_page=per_page, search=search,
        orderby=orderby, order=order, hide_empty=hide_empty,
    )
    terms = await client.get(f"/products/attributes/{attribute_id}/terms", params)
    return {"success": True, "data": terms, "count": len(terms or [])}
