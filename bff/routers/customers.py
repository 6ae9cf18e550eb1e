"""Customers Router - wc/v3 customer records, bodies passed through."""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from bff.errors import ERROR_EMAIL_REQUIRED, ValidationError
from bff.upstream import CommerceClient

from .deps import commerce_client
from .models import paginated, query_params

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("", status_code=201)
async def create_customer(
    body: Optional[dict[str, Any]] = Body(None),
    client: CommerceClient = Depends(commerce_client),
):
    body = body or {}
    if not body.get("email"):
        raise ValidationError(ERROR_EMAIL_REQUIRED)

    customer = await client.post("/customers", body)
    return {"success": True, "data": customer, "message": "Customer created successfully"}


@router.get("")
async def list_customers(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    orderby: str = "registered_date",
    order: str = "desc",
    client: CommerceClient = Depends(commerce_client),
):
    params = query_params(page=page, per_page=per_page, search=search or None, orderby=orderby, order=order)
    customers = await client.get("/customers", params)
    return paginated(customers, page, per_page)


@router.get("/{customer_id}")
async def get_customer(customer_id: int, client: CommerceClient = Depends(commerce_client)):
    return {"success": True, "data": await client.get(f"/customers/{customer_id}")}


@router.put("/{customer_id}")
async def update_customer(
    customer_id: int,
    body: Optional[dict[str, Any]] = Body(None),
    client: CommerceClient = Depends(commerce_client),
):
    body = body or {}
    customer = await client.put(f"/customers/{customer_id}", body)
    return {"success": True, "data": customer, "message": "Customer updated successfully"}
