"""Admin customer management"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_customer_service, get_tenant_id
from app.schemas.common import ApiResponse, ok
from app.schemas.customer import (
    CustomerDetail,
    CustomerListItem,
    CustomerUpdate,
    MemoResponse,
    MemoUpdate,
)
from app.services.customers import CustomerService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[CustomerListItem]])
async def list_customers(
    search: Optional[str] = None,
    sort_by: str = Query("created_at", pattern="^(visit_count|last_visit_date|created_at)$"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
    tenant_id: str = Depends(get_tenant_id),
    service: CustomerService = Depends(get_customer_service),
):
    """Customers with visit counts; visits are COMPLETED reservations"""
    return ok(await service.list(tenant_id, search=search, sort_by=sort_by, descending=order == "desc"))


@router.get("/{customer_id}", response_model=ApiResponse[CustomerDetail])
async def get_customer(
    customer_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    service: CustomerService = Depends(get_customer_service),
):
    return ok(await service.detail(tenant_id, customer_id))


@router.patch("/{customer_id}", response_model=ApiResponse[CustomerDetail])
async def update_customer(
    customer_id: UUID,
    data: CustomerUpdate,
    tenant_id: str = Depends(get_tenant_id),
    service: CustomerService = Depends(get_customer_service),
):
    return ok(await service.update_profile(tenant_id, customer_id, data.model_dump(exclude_unset=True)))


@router.patch("/{customer_id}/memo", response_model=ApiResponse[MemoResponse])
async def update_customer_memo(
    customer_id: UUID,
    data: MemoUpdate,
    tenant_id: str = Depends(get_tenant_id),
    service: CustomerService = Depends(get_customer_service),
):
    return ok(await service.update_memo(tenant_id, customer_id, data.memo))
