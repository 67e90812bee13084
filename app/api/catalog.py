"""Public catalog: menus and staff"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from app.api.deps import get_repositories, get_tenant_id
from app.repositories import Repositories
from app.schemas.common import ApiResponse, ok
from app.schemas.menu import MenuResponse
from app.schemas.staff import PublicStaffResponse

router = APIRouter()


@router.get("/menus", response_model=ApiResponse[List[MenuResponse]])
async def list_menus(
    category: Optional[str] = None,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    """Active menus"""
    return ok(await repos.menus.list(tenant_id, active_only=True, category=category))


@router.get("/staff", response_model=ApiResponse[List[PublicStaffResponse]])
async def list_staff(
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    """Active staff"""
    return ok(await repos.staff.list(tenant_id, active_only=True))
