"""Admin menu management"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
import structlog

from app.api.deps import get_repositories, get_tenant_id
from app.errors import NotFoundError
from app.models.menu import Menu
from app.repositories import Repositories
from app.schemas.common import ApiResponse, ok
from app.schemas.menu import MenuCreate, MenuUpdate, MenuResponse

logger = structlog.get_logger()

router = APIRouter()


async def _get_menu(repos: Repositories, tenant_id: str, menu_id: UUID) -> Menu:
    menu = await repos.menus.get(tenant_id, menu_id)
    if menu is None:
        raise NotFoundError("Menu not found")
    return menu


@router.get("", response_model=ApiResponse[List[MenuResponse]])
async def list_menus(
    category: Optional[str] = None,
    include_inactive: bool = True,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    """List menus including inactive ones"""
    return ok(await repos.menus.list(tenant_id, active_only=not include_inactive, category=category))


@router.post("", response_model=ApiResponse[MenuResponse], status_code=201)
async def create_menu(
    menu_data: MenuCreate,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    """Create a new menu"""
    menu = repos.menus.add(Menu(tenant_id=tenant_id, **menu_data.model_dump()))
    await repos.commit()
    logger.info("Menu created", menu_id=str(menu.id))
    return ok(menu)


@router.get("/{menu_id}", response_model=ApiResponse[MenuResponse])
async def get_menu(
    menu_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    return ok(await _get_menu(repos, tenant_id, menu_id))


@router.patch("/{menu_id}", response_model=ApiResponse[MenuResponse])
async def update_menu(
    menu_id: UUID,
    menu_data: MenuUpdate,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    """Update menu"""
    menu = await _get_menu(repos, tenant_id, menu_id)

    for field, value in menu_data.model_dump(exclude_unset=True).items():
        setattr(menu, field, value)

    await repos.commit()
    return ok(menu)


@router.delete("/{menu_id}", response_model=ApiResponse[dict])
async def delete_menu(
    menu_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    """Delete a menu; menus referenced by reservations are deactivated instead"""
    menu = await _get_menu(repos, tenant_id, menu_id)

    if await repos.reservations.exists_for_menu(menu.id):
        menu.is_active = False
        deleted = False
    else:
        await repos.menus.delete(menu)
        deleted = True

    await repos.commit()
    logger.info("Menu removed", menu_id=str(menu_id), hard_delete=deleted)
    return ok({"id": str(menu_id), "deleted": deleted, "deactivated": not deleted})
