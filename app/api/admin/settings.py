"""Admin store settings"""

from fastapi import APIRouter, Depends

from app.api.deps import get_repositories, get_tenant_id
from app.errors import InvalidTimeRangeError
from app.repositories import Repositories
from app.schemas.common import ApiResponse, ok
from app.schemas.tenant import StoreSettingsUpdate, StoreSettingsResponse
from app.services.time_utils import to_minutes

router = APIRouter()


@router.get("", response_model=ApiResponse[StoreSettingsResponse])
async def get_store_settings(
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    """Settings, created with defaults on first read"""
    store = await repos.settings.get_or_create(tenant_id)
    await repos.commit()
    return ok(store)


@router.patch("", response_model=ApiResponse[StoreSettingsResponse])
async def update_store_settings(
    data: StoreSettingsUpdate,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    store = await repos.settings.get_or_create(tenant_id)
    changes = data.model_dump(exclude_unset=True)

    open_time = changes.get("open_time", store.open_time)
    close_time = changes.get("close_time", store.close_time)
    if to_minutes(open_time) >= to_minutes(close_time):
        raise InvalidTimeRangeError("Opening time must be before closing time")

    if "closed_days" in changes and changes["closed_days"] is not None:
        changes["closed_days"] = [day.value for day in changes["closed_days"]]

    for field, value in changes.items():
        setattr(store, field, value)

    await repos.commit()
    return ok(store)
