"""Feature flag endpoints"""

from fastapi import APIRouter, Depends

from app.api.auth import AdminContext, require_super_admin
from app.api.deps import get_flag_service, get_tenant_id
from app.schemas.common import ApiResponse, ok
from app.schemas.tenant import FeatureFlags, FeatureFlagsUpdate
from app.services.feature_flags import FeatureFlagService
import structlog

logger = structlog.get_logger()

router = APIRouter()
super_admin_router = APIRouter()


@router.get("/feature-flags", response_model=ApiResponse[FeatureFlags])
async def get_feature_flags(
    tenant_id: str = Depends(get_tenant_id),
    flags: FeatureFlagService = Depends(get_flag_service),
):
    """Public read; every flag is false when the row is missing or unreadable"""
    return ok(await flags.get_flags(tenant_id))


@super_admin_router.get("/tenants/{tenant_id}/feature-flags", response_model=ApiResponse[FeatureFlags])
async def get_tenant_feature_flags(
    tenant_id: str,
    admin: AdminContext = Depends(require_super_admin),
    flags: FeatureFlagService = Depends(get_flag_service),
):
    return ok(await flags.get_flags(tenant_id))


@super_admin_router.patch("/tenants/{tenant_id}/feature-flags", response_model=ApiResponse[FeatureFlags])
async def update_tenant_feature_flags(
    tenant_id: str,
    data: FeatureFlagsUpdate,
    admin: AdminContext = Depends(require_super_admin),
    flags: FeatureFlagService = Depends(get_flag_service),
):
    """Partial update of a tenant's flags"""
    updated = await flags.update_flags(tenant_id, data.model_dump(exclude_unset=True, exclude_none=True))
    logger.info("Feature flags changed by super admin", tenant_id=tenant_id, admin_id=admin.user_id)
    return ok(updated)
