"""Admin dashboard statistics and analytics"""

from fastapi import APIRouter, Depends

from app.api.deps import get_analytics_service, get_tenant_id
from app.schemas.analytics import AnalyticsReport, DashboardStats, RepeatRateReport
from app.schemas.common import ApiResponse, ok
from app.services.analytics import AnalyticsService

router = APIRouter()


@router.get("/stats", response_model=ApiResponse[DashboardStats])
async def get_stats(
    tenant_id: str = Depends(get_tenant_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Today's and this month's figures"""
    return ok(await service.stats(tenant_id))


@router.get("/analytics", response_model=ApiResponse[AnalyticsReport])
async def get_analytics(
    tenant_id: str = Depends(get_tenant_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return ok(await service.report(tenant_id))


@router.get("/repeat-rate", response_model=ApiResponse[RepeatRateReport])
async def get_repeat_rate(
    tenant_id: str = Depends(get_tenant_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return ok(await service.repeat_rate(tenant_id))
