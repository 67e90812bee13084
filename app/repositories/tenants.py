"""Tenant settings and feature flag repositories"""

from typing import Optional

from sqlalchemy import select

from app.models.tenant import TenantSettings, FeatureFlag
from app.repositories.base import SqlRepository


class SettingsRepository(SqlRepository):

    async def get(self, tenant_id: str) -> Optional[TenantSettings]:
        result = await self.db.execute(
            select(TenantSettings).where(TenantSettings.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_or_create(self, tenant_id: str) -> TenantSettings:
        """Read the tenant's settings, creating a default row when missing"""
        settings = await self.get(tenant_id)
        if settings is None:
            settings = TenantSettings(
                tenant_id=tenant_id,
                open_time="09:00",
                close_time="20:00",
                closed_days=[],
                slot_duration=30,
                cancellation_deadline_hours=24,
                require_confirmation=False,
            )
            self.db.add(settings)
            await self.db.flush()
        return settings


class FeatureFlagRepository(SqlRepository):

    async def get(self, tenant_id: str) -> Optional[FeatureFlag]:
        result = await self.db.execute(
            select(FeatureFlag).where(FeatureFlag.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()
