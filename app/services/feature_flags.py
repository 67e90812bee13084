"""Per-tenant feature flags with fail-closed reads"""

from typing import Dict

import structlog

from app.errors import FeatureDisabledError
from app.models.tenant import FeatureFlag

logger = structlog.get_logger()

FEATURE_FLAG_KEYS = (
    "enable_staff_selection",
    "enable_staff_shift_management",
    "enable_customer_management",
    "enable_reservation_update",
    "enable_reminder_email",
    "enable_manual_reservation",
    "enable_analytics_report",
    "enable_repeat_rate_analysis",
    "enable_coupon_feature",
    "enable_line_notification",
)


def all_disabled() -> Dict[str, bool]:
    return {key: False for key in FEATURE_FLAG_KEYS}


class FeatureFlagService:
    """Reads and updates the single flag row of a tenant"""

    def __init__(self, repos):
        self.repos = repos

    async def get_flags(self, tenant_id: str) -> Dict[str, bool]:
        """All ten flags; a missing row or a failed read turns every flag off"""
        try:
            row = await self.repos.flags.get(tenant_id)
        except Exception as e:
            logger.error("Failed to read feature flags", tenant_id=tenant_id, error=str(e))
            return all_disabled()

        if row is None:
            return all_disabled()
        return {key: bool(getattr(row, key)) for key in FEATURE_FLAG_KEYS}

    async def is_enabled(self, tenant_id: str, key: str) -> bool:
        if key not in FEATURE_FLAG_KEYS:
            raise KeyError(f"Unknown feature flag: {key}")
        flags = await self.get_flags(tenant_id)
        return flags[key]

    async def ensure_enabled(self, tenant_id: str, key: str) -> None:
        if not await self.is_enabled(tenant_id, key):
            logger.info("Feature disabled", tenant_id=tenant_id, feature=key)
            raise FeatureDisabledError(key)

    async def update_flags(self, tenant_id: str, changes: Dict[str, bool]) -> Dict[str, bool]:
        """Apply a partial update, creating the row on first write"""
        row = await self.repos.flags.get(tenant_id)
        if row is None:
            row = FeatureFlag(tenant_id=tenant_id, **all_disabled())
            self.repos.flags.add(row)

        for key, value in changes.items():
            if key not in FEATURE_FLAG_KEYS:
                raise KeyError(f"Unknown feature flag: {key}")
            setattr(row, key, bool(value))

        await self.repos.commit()
        logger.info("Feature flags updated", tenant_id=tenant_id, changes=changes)
        return {key: bool(getattr(row, key)) for key in FEATURE_FLAG_KEYS}
