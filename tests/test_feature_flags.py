"""Tests for feature flags"""

from types import SimpleNamespace

import pytest

from app.errors import FeatureDisabledError
from app.services.feature_flags import FeatureFlagService, FEATURE_FLAG_KEYS

from tests.conftest import TENANT_ID


class BrokenFlagStore:
    async def get(self, tenant_id):
        raise ConnectionError("database unavailable")


@pytest.mark.asyncio
async def test_read_failure_fails_closed():
    service = FeatureFlagService(SimpleNamespace(flags=BrokenFlagStore()))

    flags = await service.get_flags(TENANT_ID)

    assert set(flags) == set(FEATURE_FLAG_KEYS)
    assert not any(flags.values())
    with pytest.raises(FeatureDisabledError) as exc_info:
        await service.ensure_enabled(TENANT_ID, "enable_analytics_report")
    assert exc_info.value.details == {"feature": "enable_analytics_report"}


@pytest.mark.asyncio
async def test_unknown_flag_is_rejected():
    service = FeatureFlagService(SimpleNamespace(flags=BrokenFlagStore()))

    with pytest.raises(KeyError):
        await service.is_enabled(TENANT_ID, "enable_time_travel")


@pytest.mark.asyncio
async def test_missing_row_reads_all_false(client, test_tenant):
    response = await client.get("/feature-flags")

    assert response.status_code == 200
    assert response.json()["data"] == {key: False for key in FEATURE_FLAG_KEYS}


@pytest.mark.asyncio
async def test_super_admin_updates_flags(client, test_super_admin):
    from app.api.auth import create_access_token

    headers = {"Authorization": f"Bearer {create_access_token(test_super_admin)}"}

    response = await client.patch(
        f"/super-admin/tenants/{TENANT_ID}/feature-flags",
        json={"enable_staff_selection": True},
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["enable_staff_selection"] is True
    assert data["enable_analytics_report"] is False

    response = await client.get("/feature-flags")
    assert response.json()["data"]["enable_staff_selection"] is True


@pytest.mark.asyncio
async def test_admin_cannot_update_flags(admin_client):
    response = await admin_client.patch(
        f"/super-admin/tenants/{TENANT_ID}/feature-flags",
        json={"enable_staff_selection": True},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_gated_endpoint_returns_feature_disabled(admin_client):
    response = await admin_client.get("/admin/analytics")

    assert response.status_code == 403
    body = response.json()
    assert body["error"]["code"] == "FEATURE_DISABLED"
    assert body["error"]["details"]["feature"] == "enable_analytics_report"
