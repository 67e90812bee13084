"""Tests for the scheduler endpoint"""

import pytest

from app.config import settings

from tests.conftest import MONDAY, make_reservation


@pytest.fixture
def cron_secret(monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "test-cron-secret")
    return "test-cron-secret"


@pytest.mark.asyncio
async def test_wrong_secret_is_rejected(client, test_tenant, cron_secret):
    response = await client.get("/cron/send-reminders", headers={"Authorization": "Bearer wrong"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unset_secret_rejects_everything(client, test_tenant, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "")

    response = await client.get("/cron/send-reminders", headers={"Authorization": "Bearer "})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_reminders_disabled(client, test_tenant, cron_secret):
    response = await client.get(
        "/cron/send-reminders", headers={"Authorization": f"Bearer {cron_secret}"}
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FEATURE_DISABLED"


@pytest.mark.asyncio
async def test_send_reminders(test_db, client, sender, cron_secret, test_user, test_menu, test_staff, enable_flags):
    await enable_flags("enable_reminder_email")
    await make_reservation(test_db, test_user, test_menu, MONDAY, "10:00", staff=test_staff)
    headers = {"Authorization": f"Bearer {cron_secret}"}

    response = await client.get("/cron/send-reminders", headers=headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert (data["sent"], data["success"], data["failure"]) == (1, 1, 0)
    assert [m["to"] for m in sender.sent] == [test_user.email]

    response = await client.get("/cron/send-reminders", headers=headers)
    assert response.json()["data"]["sent"] == 0
