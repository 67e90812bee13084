"""Tests for admin authorization and the admin console endpoints"""

from uuid import uuid4

import pytest
from sqlalchemy import select

from app.api.auth import create_access_token
from app.config import settings
from app.models.reservation import ReservationStatus
from app.models.security_log import SecurityLog, SecurityEventType

from tests.conftest import MONDAY, TENANT_ID, make_reservation


# Authorization

@pytest.mark.asyncio
async def test_customer_token_is_forbidden_on_admin_routes(test_db, client, test_user):
    client.headers["Authorization"] = f"Bearer {create_access_token(test_user)}"

    for path in ("/admin/menus", "/admin/staff", "/admin/reservations", "/admin/stats", "/admin/settings"):
        response = await client.get(path)
        assert response.status_code == 403
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "FORBIDDEN"
        assert "data" not in body

    logs = (await test_db.execute(select(SecurityLog))).scalars().all()
    assert logs
    assert all(log.event_type == SecurityEventType.UNAUTHORIZED_ACCESS.value for log in logs)


@pytest.mark.asyncio
async def test_missing_token_is_unauthorized(client, test_tenant):
    response = await client.get("/admin/menus")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_garbage_token_is_unauthorized(client, test_tenant):
    response = await client.get("/admin/menus", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_test_headers_accepted_outside_production(client, test_tenant, monkeypatch):
    monkeypatch.setattr(settings, "skip_auth_in_test", True)
    monkeypatch.setattr(settings, "environment", "test")

    response = await client.get(
        "/admin/menus", headers={"x-user-id": str(uuid4()), "x-user-role": "ADMIN"}
    )
    assert response.status_code == 200

    response = await client.get(
        "/admin/menus", headers={"x-user-id": str(uuid4()), "x-user-role": "CUSTOMER"}
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_test_headers_ignored_in_production(client, test_tenant, monkeypatch):
    monkeypatch.setattr(settings, "skip_auth_in_test", True)
    monkeypatch.setattr(settings, "environment", "production")

    response = await client.get(
        "/admin/menus", headers={"x-user-id": str(uuid4()), "x-user-role": "SUPER_ADMIN"}
    )

    assert response.status_code == 401


# Menus

@pytest.mark.asyncio
async def test_menu_crud_and_soft_delete(test_db, admin_client, test_user):
    response = await admin_client.post(
        "/admin/menus",
        json={"name": "Color", "price": 8000, "duration": 90, "category": "Color"},
    )
    assert response.status_code == 201
    menu = response.json()["data"]
    assert menu["is_active"] is True

    response = await admin_client.patch(f"/admin/menus/{menu['id']}", json={"price": 8500})
    assert response.json()["data"]["price"] == 8500

    response = await admin_client.get("/menus")
    assert [m["name"] for m in response.json()["data"]] == ["Color"]

    # Referenced menus are deactivated rather than removed
    from app.models.menu import Menu
    menu_row = (await test_db.execute(select(Menu))).scalar_one()
    await make_reservation(test_db, test_user, menu_row, MONDAY, "10:00")

    response = await admin_client.delete(f"/admin/menus/{menu['id']}")
    assert response.json()["data"] == {"id": menu["id"], "deleted": False, "deactivated": True}

    response = await admin_client.get("/menus")
    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_menu_validation(admin_client):
    response = await admin_client.post("/admin/menus", json={"name": "Free", "price": -1, "duration": 30})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_unknown_menu_is_not_found(admin_client):
    response = await admin_client.get(f"/admin/menus/{uuid4()}")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


# Staff, shifts and vacations

@pytest.mark.asyncio
async def test_duplicate_staff_email_conflicts(admin_client):
    payload = {"name": "Sato", "email": "sato@example.com", "role": "stylist"}

    response = await admin_client.post("/admin/staff", json=payload)
    assert response.status_code == 201

    response = await admin_client.post("/admin/staff", json={**payload, "name": "Another Sato"})
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_RECORD"


@pytest.mark.asyncio
async def test_shift_replacement(admin_client, test_staff, enable_flags):
    staff_id = str(test_staff.id)

    response = await admin_client.put(f"/admin/staff/{staff_id}/shifts", json={"shifts": []})
    assert response.json()["error"]["code"] == "FEATURE_DISABLED"

    await enable_flags("enable_staff_shift_management")

    response = await admin_client.put(
        f"/admin/staff/{staff_id}/shifts",
        json={"shifts": [{"day_of_week": "TUESDAY", "start_time": "18:00", "end_time": "10:00"}]},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TIME_RANGE"

    response = await admin_client.put(
        f"/admin/staff/{staff_id}/shifts",
        json={"shifts": [
            {"day_of_week": "TUESDAY", "start_time": "10:00", "end_time": "18:00"},
            {"day_of_week": "WEDNESDAY", "start_time": "10:00", "end_time": "14:00"},
        ]},
    )
    assert response.status_code == 200

    response = await admin_client.get(f"/admin/staff/{staff_id}/shifts")
    assert sorted(s["day_of_week"] for s in response.json()["data"]) == ["TUESDAY", "WEDNESDAY"]


@pytest.mark.asyncio
async def test_vacation_lifecycle(admin_client, test_staff):
    staff_id = str(test_staff.id)

    response = await admin_client.post(
        f"/admin/staff/{staff_id}/vacations",
        json={"start_date": "2030-06-10", "end_date": "2030-06-01"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_DATE_RANGE"

    response = await admin_client.post(
        f"/admin/staff/{staff_id}/vacations",
        json={"start_date": "2030-06-10", "end_date": "2030-06-12", "reason": "Training"},
    )
    assert response.status_code == 201
    vacation_id = response.json()["data"]["id"]

    response = await admin_client.get(f"/admin/staff/{staff_id}/vacations")
    assert [v["id"] for v in response.json()["data"]] == [vacation_id]

    response = await admin_client.delete(f"/admin/staff/{staff_id}/vacations/{vacation_id}")
    assert response.json()["data"]["deleted"] is True


# Blocked times and settings

@pytest.mark.asyncio
async def test_blocked_time_requires_end_after_start(admin_client, test_tenant):
    response = await admin_client.post(
        "/admin/blocked-times",
        json={"start_datetime": "2030-06-03T13:00:00", "end_datetime": "2030-06-03T12:00:00"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_TIME_RANGE"

    response = await admin_client.post(
        "/admin/blocked-times",
        json={"start_datetime": "2030-06-03T12:00:00", "end_datetime": "2030-06-03T13:00:00", "reason": "Meeting"},
    )
    assert response.status_code == 201

    response = await admin_client.get(
        "/admin/blocked-times", params={"from": "2030-06-03T00:00:00", "to": "2030-06-04T00:00:00"}
    )
    assert len(response.json()["data"]) == 1


@pytest.mark.asyncio
async def test_store_settings_update(admin_client, test_tenant):
    response = await admin_client.patch("/admin/settings", json={"open_time": "21:00"})
    assert response.json()["error"]["code"] == "INVALID_TIME_RANGE"

    response = await admin_client.patch(
        "/admin/settings",
        json={"open_time": "10:00", "closed_days": ["SUNDAY", "MONDAY"], "require_confirmation": True},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["open_time"] == "10:00"
    assert data["closed_days"] == ["SUNDAY", "MONDAY"]
    assert data["require_confirmation"] is True


# Reservations, customers and analytics

@pytest.mark.asyncio
async def test_admin_reservation_list_and_status(test_db, admin_client, test_user, test_menu, test_staff):
    reservation = await make_reservation(test_db, test_user, test_menu, MONDAY, "10:00", staff=test_staff)
    reservation_id = str(reservation.id)

    response = await admin_client.get("/admin/reservations", params={"search": "Hanako"})
    page = response.json()["data"]
    assert page["total"] == 1
    assert page["items"][0]["user"]["email"] == test_user.email

    response = await admin_client.get("/admin/reservations", params={"search": "Nobody"})
    assert response.json()["data"]["total"] == 0

    response = await admin_client.patch(f"/admin/reservations/{reservation_id}", json={"status": "COMPLETED"})
    assert response.json()["data"]["status"] == ReservationStatus.COMPLETED.value

    response = await admin_client.get("/admin/reservations", params={"status": "COMPLETED"})
    assert response.json()["data"]["total"] == 1

    response = await admin_client.delete(f"/admin/reservations/{reservation_id}")
    assert response.json()["data"]["deleted"] is True

    response = await admin_client.get(f"/admin/reservations/{reservation_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_customer_management(test_db, admin_client, test_user, test_menu, test_staff, enable_flags):
    customer_id = str(test_user.id)
    await make_reservation(
        test_db, test_user, test_menu, MONDAY, "10:00", staff=test_staff, status=ReservationStatus.COMPLETED
    )

    response = await admin_client.get("/admin/customers")
    assert response.json()["error"]["code"] == "FEATURE_DISABLED"

    await enable_flags("enable_customer_management")

    response = await admin_client.get("/admin/customers", params={"sort_by": "visit_count"})
    customers = response.json()["data"]
    assert [c["id"] for c in customers] == [customer_id]
    assert customers[0]["visit_count"] == 1
    assert customers[0]["last_visit_date"] == MONDAY.isoformat()

    response = await admin_client.patch(f"/admin/customers/{customer_id}/memo", json={"memo": "Prefers short hair"})
    assert response.json()["data"]["memo"] == "Prefers short hair"

    response = await admin_client.get(f"/admin/customers/{customer_id}")
    detail = response.json()["data"]
    assert detail["memo"] == "Prefers short hair"
    assert detail["visit_history"][0]["menu_name"] == "Cut"


@pytest.mark.asyncio
async def test_dashboard_stats(test_db, admin_client, test_user, test_menu, test_staff):
    await make_reservation(
        test_db, test_user, test_menu, MONDAY, "10:00", staff=test_staff, status=ReservationStatus.COMPLETED
    )
    await make_reservation(
        test_db, test_user, test_menu, MONDAY, "12:00", staff=test_staff, status=ReservationStatus.CANCELLED
    )

    response = await admin_client.get("/admin/stats")

    assert response.status_code == 200
    assert response.json()["data"] == {
        "today_reservations": 0,
        "monthly_reservations": 1,
        "monthly_revenue": 5000,
        "total_customers": 1,
    }


@pytest.mark.asyncio
async def test_repeat_rate(test_db, admin_client, test_user, test_menu, test_staff, enable_flags):
    await enable_flags("enable_repeat_rate_analysis")
    for time in ("10:00", "12:00"):
        await make_reservation(
            test_db, test_user, test_menu, MONDAY, time, staff=test_staff, status=ReservationStatus.COMPLETED
        )

    response = await admin_client.get("/admin/repeat-rate")

    data = response.json()["data"]
    assert data["total_customers"] == 1
    assert data["repeat_rate"] == 100
    assert data["distribution"]["twice"] == 1
