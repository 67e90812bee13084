"""Tests for the reservation lifecycle"""

import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.errors import (
    CancellationDeadlinePassedError,
    FeatureDisabledError,
    InvalidInputError,
    InvalidStateError,
    PastReservationError,
    SlotUnavailableError,
)
from app.models.menu import Menu
from app.models.reservation import Reservation, ReservationStatus
from app.models.tenant import Tenant, TenantSettings
from app.repositories import Repositories
from app.services.availability import AnyStaff
from app.services.reservations import append_cancellation_reason

from tests.conftest import (
    MONDAY,
    NOW,
    TENANT_ID,
    FixedClock,
    RecordingSender,
    build_service,
    create_schema,
    make_reservation,
    make_staff,
    make_user,
)


def test_append_cancellation_reason():
    assert append_cancellation_reason(None, None) is None
    assert append_cancellation_reason("Window seat", None) == "Window seat"
    assert append_cancellation_reason(None, "Sick") == "[Cancellation reason] Sick"
    assert append_cancellation_reason("Window seat", "Sick") == "Window seat\n[Cancellation reason] Sick"


@pytest.mark.asyncio
async def test_create_auto_assigns_free_staff_and_confirms(service, sender, test_user, test_menu, test_staff):
    reservation = await service.create(TENANT_ID, test_user, test_menu.id, None, MONDAY, "10:00", "First visit")

    assert reservation.status == ReservationStatus.CONFIRMED
    assert reservation.staff_id == test_staff.id
    assert reservation.reminder_sent is False
    assert [m["to"] for m in sender.sent] == [test_user.email]


@pytest.mark.asyncio
async def test_create_is_pending_when_confirmation_required(test_db, service, test_user, test_menu):
    store = (await test_db.execute(select(TenantSettings))).scalar_one()
    store.require_confirmation = True
    await test_db.commit()

    reservation = await service.create(TENANT_ID, test_user, test_menu.id, None, MONDAY, "10:00")

    assert reservation.status == ReservationStatus.PENDING
    assert reservation.staff_id is None


@pytest.mark.asyncio
async def test_create_survives_email_failure(test_db, clock, test_user, test_menu):
    service = build_service(test_db, RecordingSender(fail_for=[test_user.email]), clock)

    reservation = await service.create(TENANT_ID, test_user, test_menu.id, None, MONDAY, "10:00")

    assert reservation.status == ReservationStatus.CONFIRMED


@pytest.mark.asyncio
async def test_same_slot_twice_is_unavailable(test_db, service, test_user, test_menu, test_staff):
    other = await make_user(test_db, "other@example.com", name="Taro Suzuki")
    menu_id = test_menu.id
    await service.create(TENANT_ID, test_user, menu_id, None, MONDAY, "10:00")

    with pytest.raises(SlotUnavailableError):
        await service.create(TENANT_ID, other, menu_id, None, MONDAY, "10:30")


@pytest.mark.asyncio
async def test_customer_cannot_hold_two_overlapping_bookings(test_db, service, test_user, test_menu, test_staff):
    await make_staff(test_db, "Suzuki", "suzuki@example.com")
    menu_id = test_menu.id
    await service.create(TENANT_ID, test_user, menu_id, None, MONDAY, "10:00")

    with pytest.raises(SlotUnavailableError) as exc_info:
        await service.create(TENANT_ID, test_user, menu_id, None, MONDAY, "10:00")

    assert "already have a reservation" in exc_info.value.message


@pytest.mark.asyncio
async def test_back_to_back_bookings_are_allowed(test_db, service, test_user, test_menu, test_staff):
    other = await make_user(test_db, "other@example.com")
    first = await service.create(TENANT_ID, test_user, test_menu.id, None, MONDAY, "10:00")
    second = await service.create(TENANT_ID, other, test_menu.id, None, MONDAY, "11:00")

    assert first.staff_id == second.staff_id


@pytest.mark.asyncio
async def test_past_date_is_rejected(service, test_user, test_menu):
    with pytest.raises(InvalidInputError):
        await service.create(TENANT_ID, test_user, test_menu.id, None, NOW.date() - timedelta(days=1), "10:00")


@pytest.mark.asyncio
async def test_assigned_staff_requires_staff_selection(service, test_user, test_menu, test_staff):
    with pytest.raises(FeatureDisabledError):
        await service.create(TENANT_ID, test_user, test_menu.id, test_staff.id, MONDAY, "10:00")


@pytest.mark.asyncio
async def test_cancel_frees_the_slot(test_db, service, sender, test_user, test_menu, test_staff):
    reservation = await service.create(TENANT_ID, test_user, test_menu.id, None, MONDAY, "11:00")

    cancelled = await service.cancel(TENANT_ID, test_user, reservation.id, "Schedule changed")

    assert cancelled.status == ReservationStatus.CANCELLED
    assert cancelled.notes == "[Cancellation reason] Schedule changed"
    assert len(sender.sent) == 2

    slots = await service.engine.get_slots(TENANT_ID, MONDAY, test_menu, AnyStaff())
    assert all(slot.available for slot in slots)


@pytest.mark.asyncio
async def test_cancel_after_deadline_is_rejected(test_db, service, test_user, test_menu, test_staff):
    reservation = await make_reservation(test_db, test_user, test_menu, MONDAY, "09:00", staff=test_staff)

    # 23 hours ahead with a 24 hour deadline
    with pytest.raises(CancellationDeadlinePassedError):
        await service.cancel(TENANT_ID, test_user, reservation.id)


@pytest.mark.asyncio
async def test_cancel_twice_is_invalid_state(test_db, service, test_user, test_menu, test_staff):
    reservation = await make_reservation(
        test_db, test_user, test_menu, MONDAY, "15:00", staff=test_staff, status=ReservationStatus.CANCELLED
    )

    with pytest.raises(InvalidStateError):
        await service.cancel(TENANT_ID, test_user, reservation.id)


@pytest.mark.asyncio
async def test_past_reservation_cannot_be_cancelled(test_db, service, test_user, test_menu, test_staff):
    yesterday = NOW.date() - timedelta(days=1)
    reservation = await make_reservation(test_db, test_user, test_menu, yesterday, "15:00", staff=test_staff)

    with pytest.raises(PastReservationError):
        await service.cancel(TENANT_ID, test_user, reservation.id)


@pytest.mark.asyncio
async def test_update_requires_flag(test_db, service, test_user, test_menu, test_staff):
    reservation = await make_reservation(test_db, test_user, test_menu, MONDAY, "15:00", staff=test_staff)

    with pytest.raises(FeatureDisabledError):
        await service.update(TENANT_ID, test_user, reservation.id, {"reserved_time": "16:00"})


@pytest.mark.asyncio
async def test_update_moves_reservation_and_ignores_itself(test_db, service, sender, test_user, test_menu, test_staff, enable_flags):
    await enable_flags("enable_reservation_update")
    reservation = await make_reservation(test_db, test_user, test_menu, MONDAY, "15:00", staff=test_staff)

    # 15:30 overlaps only the reservation being moved
    updated = await service.update(TENANT_ID, test_user, reservation.id, {"reserved_time": "15:30"})

    assert updated.reserved_time == "15:30"
    assert updated.staff_id == test_staff.id
    assert sender.sent[-1]["subject"].startswith("[Reservation updated]")


@pytest.mark.asyncio
async def test_admin_create_requires_manual_reservation(service, test_user, test_menu):
    with pytest.raises(FeatureDisabledError):
        await service.admin_create(TENANT_ID, test_user.id, test_menu.id, None, MONDAY, "10:00")


@pytest.mark.asyncio
async def test_admin_create_is_always_confirmed(test_db, service, test_user, test_menu, enable_flags):
    await enable_flags("enable_manual_reservation")
    store = (await test_db.execute(select(TenantSettings))).scalar_one()
    store.require_confirmation = True
    await test_db.commit()

    reservation = await service.admin_create(TENANT_ID, test_user.id, test_menu.id, None, MONDAY, "10:00")

    assert reservation.status == ReservationStatus.CONFIRMED


@pytest.mark.asyncio
async def test_admin_update_sets_any_status(test_db, service, test_user, test_menu, test_staff):
    reservation = await make_reservation(test_db, test_user, test_menu, MONDAY, "15:00", staff=test_staff)

    updated = await service.admin_update(TENANT_ID, reservation.id, {}, ReservationStatus.NO_SHOW)

    assert updated.status == ReservationStatus.NO_SHOW


@pytest.mark.asyncio
async def test_admin_cannot_reactivate_into_a_taken_slot(test_db, service, test_user, test_menu, test_staff):
    cancelled = await make_reservation(
        test_db, test_user, test_menu, MONDAY, "10:00", staff=test_staff, status=ReservationStatus.CANCELLED
    )
    other = await make_user(test_db, "other@example.com")
    await make_reservation(test_db, other, test_menu, MONDAY, "10:00", staff=test_staff)
    cancelled_id, staff_id = cancelled.id, test_staff.id

    with pytest.raises(SlotUnavailableError):
        await service.admin_update(TENANT_ID, cancelled_id, {}, ReservationStatus.CONFIRMED)

    repos = Repositories(test_db)
    assert (await repos.reservations.get(TENANT_ID, cancelled_id)).status == ReservationStatus.CANCELLED
    held = await repos.reservations.find_overlapping(TENANT_ID, MONDAY, (600, 660), staff_id=staff_id)
    assert len(held) == 1


@pytest.mark.asyncio
async def test_admin_reactivates_when_slot_is_free(test_db, service, test_user, test_menu, test_staff):
    cancelled = await make_reservation(
        test_db, test_user, test_menu, MONDAY, "10:00", staff=test_staff, status=ReservationStatus.CANCELLED
    )

    updated = await service.admin_update(TENANT_ID, cancelled.id, {}, ReservationStatus.CONFIRMED)

    assert updated.status == ReservationStatus.CONFIRMED


@pytest.mark.asyncio
async def test_admin_cannot_move_a_closed_reservation(test_db, service, test_user, test_menu, test_staff):
    completed = await make_reservation(
        test_db, test_user, test_menu, MONDAY, "10:00", staff=test_staff, status=ReservationStatus.COMPLETED
    )

    with pytest.raises(InvalidStateError):
        await service.admin_update(TENANT_ID, completed.id, {"reserved_time": "12:00"})


@pytest.mark.asyncio
async def test_concurrent_bookings_for_one_slot(tmp_path):
    """Two customers racing for the same slot: exactly one wins"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
    await create_schema(engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as db:
        db.add(Tenant(id=TENANT_ID, name="Race Salon"))
        await db.flush()
        db.add(TenantSettings(tenant_id=TENANT_ID, open_time="09:00", close_time="20:00", closed_days=[]))
        menu = Menu(tenant_id=TENANT_ID, name="Cut", price=5000, duration=60, is_active=True)
        db.add(menu)
        await db.commit()
        first = await make_user(db, "first@example.com")
        second = await make_user(db, "second@example.com")
        menu_id, user_ids = menu.id, [first.id, second.id]

    async def attempt(user_id):
        async with factory() as db:
            user = await Repositories(db).users.get(TENANT_ID, user_id)
            service = build_service(db, RecordingSender(), FixedClock())
            return await service.create(TENANT_ID, user, menu_id, None, MONDAY, "10:00")

    results = await asyncio.gather(*(attempt(user_id) for user_id in user_ids), return_exceptions=True)

    assert len([r for r in results if isinstance(r, Reservation)]) == 1
    assert len([r for r in results if isinstance(r, SlotUnavailableError)]) == 1

    async with factory() as db:
        count = (await db.execute(select(func.count(Reservation.id)))).scalar()
    assert count == 1

    await engine.dispose()


@pytest.mark.asyncio
async def test_reservation_api_flow(authenticated_client, sender, test_user, test_menu, test_staff):
    """Create, read, list and cancel through the HTTP API"""
    menu_id = str(test_menu.id)

    response = await authenticated_client.post(
        "/reservations",
        json={"menu_id": menu_id, "reserved_date": MONDAY.isoformat(), "reserved_time": "14:00"},
    )
    assert response.status_code == 201
    created = response.json()["data"]
    assert created["status"] == "CONFIRMED"
    assert created["menu"]["name"] == "Cut"
    assert created["staff"]["name"] == "Sato"

    response = await authenticated_client.post(
        "/reservations",
        json={"menu_id": menu_id, "reserved_date": MONDAY.isoformat(), "reserved_time": "14:30"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "SLOT_UNAVAILABLE"

    response = await authenticated_client.get(f"/reservations/{created['id']}")
    assert response.status_code == 200

    response = await authenticated_client.get("/reservations")
    assert [r["id"] for r in response.json()["data"]] == [created["id"]]

    response = await authenticated_client.delete(
        f"/reservations/{created['id']}", params={"reason": "Feeling unwell"}
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "CANCELLED"

    response = await authenticated_client.post(
        "/reservations",
        json={"menu_id": menu_id, "reserved_date": MONDAY.isoformat(), "reserved_time": "14:00"},
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_reservation_api_validation_error(authenticated_client, test_menu):
    response = await authenticated_client.post(
        "/reservations",
        json={"menu_id": str(test_menu.id), "reserved_date": MONDAY.isoformat(), "reserved_time": "9am"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["details"][0]["field"] == "reserved_time"


@pytest.mark.asyncio
async def test_reservations_require_login(client):
    response = await client.get("/reservations")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"
