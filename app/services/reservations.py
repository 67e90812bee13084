"""
Reservation lifecycle

Create, update and cancel reservations. Availability is re-derived inside
the same transaction as the write, under a per-tenant-per-day lock, so two
concurrent requests for one slot cannot both succeed.
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog

from app.errors import (
    AppError,
    CancellationDeadlinePassedError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    PastReservationError,
    SlotUnavailableError,
)
from app.models.menu import Menu
from app.models.reservation import Reservation, ReservationStatus, ACTIVE_STATUSES
from app.models.user import User
from app.services.availability import AnyStaff, AssignedStaff, AvailabilityEngine, StaffChoice
from app.services.time_utils import Clock, is_valid_time, to_minutes

logger = structlog.get_logger()

SLOT_FIELDS = ("menu_id", "staff_id", "reserved_date", "reserved_time")


def staff_choice(staff_id: Optional[UUID]) -> StaffChoice:
    return AssignedStaff(staff_id) if staff_id else AnyStaff()


def append_cancellation_reason(notes: Optional[str], reason: Optional[str]) -> Optional[str]:
    if not reason:
        return notes
    line = f"[Cancellation reason] {reason}"
    return f"{notes}\n{line}" if notes else line


class ReservationService:
    """Reservation lifecycle over the repositories"""

    def __init__(self, repos, engine: AvailabilityEngine, flags, notifier, clock: Clock):
        self.repos = repos
        self.engine = engine
        self.flags = flags
        self.notifier = notifier
        self.clock = clock

    # Queries

    async def list_for_user(self, tenant_id: str, user: User) -> List[Reservation]:
        return await self.repos.reservations.list_for_user(tenant_id, user.id)

    async def get_for_user(self, tenant_id: str, user: User, reservation_id: UUID) -> Reservation:
        reservation = await self.repos.reservations.get(tenant_id, reservation_id)
        if reservation is None or reservation.user_id != user.id:
            raise NotFoundError("Reservation not found")
        return reservation

    async def get(self, tenant_id: str, reservation_id: UUID) -> Reservation:
        reservation = await self.repos.reservations.get(tenant_id, reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation not found")
        return reservation

    # Customer operations

    async def create(
        self,
        tenant_id: str,
        user: User,
        menu_id: UUID,
        staff_id: Optional[UUID],
        reserved_date: date,
        reserved_time: str,
        notes: Optional[str] = None,
    ) -> Reservation:
        """Book a slot; status is PENDING when the tenant requires confirmation"""
        choice = staff_choice(staff_id)
        if isinstance(choice, AssignedStaff):
            await self.flags.ensure_enabled(tenant_id, "enable_staff_selection")

        store = await self.repos.settings.get_or_create(tenant_id)
        status = ReservationStatus.PENDING if store.require_confirmation else ReservationStatus.CONFIRMED

        reservation = await self._book(
            tenant_id, user, menu_id, choice, reserved_date, reserved_time, notes, status
        )
        await self.notifier.confirmed(reservation, store.store_name)
        return reservation

    async def update(self, tenant_id: str, user: User, reservation_id: UUID, changes: Dict[str, Any]) -> Reservation:
        """Change menu, staff, date, time or notes of an upcoming reservation"""
        await self.flags.ensure_enabled(tenant_id, "enable_reservation_update")

        reservation = await self.get_for_user(tenant_id, user, reservation_id)
        self._ensure_changeable(reservation)

        if changes.get("staff_id") and changes["staff_id"] != reservation.staff_id:
            await self.flags.ensure_enabled(tenant_id, "enable_staff_selection")

        return await self._reschedule(tenant_id, reservation, changes)

    async def cancel(self, tenant_id: str, user: User, reservation_id: UUID, reason: Optional[str] = None) -> Reservation:
        """Mark an upcoming reservation CANCELLED; the row is kept for history"""
        reservation = await self.get_for_user(tenant_id, user, reservation_id)
        self._ensure_changeable(reservation)

        store = await self.repos.settings.get_or_create(tenant_id)
        starts_at = datetime.combine(
            reservation.reserved_date,
            datetime.min.time(),
        ) + timedelta(minutes=to_minutes(reservation.reserved_time))
        deadline = timedelta(hours=store.cancellation_deadline_hours or 0)
        if starts_at - self.clock.now() < deadline:
            raise CancellationDeadlinePassedError(
                f"Reservations can only be cancelled up to {store.cancellation_deadline_hours} hours in advance"
            )

        reservation.status = ReservationStatus.CANCELLED
        reservation.notes = append_cancellation_reason(reservation.notes, reason)
        await self.repos.commit()

        logger.info("Reservation cancelled", reservation_id=str(reservation.id), tenant_id=tenant_id)
        await self.notifier.cancelled(reservation, store.store_name)
        return reservation

    # Admin operations

    async def admin_create(
        self,
        tenant_id: str,
        customer_id: UUID,
        menu_id: UUID,
        staff_id: Optional[UUID],
        reserved_date: date,
        reserved_time: str,
        notes: Optional[str] = None,
    ) -> Reservation:
        """Manual booking entered by staff; always CONFIRMED"""
        await self.flags.ensure_enabled(tenant_id, "enable_manual_reservation")

        customer = await self.repos.users.get(tenant_id, customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")

        reservation = await self._book(
            tenant_id,
            customer,
            menu_id,
            staff_choice(staff_id),
            reserved_date,
            reserved_time,
            notes,
            ReservationStatus.CONFIRMED,
        )
        store = await self.repos.settings.get_or_create(tenant_id)
        await self.notifier.confirmed(reservation, store.store_name)
        return reservation

    async def admin_update(
        self,
        tenant_id: str,
        reservation_id: UUID,
        changes: Dict[str, Any],
        status: Optional[ReservationStatus] = None,
    ) -> Reservation:
        """Set any status label and optionally move the reservation"""
        reservation = await self.get(tenant_id, reservation_id)

        if changes:
            self._ensure_changeable(reservation)
            reservation = await self._reschedule(tenant_id, reservation, changes, notify=False)

        if status is not None and status != reservation.status:
            previous = reservation.status
            if status in ACTIVE_STATUSES and previous not in ACTIVE_STATUSES:
                await self._reactivate(tenant_id, reservation, status)
            else:
                reservation.status = status
                await self.repos.commit()
            logger.info(
                "Reservation status changed",
                reservation_id=str(reservation.id),
                previous=previous.value,
                status=status.value,
            )
        return reservation

    async def delete(self, tenant_id: str, reservation_id: UUID) -> None:
        reservation = await self.get(tenant_id, reservation_id)
        await self.repos.reservations.delete(reservation)
        await self.repos.commit()
        logger.info("Reservation deleted", reservation_id=str(reservation_id), tenant_id=tenant_id)

    # Internals

    async def _active_menu(self, tenant_id: str, menu_id: UUID) -> Menu:
        menu = await self.repos.menus.get(tenant_id, menu_id)
        if menu is None or not menu.is_active:
            raise NotFoundError("Menu not found")
        return menu

    def _validate_slot(self, reserved_date: date, reserved_time: str) -> None:
        if reserved_date < self.clock.today():
            raise InvalidInputError(
                "Reservation date must be today or later",
                details=[{"field": "reserved_date", "message": "must be today or later"}],
            )
        if not is_valid_time(reserved_time):
            raise InvalidInputError(
                "Time must be in HH:MM format",
                details=[{"field": "reserved_time", "message": "must match HH:MM"}],
            )

    def _ensure_changeable(self, reservation: Reservation) -> None:
        if reservation.status not in ACTIVE_STATUSES:
            raise InvalidStateError(
                f"Reservations with status {reservation.status.value} cannot be changed"
            )
        if reservation.reserved_date < self.clock.today():
            raise PastReservationError()

    async def _claim_slot(
        self,
        tenant_id: str,
        user_id: UUID,
        menu: Menu,
        choice: StaffChoice,
        reserved_date: date,
        reserved_time: str,
        exclude_id: Optional[UUID] = None,
    ) -> Optional[UUID]:
        """Re-check the slot for the staff and the customer; must run under day_lock"""
        staff_id = await self.engine.resolve_staff(
            tenant_id, reserved_date, menu, choice, reserved_time, exclude_reservation_id=exclude_id
        )
        start = to_minutes(reserved_time)
        own = await self.repos.reservations.find_overlapping(
            tenant_id,
            reserved_date,
            (start, start + menu.duration),
            user_id=user_id,
            exclude_id=exclude_id,
        )
        if own:
            raise SlotUnavailableError("You already have a reservation at this time")
        return staff_id

    async def _reactivate(self, tenant_id: str, reservation: Reservation, status: ReservationStatus) -> None:
        """Put a closed reservation back on the calendar if its slot is still free"""
        try:
            async with self.repos.reservations.day_lock(tenant_id, reservation.reserved_date):
                staff_id = await self._claim_slot(
                    tenant_id,
                    reservation.user_id,
                    reservation.menu,
                    staff_choice(reservation.staff_id),
                    reservation.reserved_date,
                    reservation.reserved_time,
                    exclude_id=reservation.id,
                )
                if reservation.staff_id is None and staff_id is not None:
                    reservation.staff_id = staff_id
                    reservation.staff = await self.repos.staff.get(tenant_id, staff_id)
                reservation.status = status
                await self.repos.commit()
        except AppError:
            await self.repos.rollback()
            raise

    async def _book(
        self,
        tenant_id: str,
        user: User,
        menu_id: UUID,
        choice: StaffChoice,
        reserved_date: date,
        reserved_time: str,
        notes: Optional[str],
        status: ReservationStatus,
    ) -> Reservation:
        menu = await self._active_menu(tenant_id, menu_id)
        self._validate_slot(reserved_date, reserved_time)

        try:
            async with self.repos.reservations.day_lock(tenant_id, reserved_date):
                staff_id = await self._claim_slot(
                    tenant_id, user.id, menu, choice, reserved_date, reserved_time
                )
                staff = await self.repos.staff.get(tenant_id, staff_id) if staff_id else None
                reservation = Reservation(
                    tenant_id=tenant_id,
                    user_id=user.id,
                    user=user,
                    menu_id=menu.id,
                    menu=menu,
                    staff_id=staff_id,
                    staff=staff,
                    reserved_date=reserved_date,
                    reserved_time=reserved_time,
                    status=status,
                    notes=notes,
                    reminder_sent=False,
                )
                self.repos.reservations.add(reservation)
                await self.repos.commit()
        except AppError:
            await self.repos.rollback()
            raise

        logger.info(
            "Reservation created",
            reservation_id=str(reservation.id),
            tenant_id=tenant_id,
            staff_id=str(staff_id) if staff_id else None,
            date=reserved_date.isoformat(),
            time=reserved_time,
            status=status.value,
        )
        return reservation

    async def _reschedule(
        self,
        tenant_id: str,
        reservation: Reservation,
        changes: Dict[str, Any],
        notify: bool = True,
    ) -> Reservation:
        previous_date = reservation.reserved_date.isoformat()
        previous_time = reservation.reserved_time
        slot_changed = any(
            field in changes and changes[field] != getattr(reservation, field)
            for field in SLOT_FIELDS
        )

        if slot_changed:
            menu = await self._active_menu(tenant_id, changes.get("menu_id", reservation.menu_id))
            staff_id = changes["staff_id"] if "staff_id" in changes else reservation.staff_id
            reserved_date = changes.get("reserved_date", reservation.reserved_date)
            reserved_time = changes.get("reserved_time", reservation.reserved_time)
            self._validate_slot(reserved_date, reserved_time)

            try:
                async with self.repos.reservations.day_lock(tenant_id, reserved_date):
                    resolved = await self._claim_slot(
                        tenant_id,
                        reservation.user_id,
                        menu,
                        staff_choice(staff_id),
                        reserved_date,
                        reserved_time,
                        exclude_id=reservation.id,
                    )
                    reservation.menu_id = menu.id
                    reservation.menu = menu
                    reservation.staff_id = resolved
                    reservation.staff = await self.repos.staff.get(tenant_id, resolved) if resolved else None
                    reservation.reserved_date = reserved_date
                    reservation.reserved_time = reserved_time
                    if "notes" in changes:
                        reservation.notes = changes["notes"]
                    await self.repos.commit()
            except AppError:
                await self.repos.rollback()
                raise
        elif "notes" in changes:
            reservation.notes = changes["notes"]
            await self.repos.commit()

        logger.info("Reservation updated", reservation_id=str(reservation.id), slot_changed=slot_changed)

        if notify:
            store = await self.repos.settings.get_or_create(tenant_id)
            await self.notifier.updated(reservation, store.store_name, previous_date, previous_time)
        return reservation
