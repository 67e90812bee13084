"""Reservation repository"""

from contextlib import asynccontextmanager
from datetime import date
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, text, exists, update
from sqlalchemy.orm import selectinload

from app.models.reservation import Reservation, ReservationStatus, ACTIVE_STATUSES
from app.models.tenant import TenantSettings
from app.models.user import User
from app.repositories.base import SqlRepository
from app.services.time_utils import Interval, overlaps, to_minutes


def reservation_interval(reservation: Reservation) -> Interval:
    start = to_minutes(reservation.reserved_time)
    return start, start + reservation.menu.duration


class ReservationRepository(SqlRepository):

    @asynccontextmanager
    async def day_lock(self, tenant_id: str, day: date):
        """
        Serialize bookings for one tenant and day until the transaction ends.

        PostgreSQL takes an advisory lock keyed by tenant and day. Elsewhere the
        tenant's settings row is written first, which takes the database write
        lock on SQLite and a row lock on other engines, so the lock is per
        tenant there.
        """
        if self.db.get_bind().dialect.name == "postgresql":
            await self.db.execute(
                text("SELECT pg_advisory_xact_lock(hashtext(:key))"),
                {"key": f"reservation:{tenant_id}:{day.isoformat()}"},
            )
        else:
            await self.db.execute(
                update(TenantSettings)
                .where(TenantSettings.tenant_id == tenant_id)
                .values(updated_at=TenantSettings.updated_at)
                .execution_options(synchronize_session=False)
            )
        yield

    async def get(self, tenant_id: str, reservation_id: UUID) -> Optional[Reservation]:
        result = await self.db.execute(
            select(Reservation).where(
                Reservation.id == reservation_id,
                Reservation.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()

    async def active_on(self, tenant_id: str, day: date, exclude_id: Optional[UUID] = None) -> List[Reservation]:
        """Non-cancelled reservations on a day"""
        query = select(Reservation).where(
            Reservation.tenant_id == tenant_id,
            Reservation.reserved_date == day,
            Reservation.status != ReservationStatus.CANCELLED,
        )
        if exclude_id is not None:
            query = query.where(Reservation.id != exclude_id)
        result = await self.db.execute(query.order_by(Reservation.reserved_time))
        return list(result.scalars().all())

    async def find_overlapping(
        self,
        tenant_id: str,
        day: date,
        interval: Interval,
        staff_id: Optional[UUID] = None,
        user_id: Optional[UUID] = None,
        exclude_id: Optional[UUID] = None,
    ) -> List[Reservation]:
        """Non-cancelled reservations on a day whose [time, time + duration) meets interval"""
        candidates = await self.active_on(tenant_id, day, exclude_id=exclude_id)
        return [
            r for r in candidates
            if (staff_id is None or r.staff_id == staff_id)
            and (user_id is None or r.user_id == user_id)
            and overlaps(reservation_interval(r), interval)
        ]

    async def list_for_user(self, tenant_id: str, user_id: UUID) -> List[Reservation]:
        result = await self.db.execute(
            select(Reservation)
            .where(Reservation.tenant_id == tenant_id, Reservation.user_id == user_id)
            .order_by(Reservation.reserved_date.desc(), Reservation.reserved_time.desc())
        )
        return list(result.scalars().all())

    async def for_users(self, tenant_id: str, user_ids: Iterable[UUID]) -> List[Reservation]:
        user_ids = list(user_ids)
        if not user_ids:
            return []
        result = await self.db.execute(
            select(Reservation).where(
                Reservation.tenant_id == tenant_id,
                Reservation.user_id.in_(user_ids),
            )
        )
        return list(result.scalars().all())

    async def search(
        self,
        tenant_id: str,
        status: Optional[ReservationStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        customer: Optional[str] = None,
        offset: int = 0,
        limit: int = 50,
    ) -> Tuple[List[Reservation], int]:
        """Admin listing with filters, newest first"""
        query = select(Reservation).where(Reservation.tenant_id == tenant_id)
        count_query = select(func.count(Reservation.id)).where(Reservation.tenant_id == tenant_id)

        filters = []
        if status:
            filters.append(Reservation.status == status)
        if date_from:
            filters.append(Reservation.reserved_date >= date_from)
        if date_to:
            filters.append(Reservation.reserved_date <= date_to)
        if customer:
            filters.append(
                exists().where(
                    User.id == Reservation.user_id,
                    User.name.ilike(f"%{customer}%"),
                )
            )
        for condition in filters:
            query = query.where(condition)
            count_query = count_query.where(condition)

        total = (await self.db.execute(count_query)).scalar() or 0

        query = (
            query.options(selectinload(Reservation.user))
            .order_by(Reservation.reserved_date.desc(), Reservation.reserved_time.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def due_for_reminder(self, tenant_id: str, day: date) -> List[Reservation]:
        """Unreminded PENDING/CONFIRMED reservations on a day"""
        result = await self.db.execute(
            select(Reservation)
            .where(
                Reservation.tenant_id == tenant_id,
                Reservation.reserved_date == day,
                Reservation.status.in_(ACTIVE_STATUSES),
                Reservation.reminder_sent.is_(False),
            )
            .order_by(Reservation.reserved_time)
        )
        return list(result.scalars().all())

    async def between(self, tenant_id: str, start: date, end: date) -> List[Reservation]:
        """All reservations with start <= date <= end"""
        result = await self.db.execute(
            select(Reservation).where(
                Reservation.tenant_id == tenant_id,
                Reservation.reserved_date >= start,
                Reservation.reserved_date <= end,
            )
        )
        return list(result.scalars().all())

    async def exists_for_menu(self, menu_id: UUID) -> bool:
        result = await self.db.execute(
            select(func.count(Reservation.id)).where(Reservation.menu_id == menu_id)
        )
        return (result.scalar() or 0) > 0

    async def exists_for_staff(self, staff_id: UUID) -> bool:
        result = await self.db.execute(
            select(func.count(Reservation.id)).where(Reservation.staff_id == staff_id)
        )
        return (result.scalar() or 0) > 0
