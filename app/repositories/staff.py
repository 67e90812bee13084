"""Staff, shift and vacation repositories"""

from datetime import date
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select, delete

from app.models.staff import Staff, StaffShift, StaffVacation, DayOfWeek
from app.repositories.base import SqlRepository


class StaffRepository(SqlRepository):

    async def list(self, tenant_id: str, active_only: bool = True) -> List[Staff]:
        query = select(Staff).where(Staff.tenant_id == tenant_id)
        if active_only:
            query = query.where(Staff.is_active.is_(True))
        result = await self.db.execute(query.order_by(Staff.created_at, Staff.name))
        return list(result.scalars().all())

    async def get(self, tenant_id: str, staff_id: UUID) -> Optional[Staff]:
        result = await self.db.execute(
            select(Staff).where(Staff.id == staff_id, Staff.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, tenant_id: str, email: str) -> Optional[Staff]:
        result = await self.db.execute(
            select(Staff).where(Staff.tenant_id == tenant_id, Staff.email == email)
        )
        return result.scalar_one_or_none()


class ShiftRepository(SqlRepository):

    async def for_weekday(self, tenant_id: str, staff_ids: Iterable[UUID], day_of_week: DayOfWeek) -> List[StaffShift]:
        """Active shifts of the given staff on one weekday"""
        staff_ids = list(staff_ids)
        if not staff_ids:
            return []
        result = await self.db.execute(
            select(StaffShift)
            .where(
                StaffShift.tenant_id == tenant_id,
                StaffShift.staff_id.in_(staff_ids),
                StaffShift.day_of_week == day_of_week,
                StaffShift.is_active.is_(True),
            )
            .order_by(StaffShift.start_time)
        )
        return list(result.scalars().all())

    async def for_staff(self, tenant_id: str, staff_id: UUID) -> List[StaffShift]:
        result = await self.db.execute(
            select(StaffShift)
            .where(StaffShift.tenant_id == tenant_id, StaffShift.staff_id == staff_id)
            .order_by(StaffShift.day_of_week, StaffShift.start_time)
        )
        return list(result.scalars().all())

    async def replace(self, tenant_id: str, staff_id: UUID, shifts: List[StaffShift]) -> List[StaffShift]:
        """Replace every shift of a staff member"""
        await self.db.execute(
            delete(StaffShift).where(
                StaffShift.tenant_id == tenant_id,
                StaffShift.staff_id == staff_id,
            )
        )
        self.db.add_all(shifts)
        return shifts


class VacationRepository(SqlRepository):

    async def covering(self, tenant_id: str, staff_ids: Iterable[UUID], day: date) -> List[StaffVacation]:
        """Vacations of the given staff that include the day"""
        staff_ids = list(staff_ids)
        if not staff_ids:
            return []
        result = await self.db.execute(
            select(StaffVacation).where(
                StaffVacation.tenant_id == tenant_id,
                StaffVacation.staff_id.in_(staff_ids),
                StaffVacation.start_date <= day,
                StaffVacation.end_date >= day,
            )
        )
        return list(result.scalars().all())

    async def for_staff(self, tenant_id: str, staff_id: UUID, from_date: Optional[date] = None) -> List[StaffVacation]:
        query = select(StaffVacation).where(
            StaffVacation.tenant_id == tenant_id,
            StaffVacation.staff_id == staff_id,
        )
        if from_date:
            query = query.where(StaffVacation.end_date >= from_date)
        result = await self.db.execute(query.order_by(StaffVacation.start_date))
        return list(result.scalars().all())

    async def get(self, tenant_id: str, vacation_id: UUID) -> Optional[StaffVacation]:
        result = await self.db.execute(
            select(StaffVacation).where(
                StaffVacation.id == vacation_id,
                StaffVacation.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()
