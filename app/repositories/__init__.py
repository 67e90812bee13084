"""Repositories over the relational store, one per entity"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.menus import MenuRepository
from app.repositories.staff import StaffRepository, ShiftRepository, VacationRepository
from app.repositories.blocked_times import BlockedTimeRepository
from app.repositories.reservations import ReservationRepository
from app.repositories.tenants import SettingsRepository, FeatureFlagRepository
from app.repositories.users import UserRepository


class Repositories:
    """All repositories sharing one session, plus its transaction boundary"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.menus = MenuRepository(db)
        self.staff = StaffRepository(db)
        self.shifts = ShiftRepository(db)
        self.vacations = VacationRepository(db)
        self.blocked_times = BlockedTimeRepository(db)
        self.reservations = ReservationRepository(db)
        self.settings = SettingsRepository(db)
        self.flags = FeatureFlagRepository(db)
        self.users = UserRepository(db)

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()


__all__ = [
    "Repositories",
    "MenuRepository",
    "StaffRepository",
    "ShiftRepository",
    "VacationRepository",
    "BlockedTimeRepository",
    "ReservationRepository",
    "SettingsRepository",
    "FeatureFlagRepository",
    "UserRepository",
]
