"""
Availability engine

Computes bookable slots for a date and menu by folding together working
windows (staff shifts or store hours), vacations, blocked times and existing
reservations. Slots are spaced at the menu duration and intervals are
half-open, so back-to-back bookings never conflict.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import List, Optional, Union
from uuid import UUID

import structlog

from app.errors import NotFoundError, SlotUnavailableError
from app.models.menu import Menu
from app.models.staff import DayOfWeek, Staff
from app.repositories.reservations import reservation_interval
from app.services.time_utils import Interval, clip_to_day, overlaps_any, to_hhmm, to_minutes

logger = structlog.get_logger()


@dataclass(frozen=True)
class AssignedStaff:
    """Customer asked for a specific staff member"""
    staff_id: UUID


@dataclass(frozen=True)
class AnyStaff:
    """No preference: any free staff member may take the booking"""


StaffChoice = Union[AssignedStaff, AnyStaff]


@dataclass
class Slot:
    time: str
    available: bool
    staff_id: Optional[UUID] = None  # who would take it; None when unavailable or anonymous


@dataclass
class Calendar:
    """Working windows and busy intervals of one staff member for one day"""
    staff_id: Optional[UUID]
    windows: List[Interval] = field(default_factory=list)
    busy: List[Interval] = field(default_factory=list)

    def can_take(self, interval: Interval) -> bool:
        inside = any(start <= interval[0] and interval[1] <= end for start, end in self.windows)
        return inside and not overlaps_any(interval, self.busy)


def grid(windows: List[Interval], duration: int) -> List[int]:
    """Slot starts stepping by duration from each window start, where the slot fits"""
    starts = set()
    for start, end in windows:
        t = start
        while t + duration <= end:
            starts.add(t)
            t += duration
    return sorted(starts)


class AvailabilityEngine:
    """Derives slot availability from the repositories on every call"""

    def __init__(self, repos, flags):
        self.repos = repos
        self.flags = flags

    async def get_slots(
        self,
        tenant_id: str,
        day: date,
        menu: Menu,
        choice: StaffChoice,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> List[Slot]:
        duration = menu.duration
        calendars = await self._calendars(tenant_id, day, choice, exclude_reservation_id)
        if not calendars:
            return []

        if isinstance(choice, AssignedStaff):
            starts = grid(calendars[0].windows, duration)
        else:
            starts = grid(_envelope(calendars), duration)

        slots = []
        for t in starts:
            interval = (t, t + duration)
            taker = next((c for c in calendars if c.can_take(interval)), None)
            slots.append(Slot(
                time=to_hhmm(t),
                available=taker is not None,
                staff_id=taker.staff_id if taker else None,
            ))
        return slots

    async def resolve_staff(
        self,
        tenant_id: str,
        day: date,
        menu: Menu,
        choice: StaffChoice,
        time: str,
        exclude_reservation_id: Optional[UUID] = None,
    ) -> Optional[UUID]:
        """Staff to book for one slot; None means the anonymous calendar"""
        start = to_minutes(time)
        interval = (start, start + menu.duration)
        calendars = await self._calendars(tenant_id, day, choice, exclude_reservation_id)

        for calendar in calendars:
            if calendar.can_take(interval):
                return calendar.staff_id

        logger.info(
            "Slot unavailable",
            tenant_id=tenant_id,
            date=day.isoformat(),
            time=time,
            menu_id=str(menu.id),
        )
        raise SlotUnavailableError()

    async def _calendars(
        self,
        tenant_id: str,
        day: date,
        choice: StaffChoice,
        exclude_reservation_id: Optional[UUID],
    ) -> List[Calendar]:
        store = await self.repos.settings.get_or_create(tenant_id)
        weekday = DayOfWeek.from_date(day)
        if weekday.value in (store.closed_days or []):
            return []

        if isinstance(choice, AssignedStaff):
            staff = await self.repos.staff.get(tenant_id, choice.staff_id)
            if staff is None or not staff.is_active:
                raise NotFoundError("Staff not found")
            members = [staff]
        else:
            members = await self.repos.staff.list(tenant_id, active_only=True)

        blocked = await self._blocked_intervals(tenant_id, day)
        reservations = await self.repos.reservations.active_on(
            tenant_id, day, exclude_id=exclude_reservation_id
        )
        store_hours = [(to_minutes(store.open_time), to_minutes(store.close_time))]

        if not members:
            # Anonymous calendar when the tenant has no staff at all
            busy = blocked + [reservation_interval(r) for r in reservations if r.staff_id is None]
            return [Calendar(staff_id=None, windows=store_hours, busy=busy)]

        windows = await self._windows(tenant_id, day, weekday, members, store_hours)
        calendars = []
        for member in members:
            busy = blocked + [
                reservation_interval(r) for r in reservations if r.staff_id == member.id
            ]
            calendars.append(Calendar(staff_id=member.id, windows=windows[member.id], busy=busy))
        return calendars

    async def _windows(self, tenant_id, day, weekday, members: List[Staff], store_hours):
        ids = [m.id for m in members]
        if await self.flags.is_enabled(tenant_id, "enable_staff_shift_management"):
            windows = {staff_id: [] for staff_id in ids}
            for shift in await self.repos.shifts.for_weekday(tenant_id, ids, weekday):
                windows[shift.staff_id].append((to_minutes(shift.start_time), to_minutes(shift.end_time)))
        else:
            windows = {staff_id: list(store_hours) for staff_id in ids}

        for vacation in await self.repos.vacations.covering(tenant_id, ids, day):
            windows[vacation.staff_id] = []
        return windows

    async def _blocked_intervals(self, tenant_id: str, day: date) -> List[Interval]:
        day_start = datetime.combine(day, datetime.min.time())
        blocks = await self.repos.blocked_times.overlapping(
            tenant_id, day_start, day_start + timedelta(days=1)
        )
        intervals = []
        for block in blocks:
            clipped = clip_to_day(block.start_datetime, block.end_datetime, day)
            if clipped:
                intervals.append(clipped)
        return intervals


def _envelope(calendars: List[Calendar]) -> List[Interval]:
    """Earliest start to latest end across all working windows"""
    windows = [w for c in calendars for w in c.windows]
    if not windows:
        return []
    return [(min(w[0] for w in windows), max(w[1] for w in windows))]
