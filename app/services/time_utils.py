"""Time helpers shared by the availability engine and the reservation lifecycle"""

import re
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Tuple
from zoneinfo import ZoneInfo

TIME_PATTERN = re.compile(r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$")

MINUTES_PER_DAY = 24 * 60

Interval = Tuple[int, int]


def is_valid_time(value: str) -> bool:
    return bool(TIME_PATTERN.match(value or ""))


def to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight"""
    if not is_valid_time(value):
        raise ValueError(f"Invalid time format: {value!r}, expected HH:MM")
    hour, minute = value.split(":")
    return int(hour) * 60 + int(minute)


def to_hhmm(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM" """
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise ValueError(f"Minutes out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(a: Interval, b: Interval) -> bool:
    """Half-open interval overlap: 09:00-10:00 and 10:00-11:00 do not overlap"""
    return a[0] < b[1] and b[0] < a[1]


def overlaps_any(interval: Interval, others: Iterable[Interval]) -> bool:
    return any(overlaps(interval, other) for other in others)


def clip_to_day(start: datetime, end: datetime, day: date) -> Optional[Interval]:
    """Clip a datetime range to the given day, as minutes since midnight"""
    day_start = datetime.combine(day, datetime.min.time())
    day_end = day_start + timedelta(days=1)
    if end <= day_start or start >= day_end:
        return None
    lo = max(start, day_start) - day_start
    hi = min(end, day_end) - day_start
    return int(lo.total_seconds() // 60), int(hi.total_seconds() // 60)


class Clock:
    """Wall clock in the tenant's timezone"""

    def __init__(self, timezone: str):
        self.tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        """Tenant-local naive datetime"""
        return datetime.now(self.tz).replace(tzinfo=None)

    def today(self) -> date:
        return self.now().date()

    def tomorrow(self) -> date:
        return self.today() + timedelta(days=1)
