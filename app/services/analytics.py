"""Dashboard statistics and reservation analytics"""

from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Any, Dict, List

from app.models.reservation import Reservation, ReservationStatus
from app.services.time_utils import Clock


def month_start(day: date, months_back: int = 0) -> date:
    """First day of the month `months_back` months before day's month"""
    index = day.year * 12 + (day.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)


def next_month(day: date) -> date:
    return month_start(day, -1)


def percentage(part: int, whole: int) -> int:
    return round(part * 100 / whole) if whole else 0


def counted(reservations: List[Reservation]) -> List[Reservation]:
    return [r for r in reservations if r.status != ReservationStatus.CANCELLED]


class AnalyticsService:
    """Aggregations computed over reservation rows"""

    def __init__(self, repos, flags, clock: Clock):
        self.repos = repos
        self.flags = flags
        self.clock = clock

    async def stats(self, tenant_id: str) -> Dict[str, Any]:
        today = self.clock.today()
        first = month_start(today)
        this_month = await self.repos.reservations.between(tenant_id, first, next_month(first) - timedelta(days=1))

        return {
            "today_reservations": sum(
                1 for r in counted(this_month) if r.reserved_date == today
            ),
            "monthly_reservations": len(counted(this_month)),
            "monthly_revenue": sum(
                r.menu.price for r in this_month if r.status == ReservationStatus.COMPLETED
            ),
            "total_customers": await self.repos.users.count_customers(tenant_id),
        }

    async def report(self, tenant_id: str) -> Dict[str, Any]:
        """Daily, weekly and monthly counts plus repeat-customer figures"""
        await self.flags.ensure_enabled(tenant_id, "enable_analytics_report")

        today = self.clock.today()
        history = await self.repos.reservations.between(tenant_id, date.min, today + timedelta(days=366))
        active = counted(history)
        by_date = Counter(r.reserved_date for r in active)

        daily = [
            {"date": d.isoformat(), "count": by_date[d]}
            for d in (today - timedelta(days=offset) for offset in range(29, -1, -1))
        ]

        this_monday = today - timedelta(days=today.weekday())
        weekly = []
        for offset in range(7, -1, -1):
            start = this_monday - timedelta(weeks=offset)
            weekly.append({
                "week_start": start.isoformat(),
                "count": sum(by_date[start + timedelta(days=i)] for i in range(7)),
            })

        monthly = []
        for offset in range(11, -1, -1):
            start = month_start(today, offset)
            end = next_month(start)
            monthly.append({
                "month": start.strftime("%Y-%m"),
                "count": sum(1 for r in active if start <= r.reserved_date < end),
            })

        return {
            "daily": daily,
            "weekly": weekly,
            "monthly": monthly,
            "repeat_rate": self._month_repeat(active, month_start(today)),
            "repeat_trend": [
                self._month_repeat(active, month_start(today, offset))
                for offset in range(5, -1, -1)
            ],
        }

    async def repeat_rate(self, tenant_id: str) -> Dict[str, Any]:
        """Visit-count distribution over COMPLETED reservations"""
        await self.flags.ensure_enabled(tenant_id, "enable_repeat_rate_analysis")

        history = await self.repos.reservations.between(
            tenant_id, date.min, self.clock.today() + timedelta(days=366)
        )
        visits = Counter(r.user_id for r in history if r.status == ReservationStatus.COMPLETED)

        distribution = {"once": 0, "twice": 0, "three_times": 0, "four_or_more": 0}
        for count in visits.values():
            if count == 1:
                distribution["once"] += 1
            elif count == 2:
                distribution["twice"] += 1
            elif count == 3:
                distribution["three_times"] += 1
            else:
                distribution["four_or_more"] += 1

        total = len(visits)
        repeaters = total - distribution["once"]
        return {
            "total_customers": total,
            "repeat_customers": repeaters,
            "repeat_rate": percentage(repeaters, total),
            "distribution": distribution,
        }

    @staticmethod
    def _month_repeat(active: List[Reservation], start: date) -> Dict[str, Any]:
        """Customers of the month split by whether they booked before it"""
        end = next_month(start)
        first_booking: Dict[Any, date] = defaultdict(lambda: date.max)
        for r in active:
            first_booking[r.user_id] = min(first_booking[r.user_id], r.reserved_date)

        customers = {r.user_id for r in active if start <= r.reserved_date < end}
        repeat = sum(1 for user_id in customers if first_booking[user_id] < start)
        return {
            "month": start.strftime("%Y-%m"),
            "total_customers": len(customers),
            "new_customers": len(customers) - repeat,
            "repeat_customers": repeat,
            "repeat_rate": percentage(repeat, len(customers)),
        }
