"""Customer management for the admin console"""

from collections import defaultdict
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog

from app.errors import InvalidInputError, NotFoundError
from app.models.reservation import Reservation, ReservationStatus
from app.models.user import User

logger = structlog.get_logger()

SORT_KEYS = ("visit_count", "last_visit_date", "created_at")

# Missing values sort below every real one
SORT_FLOOR = {"visit_count": 0, "last_visit_date": date.min, "created_at": datetime.min}


def _summary(user: User, reservations: List[Reservation]) -> Dict[str, Any]:
    visits = [r for r in reservations if r.status == ReservationStatus.COMPLETED]
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "visit_count": len(visits),
        "last_visit_date": max((r.reserved_date for r in visits), default=None),
        "created_at": user.created_at,
    }


def _history_item(reservation: Reservation) -> Dict[str, Any]:
    return {
        "id": reservation.id,
        "reserved_date": reservation.reserved_date,
        "reserved_time": reservation.reserved_time,
        "status": reservation.status,
        "menu_name": reservation.menu.name,
        "price": reservation.menu.price,
        "staff_name": reservation.staff.name if reservation.staff else None,
        "notes": reservation.notes,
    }


class CustomerService:

    def __init__(self, repos, flags):
        self.repos = repos
        self.flags = flags

    async def list(
        self,
        tenant_id: str,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        await self.flags.ensure_enabled(tenant_id, "enable_customer_management")
        if sort_by not in SORT_KEYS:
            raise InvalidInputError(
                "Invalid sort key",
                details=[{"field": "sort_by", "message": f"must be one of {', '.join(SORT_KEYS)}"}],
            )

        users = await self.repos.users.customers(tenant_id, search=search)
        by_user = defaultdict(list)
        for reservation in await self.repos.reservations.for_users(tenant_id, [u.id for u in users]):
            by_user[reservation.user_id].append(reservation)

        rows = [_summary(user, by_user[user.id]) for user in users]
        rows.sort(
            key=lambda row: row[sort_by] if row[sort_by] is not None else SORT_FLOOR[sort_by],
            reverse=descending,
        )
        return rows

    async def detail(self, tenant_id: str, customer_id: UUID) -> Dict[str, Any]:
        await self.flags.ensure_enabled(tenant_id, "enable_customer_management")
        user = await self._customer(tenant_id, customer_id)

        reservations = await self.repos.reservations.list_for_user(tenant_id, user.id)
        data = _summary(user, reservations)
        data["memo"] = user.memo
        data["visit_history"] = [
            _history_item(r) for r in reservations if r.status == ReservationStatus.COMPLETED
        ]
        data["reservation_history"] = [_history_item(r) for r in reservations]
        return data

    async def update_profile(self, tenant_id: str, customer_id: UUID, changes: Dict[str, Any]) -> Dict[str, Any]:
        await self.flags.ensure_enabled(tenant_id, "enable_customer_management")
        user = await self._customer(tenant_id, customer_id)
        for field, value in changes.items():
            setattr(user, field, value)
        await self.repos.commit()
        logger.info("Customer updated", customer_id=str(customer_id), fields=list(changes))
        return await self.detail(tenant_id, customer_id)

    async def update_memo(self, tenant_id: str, customer_id: UUID, memo: Optional[str]) -> Dict[str, Any]:
        await self.flags.ensure_enabled(tenant_id, "enable_customer_management")
        user = await self._customer(tenant_id, customer_id)
        user.memo = memo
        await self.repos.commit()
        return {"id": user.id, "memo": user.memo}

    async def _customer(self, tenant_id: str, customer_id: UUID) -> User:
        user = await self.repos.users.get(tenant_id, customer_id)
        if user is None:
            raise NotFoundError("Customer not found")
        return user
