"""Admin reservation management"""

from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_clock, get_repositories, get_reservation_service, get_tenant_id
from app.models.reservation import ReservationStatus
from app.repositories import Repositories
from app.schemas.common import ApiResponse, Page, ok
from app.schemas.reservation import (
    AdminReservationCreate,
    AdminReservationUpdate,
    AdminReservationResponse,
)
from app.services.analytics import month_start, next_month
from app.services.reservations import ReservationService
from app.services.time_utils import Clock

router = APIRouter()


def date_range_bounds(date_range: Optional[str], today: date):
    """(from, to) for the "today", "this-week" (Monday start) and "this-month" shortcuts"""
    if date_range == "today":
        return today, today
    if date_range == "this-week":
        monday = today - timedelta(days=today.weekday())
        return monday, monday + timedelta(days=6)
    if date_range == "this-month":
        first = month_start(today)
        return first, next_month(first) - timedelta(days=1)
    return None, None


@router.get("", response_model=ApiResponse[Page[AdminReservationResponse]])
async def list_reservations(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[ReservationStatus] = None,
    date_range: Optional[str] = Query(None, pattern="^(today|this-week|this-month)$"),
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    search: Optional[str] = None,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
    clock: Clock = Depends(get_clock),
):
    """List reservations with filters and pagination"""
    if date_range:
        date_from, date_to = date_range_bounds(date_range, clock.today())

    items, total = await repos.reservations.search(
        tenant_id,
        status=status,
        date_from=date_from,
        date_to=date_to,
        customer=search,
        offset=(page - 1) * page_size,
        limit=page_size,
    )
    return ok({"items": items, "total": total, "page": page, "page_size": page_size})


@router.post("", response_model=ApiResponse[AdminReservationResponse], status_code=201)
async def create_reservation(
    data: AdminReservationCreate,
    tenant_id: str = Depends(get_tenant_id),
    service: ReservationService = Depends(get_reservation_service),
):
    """Manual reservation on behalf of a customer"""
    reservation = await service.admin_create(
        tenant_id,
        customer_id=data.customer_id,
        menu_id=data.menu_id,
        staff_id=data.staff_id,
        reserved_date=data.reserved_date,
        reserved_time=data.reserved_time,
        notes=data.notes,
    )
    return ok(reservation)


@router.get("/{reservation_id}", response_model=ApiResponse[AdminReservationResponse])
async def get_reservation(
    reservation_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    service: ReservationService = Depends(get_reservation_service),
):
    return ok(await service.get(tenant_id, reservation_id))


@router.patch("/{reservation_id}", response_model=ApiResponse[AdminReservationResponse])
async def update_reservation(
    reservation_id: UUID,
    data: AdminReservationUpdate,
    tenant_id: str = Depends(get_tenant_id),
    service: ReservationService = Depends(get_reservation_service),
):
    """Change status (COMPLETED, NO_SHOW, ...) and/or move the reservation"""
    changes = data.model_dump(exclude_unset=True)
    status = changes.pop("status", None)
    reservation = await service.admin_update(tenant_id, reservation_id, changes, status=status)
    return ok(reservation)


@router.delete("/{reservation_id}", response_model=ApiResponse[dict])
async def delete_reservation(
    reservation_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    service: ReservationService = Depends(get_reservation_service),
):
    await service.delete(tenant_id, reservation_id)
    return ok({"id": str(reservation_id), "deleted": True})
