"""Customer reservation endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.auth import get_current_active_user
from app.api.deps import get_reservation_service, get_tenant_id
from app.models.user import User
from app.schemas.common import ApiResponse, ok
from app.schemas.reservation import ReservationCreate, ReservationUpdate, ReservationResponse
from app.services.reservations import ReservationService

router = APIRouter()


@router.get("", response_model=ApiResponse[List[ReservationResponse]])
async def list_reservations(
    tenant_id: str = Depends(get_tenant_id),
    current_user: User = Depends(get_current_active_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Reservations of the signed-in customer, newest first"""
    return ok(await service.list_for_user(tenant_id, current_user))


@router.post("", response_model=ApiResponse[ReservationResponse], status_code=201)
async def create_reservation(
    reservation_data: ReservationCreate,
    tenant_id: str = Depends(get_tenant_id),
    current_user: User = Depends(get_current_active_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Create a new reservation"""
    reservation = await service.create(
        tenant_id,
        current_user,
        menu_id=reservation_data.menu_id,
        staff_id=reservation_data.staff_id,
        reserved_date=reservation_data.reserved_date,
        reserved_time=reservation_data.reserved_time,
        notes=reservation_data.notes,
    )
    return ok(reservation)


@router.get("/{reservation_id}", response_model=ApiResponse[ReservationResponse])
async def get_reservation(
    reservation_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    current_user: User = Depends(get_current_active_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Get reservation details"""
    return ok(await service.get_for_user(tenant_id, current_user, reservation_id))


@router.patch("/{reservation_id}", response_model=ApiResponse[ReservationResponse])
async def update_reservation(
    reservation_id: UUID,
    reservation_data: ReservationUpdate,
    tenant_id: str = Depends(get_tenant_id),
    current_user: User = Depends(get_current_active_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Update reservation"""
    reservation = await service.update(
        tenant_id,
        current_user,
        reservation_id,
        reservation_data.model_dump(exclude_unset=True),
    )
    return ok(reservation)


@router.delete("/{reservation_id}", response_model=ApiResponse[ReservationResponse])
async def cancel_reservation(
    reservation_id: UUID,
    reason: Optional[str] = Query(None, max_length=500),
    tenant_id: str = Depends(get_tenant_id),
    current_user: User = Depends(get_current_active_user),
    service: ReservationService = Depends(get_reservation_service),
):
    """Cancel a reservation"""
    return ok(await service.cancel(tenant_id, current_user, reservation_id, reason))
