"""Available time slots"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_availability_engine, get_flag_service, get_repositories, get_tenant_id
from app.errors import NotFoundError
from app.repositories import Repositories
from app.schemas.common import ApiResponse, ok
from app.schemas.reservation import AvailabilityResponse, AvailabilitySlot
from app.services.availability import AvailabilityEngine
from app.services.feature_flags import FeatureFlagService
from app.services.reservations import staff_choice

router = APIRouter()


@router.get("/available-slots", response_model=ApiResponse[AvailabilityResponse])
async def get_available_slots(
    reserved_date: date = Query(..., alias="date"),
    menu_id: UUID = Query(...),
    staff_id: Optional[UUID] = None,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
    engine: AvailabilityEngine = Depends(get_availability_engine),
    flags: FeatureFlagService = Depends(get_flag_service),
):
    """Slots for a date and menu, optionally for one staff member"""
    menu = await repos.menus.get(tenant_id, menu_id)
    if menu is None or not menu.is_active:
        raise NotFoundError("Menu not found")

    if staff_id:
        await flags.ensure_enabled(tenant_id, "enable_staff_selection")

    slots = await engine.get_slots(tenant_id, reserved_date, menu, staff_choice(staff_id))
    return ok(
        AvailabilityResponse(
            reserved_date=reserved_date,
            menu_id=menu.id,
            staff_id=staff_id,
            duration=menu.duration,
            slots=[AvailabilitySlot.model_validate(s) for s in slots],
        )
    )
