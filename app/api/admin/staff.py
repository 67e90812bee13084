"""Admin staff, shift and vacation management"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
import structlog

from app.api.deps import get_clock, get_flag_service, get_repositories, get_tenant_id
from app.errors import DuplicateRecordError, InvalidDateRangeError, InvalidTimeRangeError, NotFoundError
from app.models.staff import Staff, StaffShift, StaffVacation
from app.repositories import Repositories
from app.schemas.common import ApiResponse, ok
from app.schemas.staff import (
    StaffCreate,
    StaffUpdate,
    StaffResponse,
    ShiftReplaceRequest,
    ShiftResponse,
    VacationCreate,
    VacationResponse,
)
from app.services.feature_flags import FeatureFlagService
from app.services.time_utils import Clock, to_minutes

logger = structlog.get_logger()

router = APIRouter()


async def _get_staff(repos: Repositories, tenant_id: str, staff_id: UUID) -> Staff:
    staff = await repos.staff.get(tenant_id, staff_id)
    if staff is None:
        raise NotFoundError("Staff not found")
    return staff


@router.get("", response_model=ApiResponse[List[StaffResponse]])
async def list_staff(
    include_inactive: bool = True,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    return ok(await repos.staff.list(tenant_id, active_only=not include_inactive))


@router.post("", response_model=ApiResponse[StaffResponse], status_code=201)
async def create_staff(
    staff_data: StaffCreate,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    """Create a staff member; email must be unique within the tenant"""
    if await repos.staff.get_by_email(tenant_id, staff_data.email):
        raise DuplicateRecordError("A staff member with this email already exists")

    staff = repos.staff.add(Staff(tenant_id=tenant_id, **staff_data.model_dump()))
    await repos.commit()
    logger.info("Staff created", staff_id=str(staff.id))
    return ok(staff)


@router.get("/{staff_id}", response_model=ApiResponse[StaffResponse])
async def get_staff(
    staff_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    return ok(await _get_staff(repos, tenant_id, staff_id))


@router.patch("/{staff_id}", response_model=ApiResponse[StaffResponse])
async def update_staff(
    staff_id: UUID,
    staff_data: StaffUpdate,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    staff = await _get_staff(repos, tenant_id, staff_id)
    changes = staff_data.model_dump(exclude_unset=True)

    if "email" in changes and changes["email"] != staff.email:
        if await repos.staff.get_by_email(tenant_id, changes["email"]):
            raise DuplicateRecordError("A staff member with this email already exists")

    for field, value in changes.items():
        setattr(staff, field, value)

    await repos.commit()
    return ok(staff)


@router.delete("/{staff_id}", response_model=ApiResponse[dict])
async def delete_staff(
    staff_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    """Delete a staff member; staff referenced by reservations are deactivated instead"""
    staff = await _get_staff(repos, tenant_id, staff_id)

    if await repos.reservations.exists_for_staff(staff.id):
        staff.is_active = False
        deleted = False
    else:
        await repos.staff.delete(staff)
        deleted = True

    await repos.commit()
    logger.info("Staff removed", staff_id=str(staff_id), hard_delete=deleted)
    return ok({"id": str(staff_id), "deleted": deleted, "deactivated": not deleted})


# Shifts

@router.get("/{staff_id}/shifts", response_model=ApiResponse[List[ShiftResponse]])
async def list_shifts(
    staff_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
    flags: FeatureFlagService = Depends(get_flag_service),
):
    await flags.ensure_enabled(tenant_id, "enable_staff_shift_management")
    await _get_staff(repos, tenant_id, staff_id)
    return ok(await repos.shifts.for_staff(tenant_id, staff_id))


@router.put("/{staff_id}/shifts", response_model=ApiResponse[List[ShiftResponse]])
async def replace_shifts(
    staff_id: UUID,
    data: ShiftReplaceRequest,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
    flags: FeatureFlagService = Depends(get_flag_service),
):
    """Replace the weekly schedule of a staff member"""
    await flags.ensure_enabled(tenant_id, "enable_staff_shift_management")
    await _get_staff(repos, tenant_id, staff_id)

    for index, shift in enumerate(data.shifts):
        if to_minutes(shift.start_time) >= to_minutes(shift.end_time):
            raise InvalidTimeRangeError(
                details=[{"field": f"shifts.{index}", "message": "start_time must be before end_time"}]
            )

    shifts = [
        StaffShift(tenant_id=tenant_id, staff_id=staff_id, **shift.model_dump())
        for shift in data.shifts
    ]
    await repos.shifts.replace(tenant_id, staff_id, shifts)
    await repos.commit()

    logger.info("Shifts replaced", staff_id=str(staff_id), count=len(shifts))
    return ok(shifts)


# Vacations

@router.get("/{staff_id}/vacations", response_model=ApiResponse[List[VacationResponse]])
async def list_vacations(
    staff_id: UUID,
    include_past: bool = False,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
    clock: Clock = Depends(get_clock),
):
    """Upcoming vacations, or every vacation with include_past"""
    await _get_staff(repos, tenant_id, staff_id)
    from_date = None if include_past else clock.today()
    return ok(await repos.vacations.for_staff(tenant_id, staff_id, from_date))


@router.post("/{staff_id}/vacations", response_model=ApiResponse[VacationResponse], status_code=201)
async def create_vacation(
    staff_id: UUID,
    data: VacationCreate,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    await _get_staff(repos, tenant_id, staff_id)
    if data.start_date > data.end_date:
        raise InvalidDateRangeError()

    vacation = repos.vacations.add(
        StaffVacation(tenant_id=tenant_id, staff_id=staff_id, **data.model_dump())
    )
    await repos.commit()
    logger.info("Vacation created", staff_id=str(staff_id), vacation_id=str(vacation.id))
    return ok(vacation)


@router.delete("/{staff_id}/vacations/{vacation_id}", response_model=ApiResponse[dict])
async def delete_vacation(
    staff_id: UUID,
    vacation_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    vacation = await repos.vacations.get(tenant_id, vacation_id)
    if vacation is None or vacation.staff_id != staff_id:
        raise NotFoundError("Vacation not found")

    await repos.vacations.delete(vacation)
    await repos.commit()
    return ok({"id": str(vacation_id), "deleted": True})
