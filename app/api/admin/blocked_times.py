"""Admin blocked time slots"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
import structlog

from app.api.deps import get_repositories, get_tenant_id
from app.errors import InvalidTimeRangeError, NotFoundError
from app.models.blocked_time import BlockedTimeSlot
from app.repositories import Repositories
from app.schemas.blocked_time import BlockedTimeCreate, BlockedTimeUpdate, BlockedTimeResponse
from app.schemas.common import ApiResponse, ok

logger = structlog.get_logger()

router = APIRouter()


async def _get_block(repos: Repositories, tenant_id: str, block_id: UUID) -> BlockedTimeSlot:
    block = await repos.blocked_times.get(tenant_id, block_id)
    if block is None:
        raise NotFoundError("Blocked time not found")
    return block


@router.get("", response_model=ApiResponse[List[BlockedTimeResponse]])
async def list_blocked_times(
    from_datetime: Optional[datetime] = Query(None, alias="from"),
    to_datetime: Optional[datetime] = Query(None, alias="to"),
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    """Blocks intersecting [from, to)"""
    return ok(await repos.blocked_times.list(tenant_id, from_datetime, to_datetime))


@router.post("", response_model=ApiResponse[BlockedTimeResponse], status_code=201)
async def create_blocked_time(
    data: BlockedTimeCreate,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    if data.end_datetime <= data.start_datetime:
        raise InvalidTimeRangeError("End time must be after start time")

    block = repos.blocked_times.add(BlockedTimeSlot(tenant_id=tenant_id, **data.model_dump()))
    await repos.commit()
    logger.info("Blocked time created", block_id=str(block.id))
    return ok(block)


@router.get("/{block_id}", response_model=ApiResponse[BlockedTimeResponse])
async def get_blocked_time(
    block_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    return ok(await _get_block(repos, tenant_id, block_id))


@router.patch("/{block_id}", response_model=ApiResponse[BlockedTimeResponse])
async def update_blocked_time(
    block_id: UUID,
    data: BlockedTimeUpdate,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    block = await _get_block(repos, tenant_id, block_id)
    changes = data.model_dump(exclude_unset=True)

    start = changes.get("start_datetime", block.start_datetime)
    end = changes.get("end_datetime", block.end_datetime)
    if end <= start:
        raise InvalidTimeRangeError("End time must be after start time")

    for field, value in changes.items():
        setattr(block, field, value)

    await repos.commit()
    return ok(block)


@router.delete("/{block_id}", response_model=ApiResponse[dict])
async def delete_blocked_time(
    block_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    repos: Repositories = Depends(get_repositories),
):
    block = await _get_block(repos, tenant_id, block_id)
    await repos.blocked_times.delete(block)
    await repos.commit()
    return ok({"id": str(block_id), "deleted": True})
