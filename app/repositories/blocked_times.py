"""Blocked time slot repository"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select

from app.models.blocked_time import BlockedTimeSlot
from app.repositories.base import SqlRepository


class BlockedTimeRepository(SqlRepository):

    async def overlapping(self, tenant_id: str, start: datetime, end: datetime) -> List[BlockedTimeSlot]:
        """Blocks intersecting [start, end)"""
        result = await self.db.execute(
            select(BlockedTimeSlot).where(
                BlockedTimeSlot.tenant_id == tenant_id,
                BlockedTimeSlot.start_datetime < end,
                BlockedTimeSlot.end_datetime > start,
            )
        )
        return list(result.scalars().all())

    async def list(
        self,
        tenant_id: str,
        from_datetime: Optional[datetime] = None,
        to_datetime: Optional[datetime] = None,
    ) -> List[BlockedTimeSlot]:
        query = select(BlockedTimeSlot).where(BlockedTimeSlot.tenant_id == tenant_id)
        if from_datetime:
            query = query.where(BlockedTimeSlot.end_datetime > from_datetime)
        if to_datetime:
            query = query.where(BlockedTimeSlot.start_datetime < to_datetime)
        result = await self.db.execute(query.order_by(BlockedTimeSlot.start_datetime))
        return list(result.scalars().all())

    async def get(self, tenant_id: str, block_id: UUID) -> Optional[BlockedTimeSlot]:
        result = await self.db.execute(
            select(BlockedTimeSlot).where(
                BlockedTimeSlot.id == block_id,
                BlockedTimeSlot.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()
