"""Menu repository"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select

from app.models.menu import Menu
from app.repositories.base import SqlRepository


class MenuRepository(SqlRepository):

    async def list(self, tenant_id: str, active_only: bool = True, category: Optional[str] = None) -> List[Menu]:
        query = select(Menu).where(Menu.tenant_id == tenant_id)
        if active_only:
            query = query.where(Menu.is_active.is_(True))
        if category:
            query = query.where(Menu.category == category)
        query = query.order_by(Menu.category, Menu.name)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get(self, tenant_id: str, menu_id: UUID) -> Optional[Menu]:
        result = await self.db.execute(
            select(Menu).where(Menu.id == menu_id, Menu.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()
