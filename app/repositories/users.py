"""User repository"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func, or_

from app.models.user import User, UserRole
from app.repositories.base import SqlRepository


class UserRepository(SqlRepository):

    async def get(self, tenant_id: str, user_id: UUID) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_by_auth_id(self, tenant_id: str, auth_id: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.auth_id == auth_id, User.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, tenant_id: str, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == email, User.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def customers(self, tenant_id: str, search: Optional[str] = None) -> List[User]:
        query = select(User).where(User.tenant_id == tenant_id, User.role == UserRole.CUSTOMER)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        result = await self.db.execute(query.order_by(User.created_at.desc()))
        return list(result.scalars().all())

    async def count_customers(self, tenant_id: str) -> int:
        result = await self.db.execute(
            select(func.count(User.id)).where(User.tenant_id == tenant_id, User.role == UserRole.CUSTOMER)
        )
        return result.scalar() or 0
