"""Shared base for SQLAlchemy-backed repositories"""

from sqlalchemy.ext.asyncio import AsyncSession


class SqlRepository:
    """Repository bound to one request-scoped session"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def add(self, obj):
        self.db.add(obj)
        return obj

    async def delete(self, obj) -> None:
        await self.db.delete(obj)

    async def flush(self) -> None:
        await self.db.flush()
