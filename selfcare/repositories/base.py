"""
SelfCare Planner Database Repository Pattern
Data access layer shared base
"""

from abc import ABC
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.utils.logger import get_logger

logger = get_logger(__name__)


class BaseRepository(ABC):
    """Base repository with common database operations"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def execute(self, query: str, params: Optional[Dict[str, Any]] = None):
        """Execute raw SQL query with parameters"""
        return await self.db.execute(text(query), params or {})

    async def ping(self) -> bool:
        """Round-trip a trivial query to check connectivity"""
        result = await self.execute("SELECT 1")
        return result.scalar() == 1

    def add(self, instance) -> None:
        self.db.add(instance)

    async def delete(self, instance) -> None:
        await self.db.delete(instance)

    async def flush(self):
        """Flush pending changes without committing"""
        await self.db.flush()

    async def refresh(self, instance) -> None:
        await self.db.refresh(instance)

    async def commit(self):
        """Commit transaction"""
        await self.db.commit()

    async def rollback(self):
        """Rollback transaction"""
        await self.db.rollback()
