"""
SelfCare Planner - Database Engine & Sessions
Async SQLAlchemy engine management and the per-request session dependency
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from selfcare.models.database import Base
from selfcare.utils.config import get_settings
from selfcare.utils.logger import get_logger

logger = get_logger(__name__)


# ============================================================================
# DATABASE MANAGER
# ============================================================================


class DatabaseManager:
    """
    Lazily-built async engine plus session factory.

    The engine is created on first use from ``settings.database_async_url``
    unless ``configure()`` was called with an explicit URL.
    """

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None

    def configure(self, database_url: str) -> None:
        """Point the manager at a different database (drops the current engine)"""
        self.database_url = database_url
        self.engine = None
        self.session_factory = None

    def _initialize(self) -> None:
        url = self.database_url or get_settings().database_async_url

        engine_kwargs = {"echo": False}
        if url.startswith("sqlite"):
            engine_kwargs["poolclass"] = NullPool
        else:
            engine_kwargs.update(pool_size=5, max_overflow=15, pool_pre_ping=True, pool_recycle=3600)

        self.engine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info(f"Database engine initialized: {self.engine.url.render_as_string(hide_password=True)}")

    def get_engine(self) -> AsyncEngine:
        if self.engine is None:
            self._initialize()
        return self.engine

    async def create_all(self) -> None:
        """Create all tables that do not exist yet"""
        async with self.get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def dispose(self) -> None:
        """Close all pooled connections"""
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database engine disposed")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session

        Usage:
        async with db_manager.get_session() as session:
            result = await session.execute(query)
        """
        if self.session_factory is None:
            self._initialize()

        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error(f"Session error, rolled back: {e}")
                raise


db_manager = DatabaseManager()


# ============================================================================
# FASTAPI DEPENDENCY FUNCTIONS
# ============================================================================


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session for the current request

    Usage:
    ```python
    @router.get("/endpoint")
    async def endpoint(db: AsyncSession = Depends(get_db_session)):
        result = await db.execute(query)
    ```
    """
    async with db_manager.get_session() as session:
        yield session
