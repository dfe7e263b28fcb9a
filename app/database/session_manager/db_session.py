"""
Async database session manager following kkb_fastapi pattern.
"""
import logging
from typing import Any

from sqlalchemy.engine.url import URL
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.database.session_manager.exceptions import DatabaseNotInitialized

logger = logging.getLogger(__name__)


class Database:
    """
    Process-wide session factory used as an async context manager.

    Example:
        >>> Database.init(url)
        >>> async with Database() as session:
        ...     await session.execute(stmt)
    """

    _async_session_maker: sessionmaker | None = None

    @classmethod
    def init(cls, async_db_url: URL | str, engine_kw: dict[str, Any] | None = None):
        """
        Create the engine and session maker.

        Args:
            async_db_url: Async database URL
            engine_kw: Extra keyword arguments for create_async_engine
        """
        engine = create_async_engine(async_db_url, **(engine_kw or {}))
        cls._async_session_maker = sessionmaker(
            bind=engine, expire_on_commit=False, class_=AsyncSession
        )
        logger.info("Database session maker initialized")

    def __init__(self):
        if self._async_session_maker is None:
            raise DatabaseNotInitialized("Call Database.init() before opening sessions")
        self.session: AsyncSession = self._async_session_maker()

    async def __aenter__(self) -> AsyncSession:
        return self.session

    async def __aexit__(self, exc_type, exc_value, traceback):
        if exc_type is not None:
            await self.session.rollback()
        await self.session.close()
