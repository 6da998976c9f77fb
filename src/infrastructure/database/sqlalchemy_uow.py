"""Session-per-request unit of work over the SQLAlchemy repositories."""

from typing import Any, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.exceptions import StoreFailureError
from infrastructure.database.repositories.sqlalchemy_like_repo import SQLAlchemyLikeRepository
from infrastructure.database.repositories.sqlalchemy_post_repo import SQLAlchemyPostRepository
from infrastructure.database.repositories.sqlalchemy_profile_repo import (
    SQLAlchemyProfileRepository,
)

logger = structlog.get_logger()


class SQLAlchemyUnitOfWork:
    """Unit of Work implementation using SQLAlchemy.

    Each request builds its own unit of work and therefore its own session.
    Database errors escaping the ``async with`` block are rolled back, logged
    and re-raised as ``StoreFailureError`` so no driver detail leaks out.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork not initialized. Use as context manager.")
        return self._session

    @property
    def posts(self) -> SQLAlchemyPostRepository:
        return SQLAlchemyPostRepository(self._require_session())

    @property
    def profiles(self) -> SQLAlchemyProfileRepository:
        return SQLAlchemyProfileRepository(self._require_session())

    @property
    def likes(self) -> SQLAlchemyLikeRepository:
        return SQLAlchemyLikeRepository(self._require_session())

    async def commit(self) -> None:
        if self._session:
            await self._session.commit()

    async def rollback(self) -> None:
        if self._session:
            await self._session.rollback()

    async def __aenter__(self) -> "SQLAlchemyUnitOfWork":
        self._session = self._session_factory()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        """Roll back on error, release the session, and translate store errors."""
        if self._session:
            try:
                if exc_type:
                    await self.rollback()
            finally:
                await self._session.close()
                self._session = None

        if isinstance(exc_val, SQLAlchemyError):
            logger.error(
                "store_failure",
                error=str(exc_val),
                error_type=type(exc_val).__name__,
                exc_info=exc_val,
            )
            raise StoreFailureError() from exc_val
