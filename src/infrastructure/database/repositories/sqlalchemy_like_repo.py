"""SQLAlchemy implementation of Like repository."""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import AlreadyLikedError, PostNotFoundError
from domain.entities.like import Like
from infrastructure.database.errors import is_foreign_key_violation, is_unique_violation
from infrastructure.database.models import LikeModel


class SQLAlchemyLikeRepository:
    """SQLAlchemy implementation of ILikeRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def exists(self, post_id: UUID, user_id: UUID) -> bool:
        """Check whether the user already liked the post."""
        stmt = select(LikeModel.post_id).where(
            LikeModel.post_id == post_id,
            LikeModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def create(self, like: Like) -> Like:
        """Insert a like; the composite primary key rejects duplicates."""
        model = LikeModel(
            post_id=like.post_id,
            user_id=like.user_id,
            created_at=like.created_at,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise AlreadyLikedError(str(like.post_id)) from exc
            if is_foreign_key_violation(exc):
                # Post deleted between the existence check and the insert
                raise PostNotFoundError(str(like.post_id)) from exc
            raise
        return Like(post_id=model.post_id, user_id=model.user_id, created_at=model.created_at)

    async def delete(self, post_id: UUID, user_id: UUID) -> bool:
        """Delete a like if present."""
        result = await self._session.execute(
            delete(LikeModel).where(
                LikeModel.post_id == post_id,
                LikeModel.user_id == user_id,
            )
        )
        return bool(result.rowcount)

    async def count_for_posts(self, post_ids: list[UUID]) -> dict[UUID, int]:
        """Get like counts for multiple posts in a single query."""
        if not post_ids:
            return {}

        stmt = (
            select(LikeModel.post_id, func.count().label("likes_count"))
            .where(LikeModel.post_id.in_(post_ids))
            .group_by(LikeModel.post_id)
        )
        result = await self._session.execute(stmt)
        return {row.post_id: row.likes_count for row in result}

    async def liked_post_ids(self, user_id: UUID, post_ids: list[UUID]) -> set[UUID]:
        """Get the subset of ``post_ids`` the user liked, in a single query."""
        if not post_ids:
            return set()

        stmt = select(LikeModel.post_id).where(
            LikeModel.user_id == user_id,
            LikeModel.post_id.in_(post_ids),
        )
        result = await self._session.execute(stmt)
        return set(result.scalars())
