"""SQLAlchemy implementation of Post repository."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.post import Post
from infrastructure.database.models import PostModel, ProfileModel


class SQLAlchemyPostRepository:
    """SQLAlchemy implementation of IPostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def _select_with_author(self) -> Any:
        return select(PostModel, ProfileModel.username).outerjoin(
            ProfileModel, ProfileModel.id == PostModel.author_id
        )

    async def get(self, id: UUID) -> Post | None:
        """Get a post by ID."""
        stmt = self._select_with_author().where(PostModel.id == id)
        result = await self._session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        model, username = row
        return self._to_entity(model, username)

    async def list_page(
        self,
        *,
        fetch: int,
        author_id: UUID | None = None,
        search: str | None = None,
        before: datetime | None = None,
    ) -> list[Post]:
        """Get up to ``fetch`` posts ordered newest first (keyset pagination)."""
        stmt = self._select_with_author()

        if author_id is not None:
            stmt = stmt.where(PostModel.author_id == author_id)
        if search:
            # autoescape makes % and _ in the term match literally
            stmt = stmt.where(PostModel.content.icontains(search, autoescape=True))
        if before is not None:
            # Timestamp-only cursor: rows sharing the boundary created_at with the
            # last row of the previous page are not returned again (or at all)
            stmt = stmt.where(PostModel.created_at < before)

        stmt = stmt.order_by(PostModel.created_at.desc(), PostModel.id.desc()).limit(fetch)
        result = await self._session.execute(stmt)
        return [self._to_entity(model, username) for model, username in result.all()]

    async def create(self, post: Post) -> Post:
        """Create a new post."""
        model = self._to_model(post)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model, post.author_username)

    async def update(self, post: Post) -> Post:
        """Update content and updated_at of an existing post."""
        stmt = select(PostModel).where(PostModel.id == post.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Post {post.id} not found")

        model.content = post.content
        model.updated_at = post.updated_at or datetime.utcnow()

        await self._session.flush()
        return self._to_entity(model, post.author_username)

    async def delete(self, id: UUID) -> bool:
        """Delete a post; its likes go with it through ON DELETE CASCADE."""
        result = await self._session.execute(delete(PostModel).where(PostModel.id == id))
        return bool(result.rowcount)

    def _to_entity(self, model: PostModel, author_username: str | None = None) -> Post:
        """Convert ORM model to domain entity."""
        return Post(
            id=model.id,
            author_id=model.author_id,
            content=model.content,
            created_at=model.created_at,
            updated_at=model.updated_at,
            author_username=author_username,
        )

    def _to_model(self, entity: Post) -> PostModel:
        """Convert domain entity to ORM model."""
        return PostModel(
            id=entity.id,
            author_id=entity.author_id,
            content=entity.content,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )
