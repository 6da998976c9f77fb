"""Helpers for seeding the test database directly."""

from datetime import datetime, timedelta
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.models import PostModel, ProfileModel


async def seed_posts(
    session_factory: async_sessionmaker[AsyncSession],
    author_id: UUID,
    count: int,
    username: str = "seeded",
    start: datetime | None = None,
) -> list[UUID]:
    """Insert ``count`` posts one second apart, oldest first; return their ids."""
    start = start or datetime(2026, 1, 1, 9, 0, 0)
    ids = [uuid4() for _ in range(count)]
    async with session_factory() as session:
        if await session.get(ProfileModel, author_id) is None:
            session.add(ProfileModel(id=author_id, username=username))
            # Posts reference the profile; it has to be inserted first
            await session.flush()
        for i, post_id in enumerate(ids):
            created = start + timedelta(seconds=i)
            session.add(
                PostModel(
                    id=post_id,
                    author_id=author_id,
                    content=f"seeded post {i}",
                    created_at=created,
                    updated_at=created,
                )
            )
        await session.commit()
    return ids
