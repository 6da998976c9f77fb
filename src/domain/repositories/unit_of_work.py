"""Transaction boundary shared by the feed, post and like services."""

from typing import Protocol

from domain.repositories.like_repository import ILikeRepository
from domain.repositories.post_repository import IPostRepository
from domain.repositories.profile_repository import IProfileRepository


class IUnitOfWork(Protocol):
    """One transaction exposing the posts, profiles and likes repositories.

    Leaving the context without ``commit()`` discards every write, and a
    store error raised inside it surfaces as ``StoreFailureError``.
    """

    posts: IPostRepository
    profiles: IProfileRepository
    likes: ILikeRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> "IUnitOfWork": ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        ...
