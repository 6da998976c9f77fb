"""Create, edit and delete posts, then resync the feed."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from client.api import ApiError, MicroFeedClient
from client.models import FeedPost
from client.state import FeedStore

T = TypeVar("T")

MUTATION_FAILED_MESSAGE = "Failed to save changes"


class MutationInProgressError(RuntimeError):
    """Raised when a mutation is started while another is running."""


class PostMutations:
    """Post mutations sharing one ``is_mutating`` flag.

    Every successful mutation is followed by a full ``FeedStore.refresh()``.
    Failures are recorded on the store and re-raised to the caller.
    """

    def __init__(self, client: MicroFeedClient, store: FeedStore) -> None:
        self._client = client
        self._store = store
        self.is_mutating = False

    async def create(self, content: str) -> FeedPost:
        return await self._run(lambda: self._client.create_post(content))

    async def update(self, post_id: str, content: str) -> FeedPost:
        return await self._run(lambda: self._client.update_post(post_id, content))

    async def delete(self, post_id: str) -> None:
        await self._run(lambda: self._client.delete_post(post_id))

    async def _run(self, call: Callable[[], Awaitable[T]]) -> T:
        if self.is_mutating:
            raise MutationInProgressError("Another post change is still in progress")

        self.is_mutating = True
        try:
            result = await call()
        except Exception as e:
            self._store.error = e.message if isinstance(e, ApiError) else MUTATION_FAILED_MESSAGE
            raise
        finally:
            self.is_mutating = False

        await self._store.refresh()
        return result
