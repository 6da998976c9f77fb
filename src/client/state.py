"""Feed state: the loaded posts plus the search, filter and cursor behind them."""

from typing import Any

import structlog

from client.api import DEFAULT_PAGE_SIZE, ApiError, MicroFeedClient
from client.models import FeedPost

logger = structlog.get_logger()

FILTERS = ("all", "mine")
FETCH_FAILED_MESSAGE = "Failed to fetch posts"


class FeedStore:
    """Holds the feed the UI renders and reloads it as inputs change.

    Failures are recorded in ``error`` as display text instead of being
    raised. Each load is tagged with a generation number; a response that
    arrives after a newer load started is discarded.
    """

    def __init__(self, client: MicroFeedClient, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._client = client
        self._page_size = page_size
        self._generation = 0

        self.posts: list[FeedPost] = []
        self.loading = False
        self.error: str | None = None
        self.has_more = True
        self.next_cursor: str | None = None
        self.search_query = ""
        self.current_filter = "all"

    async def load(self) -> None:
        """Replace the feed with its first page."""
        await self._fetch(cursor=None, append=False)

    async def refresh(self) -> None:
        """Re-read the first page after a mutation."""
        await self.load()

    async def load_more(self) -> None:
        """Append the next page; a no-op while loading or once exhausted."""
        if self.loading or not self.has_more or not self.next_cursor:
            return
        await self._fetch(cursor=self.next_cursor, append=True)

    async def set_search_query(self, query: str) -> None:
        self.search_query = query
        self._reset_cursor()
        await self.load()

    async def set_filter(self, feed_filter: str) -> None:
        if feed_filter not in FILTERS:
            raise ValueError(f"filter must be one of {FILTERS}, got {feed_filter!r}")
        self.current_filter = feed_filter
        self._reset_cursor()
        await self.load()

    def get_post(self, post_id: str) -> FeedPost | None:
        return next((p for p in self.posts if p.id == post_id), None)

    def patch_post(self, post_id: str, **changes: Any) -> FeedPost | None:
        """Apply a local change to one loaded post and return the new value."""
        for index, post in enumerate(self.posts):
            if post.id == post_id:
                updated = post.model_copy(update=changes)
                self.posts[index] = updated
                return updated
        return None

    def _reset_cursor(self) -> None:
        self.next_cursor = None
        self.has_more = True

    async def _fetch(self, cursor: str | None, append: bool) -> None:
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None

        try:
            page = await self._client.list_posts(
                query=self.search_query,
                cursor=cursor,
                filter=self.current_filter,
                limit=self._page_size,
            )
        except Exception as e:
            if generation == self._generation:
                logger.info("feed_load_failed", error=str(e))
                message = e.message if isinstance(e, ApiError) else ""
                self.error = message or FETCH_FAILED_MESSAGE
            return
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            return

        self.posts = [*self.posts, *page.posts] if append else list(page.posts)
        self.has_more = page.has_more
        self.next_cursor = page.next_cursor
