"""Feed query composition: filter, search, keyset pagination, annotation."""

from collections.abc import Callable
from uuid import UUID

from core.exceptions import StoreFailureError
from domain.entities.feed import FeedFilter, FeedQuery
from domain.entities.post import UNKNOWN_AUTHOR, FeedItem, FeedPage, Post
from domain.repositories.unit_of_work import IUnitOfWork


async def annotate_posts(
    uow: IUnitOfWork, posts: list[Post], viewer_id: UUID
) -> list[FeedItem]:
    """Attach author name, like count and the viewer's like status.

    Counts and like status are each fetched with one batched query for the
    whole page, never per post.
    """
    if not posts:
        return []

    post_ids = [p.id for p in posts]
    counts = await uow.likes.count_for_posts(post_ids)
    liked = await uow.likes.liked_post_ids(viewer_id, post_ids)

    return [
        FeedItem(
            post=post,
            author_username=post.author_username or UNKNOWN_AUTHOR,
            likes_count=counts.get(post.id, 0),
            is_liked=post.id in liked,
        )
        for post in posts
    ]


class FeedService:
    """Service layer for reading the feed."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def list_posts(self, viewer_id: UUID, query: FeedQuery) -> FeedPage:
        """Get one page of the feed for ``viewer_id``.

        Fetches ``limit + 1`` rows; the extra row only signals that another
        page exists and is dropped. The cursor for the next page is the
        ``created_at`` of the last row kept.
        """
        try:
            async with self._uow_factory() as uow:
                rows = await uow.posts.list_page(
                    fetch=query.limit + 1,
                    author_id=viewer_id if query.filter == FeedFilter.MINE else None,
                    search=query.search,
                    before=query.cursor,
                )

                has_more = len(rows) > query.limit
                page = rows[: query.limit]
                next_cursor = page[query.limit - 1].created_at if has_more else None

                items = await annotate_posts(uow, page, viewer_id)
        except StoreFailureError as exc:
            raise StoreFailureError("Failed to fetch posts") from exc

        return FeedPage(items=items, has_more=has_more, next_cursor=next_cursor)
