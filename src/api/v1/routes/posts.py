"""Post and like API routes."""

from fastapi import APIRouter, Depends, Query, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_feed_service, get_like_service, get_post_service
from api.v1.schemas.common import ErrorResponse, MessageResponse
from api.v1.schemas.post import (
    AuthorSummary,
    FeedPageResponse,
    PostCreate,
    PostResponse,
    PostUpdate,
)
from core.config import settings
from domain.entities.feed import FeedQuery
from domain.entities.post import FeedItem
from domain.services.feed_service import FeedService
from domain.services.like_service import LikeService
from domain.services.post_service import PostService
from domain.validation import (
    normalize_search,
    validate_cursor,
    validate_filter,
    validate_limit,
    validate_post_id,
)

router = APIRouter(
    prefix="/posts",
    tags=["posts"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid credentials"},
        500: {"model": ErrorResponse, "description": "Data store failure"},
    },
)


def _build_post_response(item: FeedItem) -> PostResponse:
    """Build a PostResponse from an annotated feed item."""
    post = item.post
    return PostResponse(
        id=post.id,
        author_id=post.author_id,
        content=post.content,
        created_at=post.created_at,
        updated_at=post.updated_at or post.created_at,
        is_edited=post.is_edited,
        author=AuthorSummary(id=post.author_id, username=item.author_username),
        likes_count=item.likes_count,
        is_liked=item.is_liked,
    )


@router.get(
    "",
    response_model=FeedPageResponse,
    summary="List the feed",
    responses={
        200: {"description": "One page of posts, newest first"},
        400: {"description": "Malformed filter, limit or cursor"},
    },
)
async def list_posts(
    user: CurrentUser,
    service: FeedService = Depends(get_feed_service),
    query: str | None = Query(None, description="Case-insensitive substring search"),
    cursor: str | None = Query(None, description="`next_cursor` of the previous page"),
    feed_filter: str | None = Query(None, alias="filter", description="`all` or `mine`"),
    limit: str | None = Query(None, description="Page size, 1-50"),
) -> FeedPageResponse:
    """
    Get one page of the feed for the authenticated user.

    Every post carries its author's username, its like count and whether the
    caller liked it. Pass `next_cursor` back as `cursor` to continue.
    """
    feed_query = FeedQuery(
        limit=validate_limit(
            limit,
            default=settings.feed_default_page_size,
            maximum=settings.feed_max_page_size,
        ),
        filter=validate_filter(feed_filter),
        search=normalize_search(query),
        cursor=validate_cursor(cursor),
    )
    page = await service.list_posts(user.id, feed_query)
    return FeedPageResponse(
        posts=[_build_post_response(item) for item in page.items],
        has_more=page.has_more,
        next_cursor=page.next_cursor,
    )


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
    responses={
        201: {"description": "Post created successfully"},
        400: {"description": "Empty or too long content"},
    },
)
async def create_post(
    body: PostCreate,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """
    Create a post for the authenticated user.

    The author's profile is created on first post, with a username taken from
    the e-mail local part.
    """
    item = await service.create(user_id=user.id, email=user.email, content=body.content)
    return _build_post_response(item)


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    summary="Get a post",
    responses={
        200: {"description": "Post annotated for the caller"},
        400: {"description": "Invalid post ID"},
        404: {"description": "Post not found"},
    },
)
async def get_post(
    post_id: str,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """Get a single post by ID."""
    item = await service.get(validate_post_id(post_id), user.id)
    return _build_post_response(item)


@router.patch(
    "/{post_id}",
    response_model=PostResponse,
    summary="Edit a post",
    responses={
        200: {"description": "Post updated successfully"},
        400: {"description": "Invalid post ID or content"},
        403: {"description": "Post belongs to another user"},
        404: {"description": "Post not found"},
    },
)
async def update_post(
    post_id: str,
    body: PostUpdate,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """Replace the content of one of the caller's posts."""
    item = await service.update(validate_post_id(post_id), user.id, body.content)
    return _build_post_response(item)


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete a post",
    responses={
        200: {"description": "Post and its likes deleted"},
        400: {"description": "Invalid post ID"},
        403: {"description": "Post belongs to another user"},
        404: {"description": "Post not found"},
    },
)
async def delete_post(
    post_id: str,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> MessageResponse:
    """Delete one of the caller's posts together with its likes."""
    await service.delete(validate_post_id(post_id), user.id)
    return MessageResponse(message="Post deleted successfully")


@router.post(
    "/{post_id}/like",
    response_model=MessageResponse,
    summary="Like a post",
    responses={
        200: {"description": "Post liked"},
        400: {"description": "Invalid post ID or post already liked"},
        404: {"description": "Post not found"},
    },
)
async def like_post(
    post_id: str,
    user: CurrentUser,
    service: LikeService = Depends(get_like_service),
) -> MessageResponse:
    """Like a post. Liking the same post twice is rejected."""
    await service.like(validate_post_id(post_id), user.id)
    return MessageResponse(message="Post liked successfully")


@router.delete(
    "/{post_id}/like",
    response_model=MessageResponse,
    summary="Unlike a post",
    responses={
        200: {"description": "Like removed, or there was none"},
        400: {"description": "Invalid post ID"},
    },
)
async def unlike_post(
    post_id: str,
    user: CurrentUser,
    service: LikeService = Depends(get_like_service),
) -> MessageResponse:
    """Remove the caller's like from a post. Idempotent."""
    await service.unlike(validate_post_id(post_id), user.id)
    return MessageResponse(message="Post unliked successfully")
