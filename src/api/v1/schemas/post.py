"""Pydantic schemas for Post API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a Post.

    Length limits are checked after trimming, by the service layer.
    """

    content: str = Field(..., description="Post text, 1-280 characters once trimmed")


class PostUpdate(BaseModel):
    """Schema for replacing the content of a Post."""

    content: str = Field(..., description="New post text, 1-280 characters once trimmed")


class AuthorSummary(BaseModel):
    """Minimal profile representation embedded in a post."""

    id: UUID
    username: str


class PostResponse(BaseModel):
    """Schema for a Post annotated for the caller."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "author_id": "456e4567-e89b-12d3-a456-426614174000",
                "content": "Shipping the feed today",
                "created_at": "2026-01-28T10:00:00",
                "updated_at": "2026-01-28T10:00:00",
                "is_edited": False,
                "author": {
                    "id": "456e4567-e89b-12d3-a456-426614174000",
                    "username": "alice",
                },
                "likes_count": 3,
                "is_liked": True,
            }
        },
    )

    id: UUID
    author_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime
    is_edited: bool
    author: AuthorSummary
    likes_count: int = Field(..., ge=0)
    is_liked: bool


class FeedPageResponse(BaseModel):
    """One page of the feed."""

    posts: list[PostResponse]
    has_more: bool
    next_cursor: datetime | None = Field(
        None, description="Pass back as `cursor` to fetch the next page"
    )
