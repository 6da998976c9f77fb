"""Optimistic like toggling.

A toggle moves through ``IDLE -> PENDING -> COMMITTED | ROLLED_BACK``. The
local flip is applied as soon as the toggle is requested; success keeps it
(and refreshes the feed), failure restores the exact prior values. A toggle
requested while one is pending is ignored so a double click cannot count
twice.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

import structlog

from client.api import ApiError, MicroFeedClient
from client.state import FeedStore

logger = structlog.get_logger()

TOGGLE_FAILED_MESSAGE = "Failed to toggle like"


class LikePhase(Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass(frozen=True)
class LikeState:
    is_liked: bool
    likes_count: int
    phase: LikePhase = LikePhase.IDLE
    # Values before the pending flip, restored on failure
    prior: tuple[bool, int] | None = None
    error: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.phase is LikePhase.PENDING


@dataclass(frozen=True)
class ToggleRequested:
    pass


@dataclass(frozen=True)
class ToggleSucceeded:
    pass


@dataclass(frozen=True)
class ToggleFailed:
    error: str


LikeEvent = Union[ToggleRequested, ToggleSucceeded, ToggleFailed]


def reduce_like(state: LikeState, event: LikeEvent) -> LikeState:
    """Return the state after ``event``; events that do not apply are ignored."""
    if isinstance(event, ToggleRequested):
        if state.is_pending:
            return state
        liked = not state.is_liked
        count = state.likes_count + 1 if liked else max(state.likes_count - 1, 0)
        return LikeState(
            is_liked=liked,
            likes_count=count,
            phase=LikePhase.PENDING,
            prior=(state.is_liked, state.likes_count),
        )

    if not state.is_pending:
        return state

    if isinstance(event, ToggleSucceeded):
        return replace(state, phase=LikePhase.COMMITTED, prior=None)

    if isinstance(event, ToggleFailed) and state.prior is not None:
        is_liked, likes_count = state.prior
        return LikeState(
            is_liked=is_liked,
            likes_count=likes_count,
            phase=LikePhase.ROLLED_BACK,
            error=event.error,
        )

    return state


class LikeToggle:
    """Drives ``reduce_like`` against the API and the feed store."""

    def __init__(self, client: MicroFeedClient, store: FeedStore) -> None:
        self._client = client
        self._store = store
        self._states: dict[str, LikeState] = {}

    def state_for(self, post_id: str) -> LikeState | None:
        return self._states.get(post_id)

    def is_pending(self, post_id: str) -> bool:
        state = self._states.get(post_id)
        return state is not None and state.is_pending

    async def toggle(self, post_id: str) -> LikeState:
        """Flip the like on a loaded post, optimistically.

        Returns the resulting state. A failure ends in ``ROLLED_BACK`` with
        ``error`` set (and mirrored to the store) rather than raising.
        """
        current = self._states.get(post_id)
        if current is not None and current.is_pending:
            return current

        post = self._store.get_post(post_id)
        if post is None:
            raise KeyError(post_id)

        base = LikeState(is_liked=post.is_liked, likes_count=post.likes_count)
        state = self._apply(post_id, reduce_like(base, ToggleRequested()))

        try:
            if state.is_liked:
                await self._client.like_post(post_id)
            else:
                await self._client.unlike_post(post_id)
        except Exception as e:
            message = e.message if isinstance(e, ApiError) else TOGGLE_FAILED_MESSAGE
            logger.info("like_toggle_rolled_back", post_id=post_id, error=str(e))
            state = self._apply(post_id, reduce_like(state, ToggleFailed(message)))
            self._store.error = message
            return state

        state = self._apply(post_id, reduce_like(state, ToggleSucceeded()))
        await self._store.refresh()
        return state

    def _apply(self, post_id: str, state: LikeState) -> LikeState:
        self._states[post_id] = state
        self._store.patch_post(post_id, is_liked=state.is_liked, likes_count=state.likes_count)
        return state
