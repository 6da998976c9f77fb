"""Lazy profile provisioning for identities coming from the auth provider."""

import time
from uuid import UUID

import structlog

from core.exceptions import ProfileCreationError, UsernameTakenError
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

USERNAME_MAX_LENGTH = 50


def derive_username(user_id: UUID, email: str | None) -> str:
    """Username from the e-mail local part, else ``user_<first 8 of id>``."""
    local_part = (email or "").split("@")[0].strip()
    if local_part:
        return local_part[:USERNAME_MAX_LENGTH]
    return f"user_{str(user_id)[:8]}"


def fallback_username(user_id: UUID) -> str:
    """Time-suffixed username used for the single retry after a collision."""
    return f"user_{str(user_id)[:8]}_{int(time.time() * 1000)}"


class ProfileService:
    """Creates a caller's profile the first time it is needed."""

    async def ensure_profile(
        self, uow: IUnitOfWork, user_id: UUID, email: str | None
    ) -> Profile:
        """Return the caller's profile, creating it inside ``uow`` if absent.

        A username collision is retried exactly once with a time-suffixed
        username; a second failure raises ``ProfileCreationError``. The retry
        rolls back the unit of work, so this must run before any other write
        in the same transaction.
        """
        existing = await uow.profiles.get(user_id)
        if existing:
            return existing

        username = derive_username(user_id, email)
        try:
            profile = await uow.profiles.create(Profile(id=user_id, username=username))
        except UsernameTakenError:
            await uow.rollback()

            # A concurrent request for the same identity may have won the race
            existing = await uow.profiles.get(user_id)
            if existing:
                return existing

            retry_username = fallback_username(user_id)
            logger.warning(
                "profile_username_retry",
                user_id=str(user_id),
                username=username,
                retry_username=retry_username,
            )
            try:
                profile = await uow.profiles.create(
                    Profile(id=user_id, username=retry_username)
                )
            except UsernameTakenError as exc:
                logger.error(
                    "profile_creation_failed",
                    user_id=str(user_id),
                    username=retry_username,
                )
                raise ProfileCreationError() from exc

        logger.info("profile_created", user_id=str(user_id), username=profile.username)
        return profile
