"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by identity ID."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a profile.

        Raises:
            UsernameTakenError: If the username or id is already in use.
        """
        ...
