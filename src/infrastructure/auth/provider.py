"""Identity returned by token validation and the provider contract."""

from dataclasses import dataclass
from typing import Optional, Protocol
from uuid import UUID


@dataclass
class TokenUser:
    """Identity extracted from a verified access token.

    ``id`` is the token subject and doubles as the profile / author id.
    Supabase tokens issued for phone or anonymous sign-ins carry no email.
    """

    id: UUID
    email: Optional[str] = None
    display_name: Optional[str] = None
    role: Optional[str] = None


class IAuthProvider(Protocol):
    """Verifies access tokens presented as a bearer header or session cookie."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """Return the token's identity, or None when it is expired, forged or malformed."""
        ...

    def create_token(self, user: TokenUser) -> str:
        """Sign a token for ``user``; used by tests and local tooling."""
        ...
