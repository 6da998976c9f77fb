"""Authentication dependencies for FastAPI."""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import settings
from core.exceptions import AuthenticationError, ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import IAuthProvider, TokenUser
from infrastructure.auth.session_cookie import access_token_from_cookies

logger = structlog.get_logger()

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)

# Singleton auth provider
_auth_provider: JWTAuthProvider | None = None


def get_auth_provider() -> JWTAuthProvider:
    """Get or create the auth provider singleton."""
    global _auth_provider
    if _auth_provider is None:
        _auth_provider = JWTAuthProvider()
    return _auth_provider


async def resolve_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    auth_provider: IAuthProvider,
) -> TokenUser:
    """
    Resolve the caller from the bearer header, then the session cookie.

    A bearer token that fails verification does not end the lookup; the
    session cookie is still tried.

    Raises:
        AuthenticationError: UNAUTHORIZED when no credential was sent,
            INVALID_TOKEN when every supplied credential was rejected
    """
    supplied = False

    if credentials and credentials.credentials:
        supplied = True
        user = await auth_provider.validate_token(credentials.credentials)
        if user:
            return user
        logger.info("bearer_token_rejected")

    cookie_token = access_token_from_cookies(request.cookies, settings.auth_cookie_name)
    if cookie_token:
        supplied = True
        user = await auth_provider.validate_token(cookie_token)
        if user:
            return user
        logger.info("session_cookie_rejected")

    if not supplied:
        raise AuthenticationError(
            message="Authentication required",
            error_code=ErrorCode.UNAUTHORIZED,
        )
    raise AuthenticationError(
        message="Invalid or expired token",
        error_code=ErrorCode.INVALID_TOKEN,
    )


async def get_current_user(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: JWTAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """Dependency to get the current authenticated user."""
    user = await resolve_identity(request, credentials, auth_provider)
    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


# Type alias for convenience in route handlers
CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
