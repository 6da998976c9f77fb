"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from uuid import uuid4

# Point the application at SQLite before any module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import TokenUser
from infrastructure.database.models import Base
from infrastructure.database.session import enable_sqlite_foreign_keys
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

# Test database URL (SQLite in memory, one shared connection)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret-key"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test, with FK enforcement on."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for direct assertions."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], SQLAlchemyUnitOfWork]:
    """Unit of Work factory bound to the test database."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(secret_key=TEST_JWT_SECRET, algorithm="HS256", expire_minutes=30)


@pytest.fixture
def user_a() -> TokenUser:
    return TokenUser(id=uuid4(), email="alice@example.com", display_name="Alice")


@pytest.fixture
def user_b() -> TokenUser:
    return TokenUser(id=uuid4(), email="bob@example.com", display_name="Bob")


@pytest.fixture
def token_a(auth_provider: JWTAuthProvider, user_a: TokenUser) -> str:
    return auth_provider.create_token(user_a)


@pytest.fixture
def token_b(auth_provider: JWTAuthProvider, user_b: TokenUser) -> str:
    return auth_provider.create_token(user_b)


@pytest.fixture
def headers_a(token_a: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_a}"}


@pytest.fixture
def headers_b(token_b: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_b}"}


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    uow_factory: Callable[[], SQLAlchemyUnitOfWork],
    auth_provider: JWTAuthProvider,
) -> FastAPI:
    """
    Application wired to the test database and the test token secret.

    Identity resolution runs for real: requests must carry a token signed
    with the test secret, in the header or in the session cookie.
    """
    from api.dependencies.auth import get_auth_provider
    from api.v1.dependencies import get_feed_service, get_like_service, get_post_service
    from domain.services.feed_service import FeedService
    from domain.services.like_service import LikeService
    from domain.services.post_service import PostService
    from infrastructure.database.session import get_async_session
    from main import create_app

    app = create_app()

    async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_auth_provider] = lambda: auth_provider
    app.dependency_overrides[get_feed_service] = lambda: FeedService(uow_factory)
    app.dependency_overrides[get_post_service] = lambda: PostService(uow_factory)
    app.dependency_overrides[get_like_service] = lambda: LikeService(uow_factory)
    app.dependency_overrides[get_async_session] = override_get_async_session
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async test client; pass auth headers or cookies per request."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
