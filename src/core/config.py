"""Service settings read from the environment (and ``.env`` when present)."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Micro Feed settings.

    Every field maps to an upper-cased environment variable, e.g.
    ``FEED_MAX_PAGE_SIZE=25``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Micro Feed API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False, description="Verbose logs and FastAPI debug mode")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Storage
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/microfeed",
        description="Supabase Postgres URL; plain postgresql:// is accepted",
    )

    # Identity
    supabase_url: str = Field(
        default="",
        description="Project URL, used to locate the JWKS for ES256 tokens",
    )
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Shared secret for HS256 tokens",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)
    auth_cookie_name: str = Field(
        default="sb-access-token",
        description="Session cookie holding the Supabase access token (may be chunked)",
    )

    # Feed
    feed_default_page_size: int = Field(default=10, ge=1)
    feed_max_page_size: int = Field(default=50, ge=1)

    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated browser origins allowed to call the API",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supabase_jwks_url(self) -> str:
        if not self.supabase_url:
            return ""
        return f"{self.supabase_url.rstrip('/')}/auth/v1/.well-known/jwks.json"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """``database_url`` with the asyncpg driver forced onto postgres URLs."""
        scheme, sep, rest = self.database_url.partition("://")
        if scheme in ("postgres", "postgresql"):
            return f"postgresql+asyncpg{sep}{rest}"
        return self.database_url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
