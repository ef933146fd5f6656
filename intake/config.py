"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, PostgresDsn
from pydantic_settings import BaseSettings, SettingsConfigDict

# Analytics windows accepted by the admin dashboard, in days
TIME_PERIOD_DAYS = {
    "7days": 7,
    "30days": 30,
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 1
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:5000"])
    public_url: str = "http://localhost:8000"

    # Database
    database_url: PostgresDsn
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Identity provider tokens
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None
    session_cookie_name: str = "intake_session"
    session_max_age_seconds: int = 604800  # 7 days
    identity_login_url: str = "https://id.example.com/login"
    identity_logout_url: str | None = None

    # Exports
    export_filename_prefix: str = "form-submissions"

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == "production"

    @property
    def is_test(self) -> bool:
        """Check if running in test mode."""
        return self.env == "test"

    @property
    def callback_url(self) -> str:
        """Absolute URL the identity provider redirects back to."""
        return f"{self.public_url.rstrip('/')}/api/callback"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        return Settings()  # type: ignore[call-arg]
    except Exception as e:
        if "validation" in type(e).__name__.lower() or "required" in str(e).lower():
            raise RuntimeError(
                "Missing required environment variables. Set DATABASE_URL and JWT_SECRET "
                "(JWT_SECRET must match the signing key of the identity provider)."
            ) from e
        raise
