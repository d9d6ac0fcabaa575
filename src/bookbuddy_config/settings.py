"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. BOOKBUDDY_ENV_FILE environment variable (absolute path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import SecretStr, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. BOOKBUDDY_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("BOOKBUDDY_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - app fails without these)
    jwt_access_secret: SecretStr  # Signs access tokens
    jwt_refresh_secret: SecretStr  # Signs refresh tokens (must differ)
    login_code_secret: SecretStr  # HMAC key for one-time login codes at rest
    postgres_password: SecretStr

    # Application
    app_name: str = "BookBuddy"
    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False

    # Database (POSTGRES_ prefix)
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_db: str = "bookbuddy"

    # API (API_ prefix)
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    api_debug: bool = False
    api_cors_origins: str = ""  # Empty = no CORS allowed

    # JWT
    jwt_issuer: str = "bookbuddy-api"
    jwt_audience: str = "bookbuddy-client"
    jwt_access_token_expire_minutes: int = 15
    jwt_refresh_token_expire_days: int = 7

    # Sessions
    # Every login revokes the user's earlier refresh sessions when enabled
    session_single_chain: bool = True
    expiry_sweep_interval_seconds: int = 3600

    # Single-use tokens and one-time codes
    email_verify_ttl_hours: int = 24
    password_reset_ttl_minutes: int = 30
    login_code_ttl_minutes: int = 10
    # Wrong guesses after which a login code is burned
    login_code_max_attempts: int = 5

    # Per-IP request limits on the auth endpoints
    rate_limit_enabled: bool = True

    # Password hashing
    bcrypt_rounds: int = 12

    # Links embedded in emails
    api_url: str = "http://localhost:5000"
    client_url: str = "http://localhost:5173"

    # SMTP (SMTP_ prefix)
    smtp_enabled: bool = False
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: SecretStr | None = None
    smtp_from_email: str = "no-reply@bookbuddy.local"
    smtp_from_name: str = "BookBuddy"
    smtp_use_tls: bool = True
    smtp_starttls: bool = True
    smtp_timeout_seconds: float = 10.0

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _validate_distinct_jwt_secrets(self) -> Settings:
        """Access and refresh tokens must never share a signing key."""
        access = self.jwt_access_secret.get_secret_value()
        refresh = self.jwt_refresh_secret.get_secret_value()
        if access == refresh:
            msg = "JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ"
            raise ValueError(msg)
        return self

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Construct the database URL from components."""
        return (
            f"postgresql+asyncpg://{self.postgres_user}:"
            f"{self.postgres_password.get_secret_value()}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [o.strip() for o in self.api_cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        """Refresh cookie is HTTPS-only in production."""
        return self.is_production

    @property
    def refresh_token_max_age_seconds(self) -> int:
        return self.jwt_refresh_token_expire_days * 24 * 60 * 60


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    Required fields (jwt_access_secret, jwt_refresh_secret, login_code_secret,
    postgres_password) must be provided via environment variables or .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
