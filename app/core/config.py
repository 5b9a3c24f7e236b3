"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (e.g. SECRET_KEY) are validated at
load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except secret_key, which is
    validated in validate_required.
    """

    # App
    app_name: str = "recims"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database: SQLite (aiosqlite) for single-node installs, PostgreSQL (asyncpg) otherwise
    database_url: str = "sqlite+aiosqlite:///./recims.db"
    database_echo: bool = False
    # Optional pool overrides (None = use defaults in database.py; ignored for SQLite)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security: tokens are issued by the auth service; we only verify them.
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Request / middleware
    request_id_header: str = "X-Request-ID"
    correlation_id_header: str = "X-Correlation-ID"

    # Startup schema evolution and seed accounts
    bootstrap_on_startup: bool = True
    default_admin_email: str = "admin@recims.com"
    default_admin_password: SecretStr = SecretStr("admin123")
    # Restricted second-tenant admin; env names kept from the legacy deployment.
    clnenv_user_email: str = "admin@clnenv.com"
    clnenv_user_password: SecretStr = SecretStr("phase3only!")
    clnenv_user_name: str = "CLN Env Restricted Admin"

    # Redis Cache
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    cache_ttl_tenants: int = 60
    cache_ttl_app_settings: int = 30

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env and database URL scheme."""
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required (must match the key used by the token issuer). "
                "Generate with: openssl rand -hex 32."
            )
        if not self.database_url.startswith(("sqlite", "postgresql")):
            raise ValueError(
                f"DATABASE_URL must be a sqlite or postgresql URL, got: {self.database_url!r}"
            )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("TELEMETRY_SAMPLE_RATE must be between 0.0 and 1.0")
        return self

    @property
    def restricted_admin_email(self) -> str:
        """Restricted admin login, lowercased as stored in users.email."""
        return self.clnenv_user_email.lower()


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
