"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match current verification behavior

Collaborators:
  - api/main.py: reads settings for CORS, pool sizing and startup validation
  - container.py: reads settings for gate policy (timezone, fail-open)
  - application use cases: receive page limits and gate policy by injection

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string
        app_env: Application environment (development/test/production)
        allowed_origins: Comma-separated CORS origins
        log_level: Logger level (default: INFO)
        log_json: Emit JSON logs (default: True)
        jwt_secret: Secret used to validate access tokens
        jwt_cookie_name: Cookie name for access token
        db_slow_query_seconds: Threshold for slow query warnings
        db_healthcheck_on_acquire: Run SELECT 1 when a connection is acquired
        event_timezone: IANA timezone used to truncate "today" for the
            temporal gate and daily statistics (default: UTC)
        temporal_gate_fail_open: Skip the event-day gate when the day
            cannot be resolved (default: True)
        default_page_size: Page size used when the requested one is invalid
        max_page_size: Upper bound for page size (default: 100)
        max_daily_window_days: Max window for daily counts (default: 365)
        metrics_enabled: Expose /metrics (default: True)
    """

    # Required (no defaults)
    database_url: str

    # Environment
    app_env: str = "development"

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Security - JWT Auth (tokens are issued by the auth service)
    jwt_secret: str = "dev-secret"
    jwt_cookie_name: str = "access_token"

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds
    db_slow_query_seconds: float = 0.25
    db_healthcheck_on_acquire: bool = True

    # Verification gates
    event_timezone: str = "UTC"
    temporal_gate_fail_open: bool = True

    # Query limits
    default_page_size: int = 20
    max_page_size: int = 100
    max_daily_window_days: int = 365

    # Observability
    metrics_enabled: bool = True

    @field_validator("event_timezone")
    @classmethod
    def event_timezone_must_exist(cls, v: str) -> str:
        name = (v or "UTC").strip()
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"event_timezone '{name}' is not a valid IANA zone") from exc
        return name

    @field_validator("default_page_size", "max_page_size", "max_daily_window_days")
    @classmethod
    def limits_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("limits must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_page_limits(self):
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) must be <= "
                f"max_page_size ({self.max_page_size})"
            )
        return self

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        insecure_secrets = {"dev-secret", "changeme", "change-me", "password"}
        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in insecure_secrets:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        return self

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def get_event_zone(self) -> ZoneInfo:
        return ZoneInfo(self.event_timezone)

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
