"""Application configuration using pydantic-settings.

Settings come from environment variables (or a local .env file). Google
credentials default to Application Default Credentials when no key file is
configured.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Optional environment variables:
    - GOOGLE_APPLICATION_CREDENTIALS: Service account key file for the Sheets API
    - ROW_WRITE_CONCURRENCY: Parallel single-row writes during a sparse rewrite
    - SYNC_RATE_LIMIT: slowapi limit applied to the sync endpoint
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars not defined in Settings
    )

    # Server
    port: int = 8080
    environment: str = "development"
    log_level: str = "INFO"

    # Google Sheets API
    google_application_credentials: str = ""
    request_timeout: int = 60

    # Sync behaviour
    row_write_concurrency: int = 1
    sync_rate_limit: str = "10/second"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of: {allowed}")
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known value."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of: {allowed}")
        return v_upper

    @field_validator("request_timeout")
    @classmethod
    def validate_request_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("request_timeout must be positive")
        return v

    @field_validator("row_write_concurrency")
    @classmethod
    def validate_row_write_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("row_write_concurrency must be at least 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the application.
    """
    return Settings()
