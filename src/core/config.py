"""
Core configuration settings for the Promotion Platform.

Uses Pydantic Settings for environment-based configuration management.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Info
    PROJECT_NAME: str = "Promotion Platform"
    VERSION: str = "0.1.0"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    @field_validator("DEBUG", mode="before")
    @classmethod
    def parse_debug(cls, v):
        """Parse debug flag from environment."""
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes", "on")
        return v

    # Logging Configuration
    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unsupported log level: {v}")
        return level

    # Promotion rules
    EXPIRING_SOON_THRESHOLD_DAYS: int = 3
    SLOW_OPERATION_THRESHOLD_MS: float = 1000.0

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get settings instance - useful for dependency injection."""
    return settings
