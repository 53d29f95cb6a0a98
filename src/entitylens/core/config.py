"""Configuration management for EntityLens.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Settings are read once and cached; the
services accept explicit overrides and only fall back to these values.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration settings.

    Settings are loaded from environment variables prefixed with
    ``ENTITYLENS_`` and from an optional ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ENTITYLENS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "EntityLens"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Rendering Settings
    date_format: str = Field(
        default="%a, %d %b %Y",
        description="strftime pattern for values without a time of day",
    )
    datetime_format: str = Field(
        default="%a, %d %b %Y %H:%M:%S %Z",
        description="strftime pattern for values carrying a time of day",
    )

    # Query Settings
    query_alias: str | None = Field(
        default="obj",
        description="Alias prefixed to every column in generated clauses",
    )
    url_encoding: str = "utf-8"

    # Expression Settings
    expression_cache_size: int = Field(default=256, ge=1)

    @field_validator("date_format", "datetime_format")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Reject blank date patterns."""
        if not v.strip():
            raise ValueError("Date patterns must not be blank")
        return v

    @field_validator("query_alias", mode="before")
    @classmethod
    def validate_query_alias(cls, v: str | None) -> str | None:
        """Treat a blank alias as no alias and reject non-identifiers."""
        if v is None:
            return None
        v = str(v).strip()
        if not v:
            return None
        if not v.isidentifier():
            raise ValueError(f"Query alias must be an identifier, got {v!r}")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: The settings loaded on first call.
    """
    return Settings()
