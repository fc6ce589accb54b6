# viibe/config.py
"""
Centralized configuration with validation.

Uses pydantic-settings to load and validate all environment variables at startup.
Fail fast with clear error messages if config is invalid.
"""

from functools import lru_cache
from typing import ClassVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from viibe.constants import HistoryDefaults


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level: DEBUG, INFO, WARNING, ERROR",
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit single-line JSON logs instead of human-readable lines",
    )

    # Authentication
    ADMIN_API_KEY: str | None = Field(
        default=None,
        description="API key for destructive endpoints (DELETE /v1/history)",
    )

    # History storage
    HISTORY_STORE_PROVIDER: str = Field(
        default="local",
        description="History store provider: local, memory, sql",
    )
    LOCAL_STORAGE_PATH: str = Field(
        default="./storage",
        description="Path for local key-value storage",
    )
    DATABASE_URL: str | None = Field(
        default=None,
        description="SQLAlchemy URL for the sql history store",
    )
    HISTORY_STORAGE_KEY: str = Field(
        default=HistoryDefaults.STORAGE_KEY,
        description="Key the duplicate history is stored under",
    )
    HISTORY_MAX_ENTRIES: int = Field(
        default=HistoryDefaults.MAX_ENTRIES,
        ge=1,
        description="Maximum number of history entries retained",
    )
    DUPLICATE_SIMILARITY_THRESHOLD: float = Field(
        default=HistoryDefaults.SIMILARITY_THRESHOLD,
        gt=0.0,
        le=1.0,
        description="Jaccard similarity above which a line counts as a duplicate",
    )

    # Sanitizer rules
    RULES_FILE: str | None = Field(
        default=None,
        description="Optional JSON file with extra phrase mappings and patterns",
    )

    # CORS
    CORS_ORIGINS: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins",
    )

    VALID_LOG_LEVELS: ClassVar[set[str]] = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper().strip()
        if level not in cls.VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(cls.VALID_LOG_LEVELS)}, got '{v}'")
        return level

    @field_validator("HISTORY_STORE_PROVIDER")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        return v.lower().strip()

    @field_validator("DATABASE_URL")
    @classmethod
    def fix_database_url(cls, v: str | None) -> str | None:
        """Hosted Postgres URLs use postgresql:// but SQLAlchemy needs postgresql+psycopg2://"""
        if v and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+psycopg2://", 1)
        return v

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings. Call at startup to validate config."""
    return Settings()
