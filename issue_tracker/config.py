"""
Configuration management for the issue tracker.
"""

from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "Issue Tracker"
    debug: bool = False
    environment: str = "development"

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 1
    cors_allow_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins.",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./issue_tracker.db",
        validation_alias=AliasChoices("DATABASE_URL", "DB_URI"),
    )

    # Logging
    log_level: str = "INFO"
    log_format: str = Field(default="json", description="'json' or 'console'")

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
