"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # GitHub API settings
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_PAT_TOKEN: str | None = None

    # Git settings used by branch synchronization
    GIT_HOST: str | None = None
    BASE_DIR: Path | None = None
    GIT_USER_NAME: str | None = None
    GIT_USER_EMAIL: str | None = None
    DEFAULT_REMOTE_NAME: str = "upstream"

    # Batch settings
    MAX_CONCURRENCY: int = 5
