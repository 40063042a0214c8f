"""
Centralized configuration for lotuscards.

Values come from LOTUSCARDS_* environment variables or a local .env file.
"""
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import SEARCH_DEBOUNCE_MS, STORAGE_KEY


def get_default_db_path() -> Path:
    """Default location of the store file. The directory is created on connect."""
    return Path.home() / ".lotuscards" / "lotuscards.db"


class Settings(BaseSettings):
    """
    Application settings, loaded from environment variables or .env files.
    """

    model_config = SettingsConfigDict(
        env_prefix="LOTUSCARDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Overridden by LOTUSCARDS_DB_PATH (or the CLI --db / LOTUSCARDS_DB).
    db_path: Path = Field(default_factory=get_default_db_path)

    # Key the document snapshot is stored under.
    storage_key: str = STORAGE_KEY

    # Idle window for typed search input.
    search_debounce_ms: int = Field(default=SEARCH_DEBOUNCE_MS, ge=0)


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
