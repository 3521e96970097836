"""
Configuration management using pydantic-settings.

Loads configuration from READTHROUGH_* environment variables and .env files.
The cache functions themselves take explicit arguments; settings only feed
FileCache.from_settings() and logging setup.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from readthrough.exceptions import ConfigurationError
from readthrough.logging import setup_logging


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Optional:
        READTHROUGH_CACHE_DIR: Directory holding one file per cache key
        READTHROUGH_ATOMIC_WRITES: Write via temp file + rename
        READTHROUGH_LOG_LEVEL: Logging level
        READTHROUGH_LOG_FILE: JSON Lines log file
    """

    model_config = SettingsConfigDict(
        env_prefix="READTHROUGH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    CACHE_DIR: Path = Field(default=Path(".cache"), description="Cache directory")
    ATOMIC_WRITES: bool = Field(
        default=False,
        description="Persist through a temp file and os.replace",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    LOG_FILE: Path | None = Field(default=None, description="JSON log file")

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("CACHE_DIR")
    @classmethod
    def validate_cache_dir(cls, v: Path) -> Path:
        """Reject a CACHE_DIR that points at a regular file."""
        if v.exists() and not v.is_dir():
            raise ValueError(f"CACHE_DIR is not a directory: {v}")
        return v

    @property
    def cache_dir(self) -> Path:
        """Get cache directory (lowercase alias)."""
        return self.CACHE_DIR

    @property
    def atomic_writes(self) -> bool:
        """Get atomic write flag (lowercase alias)."""
        return self.ATOMIC_WRITES

    def ensure_directories(self) -> None:
        """Create the cache directory if it doesn't exist.

        The cache never creates its directory on its own.
        """
        self.CACHE_DIR.mkdir(parents=True, exist_ok=True)

    def configure_logging(self, console_output: bool = True) -> None:
        """Apply LOG_LEVEL and LOG_FILE to the readthrough logger."""
        setup_logging(self.LOG_LEVEL, self.LOG_FILE, console_output=console_output)

    def display_dict(self) -> dict[str, str | bool | None]:
        """Return settings for display."""
        return {
            "CACHE_DIR": str(self.CACHE_DIR),
            "ATOMIC_WRITES": self.ATOMIC_WRITES,
            "LOG_LEVEL": self.LOG_LEVEL,
            "LOG_FILE": str(self.LOG_FILE) if self.LOG_FILE else None,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ConfigurationError: If settings are invalid.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid readthrough settings", {"errors": e.error_count()}
        ) from e


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
