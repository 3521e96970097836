"""
Tests for configuration module.
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from readthrough.config import Settings, clear_settings_cache, get_settings
from readthrough.exceptions import ConfigurationError


class TestSettingsLoading:
    """Tests for loading Settings from the environment."""

    def test_settings_loads_from_env(
        self, mock_env_vars: dict[str, str], temp_dir: Path
    ) -> None:
        """Test that settings correctly loads READTHROUGH_* variables."""
        settings = get_settings()

        assert settings.CACHE_DIR == temp_dir / "env_cache"
        assert settings.ATOMIC_WRITES is True
        assert settings.LOG_LEVEL == "DEBUG"

    def test_get_settings_is_cached(self, mock_env_vars: dict[str, str]) -> None:
        assert get_settings() is get_settings()

    def test_clear_settings_cache_reloads(self, mock_env_vars: dict[str, str]) -> None:
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first

    def test_lowercase_aliases(self, mock_env_vars: dict[str, str]) -> None:
        settings = get_settings()

        assert settings.cache_dir == settings.CACHE_DIR
        assert settings.atomic_writes == settings.ATOMIC_WRITES


class TestSettingsDefaults:
    """Tests for Settings default values."""

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.CACHE_DIR == Path(".cache")
        assert settings.ATOMIC_WRITES is False
        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_FILE is None


class TestSettingsValidation:
    """Tests for Settings validation."""

    def test_invalid_log_level(self) -> None:
        with patch.dict(os.environ, {"READTHROUGH_LOG_LEVEL": "LOUD"}, clear=False):
            clear_settings_cache()

            with pytest.raises(ConfigurationError) as exc_info:
                get_settings()

        assert "Invalid readthrough settings" in str(exc_info.value)

    def test_cache_dir_must_not_be_a_file(self, temp_dir: Path) -> None:
        a_file = temp_dir / "cache"
        a_file.write_text("")

        with patch.dict(os.environ, {"READTHROUGH_CACHE_DIR": str(a_file)}, clear=False):
            clear_settings_cache()

            with pytest.raises(ConfigurationError):
                get_settings()


class TestSettingsHelpers:
    """Tests for Settings helper methods."""

    def test_ensure_directories(self, mock_env_vars: dict[str, str]) -> None:
        settings = get_settings()
        assert not settings.CACHE_DIR.exists()

        settings.ensure_directories()

        assert settings.CACHE_DIR.is_dir()

    def test_display_dict(self, mock_env_vars: dict[str, str]) -> None:
        display = get_settings().display_dict()

        assert display["CACHE_DIR"] == mock_env_vars["READTHROUGH_CACHE_DIR"]
        assert display["ATOMIC_WRITES"] is True
        assert display["LOG_FILE"] is None
