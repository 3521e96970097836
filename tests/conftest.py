"""
Pytest configuration and fixtures for readthrough tests.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Generator
from unittest.mock import patch

import pytest

from readthrough.config import Settings, clear_settings_cache


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test outputs."""
    return tmp_path


@pytest.fixture
def cache_dir(temp_dir: Path) -> Path:
    """Provide an existing, empty cache directory."""
    path = temp_dir / "cache"
    path.mkdir()
    return path


class CountingProducer:
    """Producer that records how often it was called."""

    def __init__(self, value: Any = None, error: Exception | None = None) -> None:
        self.value = value
        self.error = error
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.value


@pytest.fixture
def make_producer() -> Callable[..., CountingProducer]:
    """Factory for counting producers."""
    return CountingProducer


@pytest.fixture
def mock_env_vars(temp_dir: Path) -> Generator[dict[str, str], None, None]:
    """Provide mock READTHROUGH_* environment variables."""
    env_vars = {
        "READTHROUGH_CACHE_DIR": str(temp_dir / "env_cache"),
        "READTHROUGH_ATOMIC_WRITES": "true",
        "READTHROUGH_LOG_LEVEL": "debug",
    }

    with patch.dict(os.environ, env_vars, clear=False):
        clear_settings_cache()
        yield env_vars


@pytest.fixture
def mock_settings(mock_env_vars: dict[str, str]) -> Generator[Settings, None, None]:
    """Provide a Settings instance with its cache directory created."""
    from readthrough.config import get_settings

    settings = get_settings()
    settings.ensure_directories()
    yield settings
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Automatically reset settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()
