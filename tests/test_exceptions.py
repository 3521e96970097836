"""
Tests for the exception hierarchy.
"""

from __future__ import annotations

import pickle
from pathlib import Path

from readthrough.exceptions import (
    CacheDecodeError,
    CacheEncodeError,
    CacheWriteError,
    ConfigurationError,
    ProducerError,
)


class TestPickling:
    """Tests that errors survive a process boundary."""

    def test_cache_error_round_trips(self) -> None:
        error = ProducerError("error fetching data", "k", Path("/tmp/cache/k.json"))

        restored = pickle.loads(pickle.dumps(error))

        assert type(restored) is ProducerError
        assert restored.message == "error fetching data"
        assert restored.cache_key == "k"
        assert restored.path == Path("/tmp/cache/k.json")
        assert restored.context == error.context

    def test_extra_context_is_kept(self) -> None:
        error = CacheDecodeError(
            "error parsing cache file", "k", Path("/c/k.json"), {"size": 3}
        )

        restored = pickle.loads(pickle.dumps(error))

        assert restored.context == {"cache_key": "k", "path": "/c/k.json", "size": 3}
        assert str(restored) == str(error)

    def test_persist_error_keeps_value(self) -> None:
        for cls in (CacheEncodeError, CacheWriteError):
            error = cls("error writing cache file", "k", Path("/c/k.json"), {"x": [1]})

            restored = pickle.loads(pickle.dumps(error))

            assert type(restored) is cls
            assert restored.value == {"x": [1]}
            assert restored.cache_key == "k"

    def test_base_error_round_trips(self) -> None:
        error = ConfigurationError("Invalid readthrough settings", {"errors": 2})

        restored = pickle.loads(pickle.dumps(error))

        assert restored.message == error.message
        assert restored.context == {"errors": 2}


class TestMessages:
    """Tests for error rendering."""

    def test_str_includes_context_and_cause(self) -> None:
        try:
            try:
                raise OSError("disk full")
            except OSError as e:
                raise CacheWriteError(
                    "error writing cache file", "k", Path("/c/k.json"), 1
                ) from e
        except CacheWriteError as error:
            text = str(error)

        assert text.startswith("error writing cache file (cache_key='k'")
        assert text.endswith(": disk full")
