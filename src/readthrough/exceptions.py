"""
Custom exception hierarchy for the read-through cache.

All exceptions inherit from ReadthroughError, which provides optional context
for structured error handling and logging. Each cache failure names the phase
that failed; the lower-level cause is chained with ``raise ... from``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class ReadthroughError(Exception):
    """Base exception for all readthrough errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        text = self.message
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            text = f"{text} ({ctx_str})"
        if self.__cause__ is not None:
            text = f"{text}: {self.__cause__}"
        return text

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (self.__class__, (self.message, self.context))


class ConfigurationError(ReadthroughError):
    """Raised when configuration is invalid or missing.

    Examples:
        - CACHE_DIR points at a regular file
        - Unknown LOG_LEVEL
    """

    pass


class CacheError(ReadthroughError):
    """Base class for failures of a single cache lookup.

    Attributes:
        cache_key: The key that was being resolved.
        path: The cache file path derived from the key.
    """

    def __init__(
        self,
        message: str,
        cache_key: str,
        path: Path,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = {"cache_key": cache_key, "path": str(path)}
        ctx.update(context or {})
        super().__init__(message, ctx)
        self.cache_key = cache_key
        self.path = path

    def __reduce__(self) -> tuple[Any, ...]:
        return (self.__class__, (self.message, self.cache_key, self.path, self.context))


class CacheStatError(CacheError):
    """Raised when checking for the cache file fails for a reason other than absence.

    A permission error on the cache directory lands here instead of being
    treated as a miss. The producer is not invoked.
    """

    pass


class CacheReadError(CacheError):
    """Raised when the cache file exists but could not be read."""

    pass


class CacheDecodeError(CacheError):
    """Raised when the cache file content does not parse into the expected shape.

    The file is left untouched; delete it to force a recompute.
    """

    pass


class ProducerError(CacheError):
    """Raised when the caller-supplied producer fails. Nothing is cached."""

    pass


class CachePersistError(CacheError):
    """A value was computed but could not be persisted.

    The computed value is still usable and is carried on ``value``.
    Callers that only care about the value can catch this and read it.
    """

    def __init__(
        self,
        message: str,
        cache_key: str,
        path: Path,
        value: Any,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, cache_key, path, context)
        self.value = value

    def __reduce__(self) -> tuple[Any, ...]:
        return (
            self.__class__,
            (self.message, self.cache_key, self.path, self.value, self.context),
        )


class CacheEncodeError(CachePersistError):
    """Raised when the freshly computed value could not be serialized."""

    pass


class CacheWriteError(CachePersistError):
    """Raised when the serialized bytes could not be written to the cache file."""

    pass
