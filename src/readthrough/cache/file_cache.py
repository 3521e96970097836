"""
File-based read-through cache.

One file per key at ``<cache_dir>/<cache_key>.<ext>``. On a hit the file is
decoded and returned; on a miss the producer runs once and its value is
written back. Entries are never updated or deleted here; invalidation is
removing the file.

The cache directory must already exist. Keys are used verbatim, so a key
that is not path-safe surfaces as a file-system error.

Concurrent misses on the same key are not coordinated: both callers run
the producer and the last write wins. ``atomic=True`` makes each write a
temp-file-plus-rename so readers never observe a partially written file.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from readthrough.cache.base import AsyncProducer, CacheResult, Producer
from readthrough.cache.codecs import CacheCodec, default_codec
from readthrough.config import Settings, get_settings
from readthrough.exceptions import (
    CacheDecodeError,
    CacheEncodeError,
    CacheError,
    CachePersistError,
    CacheReadError,
    CacheStatError,
    CacheWriteError,
    ProducerError,
)
from readthrough.logging import get_logger, log_context

logger = get_logger(__name__)

T = TypeVar("T")

# rw-r--r--, before umask
CACHE_FILE_MODE = 0o644


def cache_file_path(cache_key: str, cache_dir: str | Path, extension: str = "json") -> Path:
    """Get the file backing a cache key.

    Args:
        cache_key: Caller-chosen key, used verbatim as the file stem.
        cache_dir: Existing cache directory.
        extension: Codec file extension, without the dot.

    Returns:
        ``<cache_dir>/<cache_key>.<extension>``
    """
    return Path(cache_dir) / f"{cache_key}.{extension}"


def _cache_file_exists(path: Path, cache_key: str) -> bool:
    # Only absence is a miss. Other stat failures (e.g. EACCES on the
    # directory) are raised so they are not mistaken for an empty cache.
    try:
        path.stat()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise CacheStatError("error checking cache file", cache_key, path) from e
    return True


def _load(path: Path, cache_key: str, codec: CacheCodec[T]) -> T:
    with log_context(phase="lookup"):
        try:
            data = path.read_bytes()
        except OSError as e:
            raise CacheReadError("error reading cache file", cache_key, path) from e

        try:
            value = codec.decode(data)
        except Exception as e:
            raise CacheDecodeError(
                "error parsing cache file", cache_key, path, {"size": len(data)}
            ) from e

        logger.debug("Cache hit", path=str(path), size=len(data))
        return value


def _write_bytes(path: Path, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CACHE_FILE_MODE)
    with os.fdopen(fd, "wb") as f:
        f.write(data)


def _write_bytes_atomic(path: Path, data: bytes) -> None:
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates 0600
        os.chmod(tmp_name, CACHE_FILE_MODE)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _store(value: T, cache_key: str, path: Path, codec: CacheCodec[T], atomic: bool) -> None:
    with log_context(phase="persist"):
        try:
            data = codec.encode(value)
        except Exception as e:
            raise CacheEncodeError("error encoding data", cache_key, path, value) from e

        try:
            if atomic:
                _write_bytes_atomic(path, data)
            else:
                _write_bytes(path, data)
        except OSError as e:
            raise CacheWriteError(
                "error writing cache file", cache_key, path, value, {"size": len(data)}
            ) from e

        logger.debug("Cached value", path=str(path), size=len(data), atomic=atomic)


def fetch_with_cache(
    producer: Producer[T],
    cache_key: str,
    cache_dir: str | Path,
    codec: CacheCodec[T] | None = None,
    *,
    atomic: bool = False,
) -> T:
    """Return the cached value for a key, computing and caching it on a miss.

    Args:
        producer: Zero-argument callable, invoked at most once and only on a miss.
        cache_key: Key naming the cache file.
        cache_dir: Existing directory holding cache files.
        codec: Serialization strategy. Defaults to untyped JSON.
        atomic: Write through a temp file and rename.

    Returns:
        The decoded cached value on a hit, the producer's value on a miss.

    Raises:
        CacheStatError: The cache file could not be checked.
        CacheReadError: The cache file exists but could not be read.
        CacheDecodeError: The cache file does not decode.
        ProducerError: The producer raised. Nothing is cached.
        CacheEncodeError: The computed value could not be serialized.
            The value is available as ``.value``.
        CacheWriteError: The cache file could not be written.
            The value is available as ``.value``.
    """
    if codec is None:
        codec = default_codec()
    path = cache_file_path(cache_key, cache_dir, codec.extension)

    with log_context(cache_key=cache_key):
        if _cache_file_exists(path, cache_key):
            return _load(path, cache_key, codec)

        logger.debug("Cache miss", path=str(path))
        with log_context(phase="compute"):
            try:
                value = producer()
            except Exception as e:
                raise ProducerError("error fetching data", cache_key, path) from e

        _store(value, cache_key, path, codec, atomic)
        return value


async def afetch_with_cache(
    producer: AsyncProducer[T],
    cache_key: str,
    cache_dir: str | Path,
    codec: CacheCodec[T] | None = None,
    *,
    atomic: bool = False,
) -> T:
    """Async variant of fetch_with_cache for coroutine producers.

    File I/O runs in a worker thread; the producer is awaited on the
    calling loop. Raises the same errors as fetch_with_cache.
    """
    if codec is None:
        codec = default_codec()
    path = cache_file_path(cache_key, cache_dir, codec.extension)

    with log_context(cache_key=cache_key):
        if await asyncio.to_thread(_cache_file_exists, path, cache_key):
            return await asyncio.to_thread(_load, path, cache_key, codec)

        logger.debug("Cache miss", path=str(path))
        with log_context(phase="compute"):
            try:
                value = await producer()
            except Exception as e:
                raise ProducerError("error fetching data", cache_key, path) from e

        await asyncio.to_thread(_store, value, cache_key, path, codec, atomic)
        return value


def try_fetch_with_cache(
    producer: Producer[T],
    cache_key: str,
    cache_dir: str | Path,
    codec: CacheCodec[T] | None = None,
    *,
    atomic: bool = False,
) -> CacheResult[T]:
    """Like fetch_with_cache, but return ``(value, error)`` instead of raising.

    ``value`` is None for lookup and producer failures. After an encode or
    write failure it is the computed value and ``error`` is also set.
    """
    try:
        value = fetch_with_cache(producer, cache_key, cache_dir, codec, atomic=atomic)
    except CachePersistError as e:
        return CacheResult(e.value, e)
    except CacheError as e:
        return CacheResult(None, e)
    return CacheResult(value)


class FileCache:
    """Read-through cache bound to one directory and codec.

    Example:
        cache = FileCache(".cache")
        filings = cache.fetch(lambda: client.get_filings("AAPL"), "filings_AAPL")
    """

    def __init__(
        self,
        cache_dir: str | Path,
        codec: CacheCodec[Any] | None = None,
        atomic_writes: bool = False,
    ) -> None:
        self.cache_dir = Path(cache_dir)
        self.codec = codec if codec is not None else default_codec()
        self.atomic_writes = atomic_writes

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        codec: CacheCodec[Any] | None = None,
    ) -> FileCache:
        """Build a cache from READTHROUGH_* settings."""
        settings = settings or get_settings()
        return cls(settings.cache_dir, codec=codec, atomic_writes=settings.atomic_writes)

    def path_for(self, cache_key: str) -> Path:
        """Get the file backing a cache key."""
        return cache_file_path(cache_key, self.cache_dir, self.codec.extension)

    def fetch(self, producer: Producer[T], cache_key: str) -> T:
        return fetch_with_cache(
            producer, cache_key, self.cache_dir, self.codec, atomic=self.atomic_writes
        )

    def try_fetch(self, producer: Producer[T], cache_key: str) -> CacheResult[T]:
        return try_fetch_with_cache(
            producer, cache_key, self.cache_dir, self.codec, atomic=self.atomic_writes
        )

    async def afetch(self, producer: AsyncProducer[T], cache_key: str) -> T:
        return await afetch_with_cache(
            producer, cache_key, self.cache_dir, self.codec, atomic=self.atomic_writes
        )

    def __repr__(self) -> str:
        return f"FileCache(cache_dir={str(self.cache_dir)!r}, codec={self.codec!r})"
