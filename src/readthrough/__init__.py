"""
Generic read-through file cache.

Given a key and a producer, return the value persisted for that key if
there is one, otherwise call the producer, persist its result, and return it.
"""

from readthrough.cache import (
    CacheResult,
    FileCache,
    JsonCodec,
    afetch_with_cache,
    cache_file_path,
    fetch_with_cache,
    try_fetch_with_cache,
)
from readthrough.exceptions import (
    CacheDecodeError,
    CacheEncodeError,
    CacheError,
    CachePersistError,
    CacheReadError,
    CacheStatError,
    CacheWriteError,
    ProducerError,
    ReadthroughError,
)

__version__ = "0.1.0"

__all__ = [
    "CacheDecodeError",
    "CacheEncodeError",
    "CacheError",
    "CachePersistError",
    "CacheReadError",
    "CacheResult",
    "CacheStatError",
    "CacheWriteError",
    "FileCache",
    "JsonCodec",
    "ProducerError",
    "ReadthroughError",
    "afetch_with_cache",
    "cache_file_path",
    "fetch_with_cache",
    "try_fetch_with_cache",
]
