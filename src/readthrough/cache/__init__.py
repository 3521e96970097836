"""
Cache package for read-through persistence.

This package provides:
- File cache (file_cache.py): one file per key, producer invoked on a miss
- Codecs (codecs.py): encode/decode strategies that own the file extension
- Base types (base.py): producer aliases and CacheResult
"""

from readthrough.cache.base import AsyncProducer, CacheResult, Producer
from readthrough.cache.codecs import CacheCodec, JsonCodec, default_codec
from readthrough.cache.file_cache import (
    CACHE_FILE_MODE,
    FileCache,
    afetch_with_cache,
    cache_file_path,
    fetch_with_cache,
    try_fetch_with_cache,
)

__all__ = [
    "AsyncProducer",
    "CACHE_FILE_MODE",
    "CacheCodec",
    "CacheResult",
    "FileCache",
    "JsonCodec",
    "Producer",
    "afetch_with_cache",
    "cache_file_path",
    "default_codec",
    "fetch_with_cache",
    "try_fetch_with_cache",
]
