"""
Base types for read-through caching.

- Producer / AsyncProducer: zero-argument callables that compute a value on a miss
- CacheResult: the (value, error) pair for callers that prefer not to catch
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterator, TypeVar

from readthrough.exceptions import CacheError, CachePersistError

T = TypeVar("T")

Producer = Callable[[], T]
AsyncProducer = Callable[[], Awaitable[T]]


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    """Outcome of a single lookup.

    A persist failure yields both a usable value and an error, so check
    ``error`` independently of ``value``. Unpacks as ``value, error``.
    """

    value: T | None
    error: CacheError | None = None

    @property
    def ok(self) -> bool:
        """True when the lookup succeeded end to end."""
        return self.error is None

    @property
    def has_value(self) -> bool:
        """True when ``value`` holds a real result (hit, miss, or unpersisted miss)."""
        return self.error is None or isinstance(self.error, CachePersistError)

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def __iter__(self) -> Iterator[object]:
        yield self.value
        yield self.error
