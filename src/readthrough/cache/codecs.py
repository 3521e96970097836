"""
Serialization strategies for cached values.

A codec is an encode/decode pair plus the file extension it owns. The cache
never inspects values itself, so any shape a codec can round-trip is
supported.

- JsonCodec: orjson for untyped values, pydantic TypeAdapter when a target
  shape is given (models, dataclasses, ``list[int]``, ...)
"""

from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

import orjson
from pydantic import TypeAdapter

T = TypeVar("T")


@runtime_checkable
class CacheCodec(Protocol[T]):
    """Encode/decode pair used to persist cached values."""

    extension: str

    def encode(self, value: T) -> bytes:
        """Serialize a value to bytes."""
        ...

    def decode(self, data: bytes) -> T:
        """Deserialize bytes into a value."""
        ...


class JsonCodec(Generic[T]):
    """JSON codec.

    Without a shape, values are plain JSON (dicts, lists, str, numbers,
    bool, None) plus whatever orjson serializes natively (dataclasses,
    datetimes, UUIDs). With a shape, decoding validates into it and a
    file holding a different shape fails to decode.

    Args:
        shape: Optional target type for decoding.
        indent: Pretty-print with two-space indentation.
    """

    extension = "json"

    def __init__(self, shape: type[T] | Any | None = None, indent: bool = False) -> None:
        self.shape = shape
        self.indent = indent
        self._adapter: TypeAdapter[T] | None = (
            TypeAdapter(shape) if shape is not None else None
        )

    def encode(self, value: T) -> bytes:
        if self._adapter is not None:
            # Only values of the declared shape are encoded
            value = self._adapter.dump_python(
                self._adapter.validate_python(value), mode="json"
            )
        option = orjson.OPT_INDENT_2 if self.indent else 0
        return orjson.dumps(value, option=option)

    def decode(self, data: bytes) -> T:
        if self._adapter is not None:
            return self._adapter.validate_json(data)
        return orjson.loads(data)

    def __repr__(self) -> str:
        return f"JsonCodec(shape={self.shape!r})"


_DEFAULT_CODEC: JsonCodec[Any] = JsonCodec()


def default_codec() -> JsonCodec[Any]:
    """Get the shared untyped JSON codec."""
    return _DEFAULT_CODEC
