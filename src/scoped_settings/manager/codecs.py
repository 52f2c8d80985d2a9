"""Value codecs used to turn cached values into persisted text and back."""

from __future__ import annotations

import ast
import json
from typing import Any, Protocol, runtime_checkable

from scoped_settings.manager.errors import CodecError


@runtime_checkable
class Codec(Protocol):
    """Contract for setting value serialization."""

    @property
    def name(self) -> str:
        """Short identifier, e.g. 'native', 'json'."""
        ...

    def encode(self, value: Any) -> str:
        """Serialize a value. Raises CodecError when it cannot be represented."""
        ...

    def decode(self, text: str) -> Any:
        """Inverse of encode. Raises CodecError on malformed text."""
        ...


class NativeCodec:
    """Python literal form: ``repr`` to encode, ``ast.literal_eval`` to decode.

    Round-trips None, bools, numbers, strings, bytes and containers of those
    (lists, tuples, dicts, sets) with their exact types.
    """

    name = "native"

    def encode(self, value: Any) -> str:
        text = repr(value)
        # Objects without a literal repr would not survive a reload
        try:
            ast.literal_eval(text)
        except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as exc:
            raise CodecError(
                f"{type(value).__name__} value has no Python literal form"
            ) from exc
        return text

    def decode(self, text: str) -> Any:
        try:
            return ast.literal_eval(text)
        except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as exc:
            raise CodecError(f"Cannot decode native value {text!r}") from exc


class JsonCodec:
    """JSON text. Tuples come back as lists and mapping keys as strings."""

    name = "json"

    def encode(self, value: Any) -> str:
        try:
            return json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise CodecError(f"{type(value).__name__} value is not JSON serializable") from exc

    def decode(self, text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise CodecError(f"Cannot decode JSON value {text!r}") from exc


_REGISTRY: dict[str, type] = {
    NativeCodec.name: NativeCodec,
    JsonCodec.name: JsonCodec,
}


def register_codec(key: str, cls: type) -> None:
    """Register a codec class under a serialization name."""
    _REGISTRY[key] = cls


def get_codec(key: str) -> Codec:
    """Create a codec instance by serialization name."""
    if key not in _REGISTRY:
        available = ", ".join(available_codecs())
        raise CodecError(f"Unknown serialization '{key}'. Available codecs: {available}")
    return _REGISTRY[key]()


def available_codecs() -> list[str]:
    """Return the registered serialization names."""
    return sorted(_REGISTRY.keys())
