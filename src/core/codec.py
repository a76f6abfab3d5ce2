"""Envelope codec for cache files.

An envelope is a JSON object holding key, value and expiry, encoded as
UTF-8 and optionally passed through zlib. Binary values are written in
a tagged form ({"type": "Buffer", "data": [...]}) and can be revived to
bytes on decode.
"""

from __future__ import annotations

import json
import zlib
from typing import Any

from core.errors import DecodeError, ValidationError
from core.models import DecodedEntry

BUFFER_TAG = "Buffer"


def _tag_binary(obj: Any) -> Any:
    # json.dumps default hook: only called for objects JSON can't encode
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return {"type": BUFFER_TAG, "data": list(bytes(obj))}
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _revive_binary(obj: dict) -> Any:
    data = obj.get("data")
    if obj.get("type") == BUFFER_TAG and isinstance(data, list) and len(obj) == 2:
        try:
            return bytes(data)
        except (TypeError, ValueError):
            return obj
    return obj


class EnvelopeCodec:
    def __init__(self, *, compress: bool = False, revive_binary: bool = False) -> None:
        self._compress = bool(compress)
        self._revive_binary = bool(revive_binary)

    @property
    def compress(self) -> bool:
        return self._compress

    def encode(self, key: str, value: Any, expires_at: int) -> bytes:
        envelope = {"key": key, "value": value, "expires": int(expires_at)}
        try:
            text = json.dumps(envelope, default=_tag_binary, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Value for key {key!r} cannot be serialized: {e}") from e

        data = text.encode("utf-8")
        if self._compress:
            data = zlib.compress(data)
        return data

    def decode(self, data: bytes) -> DecodedEntry:
        """Parse envelope bytes produced by encode() in the same mode.

        Raises:
          DecodeError for truncated, foreign or wrong-mode content.
        """
        raw = bytes(data or b"")
        try:
            if self._compress:
                raw = zlib.decompress(raw)
            text = raw.decode("utf-8")
            hook = _revive_binary if self._revive_binary else None
            envelope = json.loads(text, object_hook=hook)
        except (zlib.error, UnicodeDecodeError, ValueError) as e:
            raise DecodeError(f"Invalid cache envelope: {e}") from e

        if not isinstance(envelope, dict):
            raise DecodeError("Invalid cache envelope: not an object")

        key = envelope.get("key")
        expires = envelope.get("expires")
        if not isinstance(key, str):
            raise DecodeError("Invalid cache envelope: missing key")
        # bool is an int subclass; reject it explicitly
        if isinstance(expires, bool) or not isinstance(expires, (int, float)):
            raise DecodeError("Invalid cache envelope: missing expiry")

        return DecodedEntry(key=key, value=envelope.get("value"), expires_at=int(expires))
