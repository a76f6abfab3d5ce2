"""Dataclasses describing store options and cache entry metadata.

StoreOptions enumerates every recognized store option with its default
and is validated once at construction. CacheEntryMetadata is what the
in-memory index keeps per key (never the value itself).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from core.errors import ValidationError


def check_ttl(ttl: Any) -> float:
    """Return ttl as float seconds; rejects non-numbers and infinities."""
    # bool is an int subclass; reject it explicitly
    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        raise ValidationError(f"ttl must be a number of seconds, got {type(ttl).__name__}")
    if not math.isfinite(ttl):
        raise ValidationError("ttl must be finite")
    return float(ttl)


def _check_byte_count(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValidationError(f"{name} must be >= 0")


@dataclass(frozen=True)
class StoreOptions:
    """Options for a DiskStore.

    Field groups:
    - Storage: path
    - Expiry: ttl (seconds, 0 and negatives allowed)
    - Quota: maxsize, max_entry_size (bytes, 0 disables)
    - Codec: compress, revive_binary_payloads
    - Startup: preventfill, fillcallback
    """

    path: str = "cache/"
    ttl: float = 60

    maxsize: int = 0
    max_entry_size: int = 0

    compress: bool = False
    revive_binary_payloads: bool = False

    preventfill: bool = False
    fillcallback: Optional[Callable[..., Any]] = None

    def __post_init__(self) -> None:
        if not str(self.path or "").strip():
            raise ValidationError("Storage path is empty")
        check_ttl(self.ttl)
        _check_byte_count("maxsize", self.maxsize)
        _check_byte_count("max_entry_size", self.max_entry_size)
        if self.fillcallback is not None and not callable(self.fillcallback):
            raise ValidationError("fillcallback must be callable")

    @property
    def directory(self) -> Path:
        return Path(self.path)

    @property
    def entry_cap(self) -> int:
        # Per-entry cap falls back to the quota; 0 means uncapped.
        return int(self.max_entry_size or self.maxsize)


@dataclass(slots=True)
class CacheEntryMetadata:
    # Index record for one live key; the value stays on disk
    key: str
    filename: str
    expires_at: int  # epoch milliseconds
    size: int  # bytes on disk
    sequence: int = 0  # assigned by MetadataIndex.insert


@dataclass(frozen=True)
class DecodedEntry:
    """Content of a decoded envelope."""

    key: str
    value: Any
    expires_at: int


@dataclass(frozen=True)
class FillResult:
    """Outcome of a recovery pass over the storage directory."""

    loaded: int = 0
    expired: int = 0
    discarded: int = 0
    failed: int = 0
