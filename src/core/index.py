"""In-memory metadata index for the disk cache.

Maps each key to its CacheEntryMetadata and keeps the aggregate byte
size of all tracked entries. Values never live here.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import List, Optional

from core.models import CacheEntryMetadata


class MetadataIndex:
    # Not synchronized; the owning store serializes mutations
    def __init__(self) -> None:
        self._entries: "OrderedDict[str, CacheEntryMetadata]" = OrderedDict()
        self._current_size = 0
        self._sequence = 0

    @property
    def current_size(self) -> int:
        return self._current_size

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def lookup(self, key: str) -> Optional[CacheEntryMetadata]:
        return self._entries.get(key)

    def insert(self, metadata: CacheEntryMetadata) -> None:
        # Overwrite keeps current_size exact even if the caller did not delete first
        old = self._entries.pop(metadata.key, None)
        if old is not None:
            self._current_size -= old.size

        self._sequence += 1
        metadata.sequence = self._sequence
        self._entries[metadata.key] = metadata
        self._current_size += metadata.size

    def remove(self, key: str) -> Optional[CacheEntryMetadata]:
        old = self._entries.pop(key, None)
        if old is not None:
            self._current_size -= old.size
        return old

    def all(self) -> List[CacheEntryMetadata]:
        return list(self._entries.values())

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def clear(self) -> None:
        self._entries.clear()
        self._current_size = 0
