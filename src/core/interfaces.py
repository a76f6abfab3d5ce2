"""Core protocol and interface definitions.

Defines the CacheStore protocol a caching facade expects from a
pluggable backend; DiskStore implements it.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Contract for any cache backend (disk, memory, etc.)."""
    name: str

    async def get(self, key: str) -> Any:
        ...

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> Any:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def reset(self, key: Optional[str] = None) -> None:
        ...

    def keys(self) -> List[str]:
        ...

    def is_cacheable_value(self, value: Any) -> bool:
        ...
