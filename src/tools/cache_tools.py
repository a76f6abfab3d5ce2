"""MCP tools that expose a cache store to agents.

Registers cache_get, cache_set, cache_delete, cache_keys, cache_reset
and cache_clean. Values must be JSON-compatible; the store is injected
by the server.
"""

from __future__ import annotations

from typing import Any, List, Optional

from mcp.server.fastmcp import FastMCP

from core.errors import ValidationError
from store.disk_store import DiskStore


def _require_key(key: str) -> str:
    k = (key or "").strip()
    if not k:
        raise ValidationError("Missing cache key")
    return k


def register(mcp: FastMCP, *, store: DiskStore) -> None:
    @mcp.tool(name="cache_get")
    async def cache_get(key: str) -> Any:
        """Return the cached value for a key, or null when absent or expired.

        Params:
          - key: cache key (required).

        Raises:
          ValidationError for an empty key; StorageError or DecodeError when
          the backing file cannot be read.
        """
        return await store.get(_require_key(key))

    @mcp.tool(name="cache_set")
    async def cache_set(key: str, value: Any, ttl: Optional[float] = None) -> Any:
        """Store a JSON-compatible value and return it.

        Params:
          - key: cache key (required).
          - value: value to cache; null values are rejected.
          - ttl: seconds to live; defaults to the store TTL.

        Raises:
          ValidationError for an empty key or non-cacheable value;
          SizeExceededError when the entry is larger than the per-entry cap.
        """
        k = _require_key(key)
        if not store.is_cacheable_value(value):
            raise ValidationError("Value is not cacheable")
        return await store.set(k, value, ttl=ttl)

    @mcp.tool(name="cache_delete")
    async def cache_delete(key: str) -> bool:
        """Delete a key. Returns True whether or not the key existed."""
        await store.delete(_require_key(key))
        return True

    @mcp.tool(name="cache_keys")
    async def cache_keys() -> List[str]:
        """List the keys currently tracked by the store."""
        return store.keys()

    @mcp.tool(name="cache_reset")
    async def cache_reset(key: Optional[str] = None) -> bool:
        """Delete one key, or every entry when no key is given."""
        await store.reset(_require_key(key) if key is not None else None)
        return True

    @mcp.tool(name="cache_clean")
    async def cache_clean() -> bool:
        """Delete every entry and every other file left in the cache directory."""
        await store.cleancache()
        return True
