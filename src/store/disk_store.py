"""Disk-backed cache store.

Each entry is written to its own file in the storage directory; the
in-memory index keeps only metadata (filename, expiry, size). Values are
read back from disk on every get.

Mutations (set, delete, reset, cleancache, fill) are serialized by one
asyncio.Lock so overlapping calls on the same key apply in call order.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, List, Optional

from core.clock import expires_at_ms, is_expired
from core.codec import EnvelopeCodec
from core.errors import DiskCacheError, SizeExceededError, StorageError, ValidationError
from core.eviction import Evictor
from core.index import MetadataIndex
from core.models import CacheEntryMetadata, FillResult, StoreOptions, check_ttl
from core.paths import new_storage_name
from store.file_storage import FileStorage
from store.recovery import fill_index

logger = logging.getLogger(__name__)


def _check_key(key: Any) -> str:
    if not isinstance(key, str):
        raise ValidationError(f"Cache key must be a string, got {type(key).__name__}")
    return key


class DiskStore:
    name = "diskstore"

    def __init__(self, options: Optional[StoreOptions] = None) -> None:
        self._options = options or StoreOptions()
        self._storage = FileStorage(directory=self._options.directory)
        self._codec = EnvelopeCodec(
            compress=self._options.compress,
            revive_binary=self._options.revive_binary_payloads,
        )
        self._evictor = Evictor(maxsize=self._options.maxsize)
        self._index = MetadataIndex()

        # Serializes every index mutation; live reads do not take it
        self._lock = asyncio.Lock()

    @property
    def options(self) -> StoreOptions:
        return self._options

    @property
    def current_size(self) -> int:
        return self._index.current_size

    @property
    def index(self) -> MetadataIndex:
        return self._index

    def is_cacheable_value(self, value: Any) -> bool:
        return value is not None

    def keys(self) -> List[str]:
        return self._index.keys()

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> Any:
        """Store value under key and return it.

        ttl overrides the store default when given (0 is a valid value).

        Raises:
          ValidationError for a non-string key, a non-numeric or infinite
          ttl, or an unserializable value,
          SizeExceededError when the encoded entry exceeds the per-entry
          cap (state is left untouched), StorageError when the write fails.
        """
        key = _check_key(key)
        effective_ttl = check_ttl(self._options.ttl if ttl is None else ttl)
        filename = new_storage_name()
        expires_at = expires_at_ms(effective_ttl)

        data = self._codec.encode(key, value, expires_at)

        cap = self._options.entry_cap
        if cap and len(data) > cap:
            raise SizeExceededError(f"Item size too big: {len(data)} bytes exceeds {cap} bytes")

        async with self._lock:
            # Releases the old file and its size before quota accounting
            await self._delete_entry(key)
            await self._evictor.free_up_space(self._index, self._delete_entry)

            try:
                await self._storage.write(filename, data)
            except DiskCacheError:
                await self._discard_partial(filename)
                raise

            self._index.insert(
                CacheEntryMetadata(key=key, filename=filename, expires_at=expires_at, size=len(data))
            )

        logger.debug("Stored key %r in %s (%d bytes)", key, filename, len(data))
        return value

    async def get(self, key: str) -> Any:
        """Return the cached value, or None when absent or expired.

        Live reads do not take the mutation lock. If the file disappears
        because a concurrent set or delete replaced the entry, the read is
        retried once against the current metadata.

        Raises:
          StorageError when the backing file cannot be read and DecodeError
          when its content is invalid; the metadata is kept in both cases.
        """
        key = _check_key(key)
        meta = self._index.lookup(key)
        if meta is None:
            return None

        if is_expired(meta.expires_at):
            async with self._lock:
                # Re-check: the entry may have been replaced while waiting
                current = self._index.lookup(key)
                if current is not None and is_expired(current.expires_at):
                    await self._delete_entry(key)
                    return None
            if current is None:
                return None
            meta = current

        try:
            data = await self._storage.read(meta.filename)
        except StorageError:
            # A set or delete on this key may have swapped the file while we read
            current = self._index.lookup(key)
            if current is None:
                return None
            if current.filename == meta.filename:
                raise
            data = await self._storage.read(current.filename)
        return self._codec.decode(data).value

    async def delete(self, key: str) -> None:
        """Remove key and its file; absent keys are a no-op."""
        key = _check_key(key)
        async with self._lock:
            await self._delete_entry(key)

    async def reset(self, key: Optional[str] = None) -> None:
        if key is not None:
            await self.delete(key)
            return

        async with self._lock:
            await self._delete_all()

    async def cleancache(self) -> None:
        """Reset the store, then remove every regular file left in the directory.

        Also catches files the index never tracked, e.g. ones orphaned by a crash.
        """
        async with self._lock:
            await self._delete_all()

            removed = 0
            for filename in await self._storage.list_files(storage_only=False):
                try:
                    if await self._storage.remove(filename):
                        removed += 1
                except DiskCacheError as e:
                    logger.warning("Could not remove %s during cleancache: %s", filename, e)

        logger.info("Cleaned cache directory %s, removed %d untracked files", self._storage.directory, removed)

    async def fill(self) -> FillResult:
        """Rebuild the index from files in the storage directory, then run the fill callback."""
        async with self._lock:
            result = await fill_index(
                index=self._index,
                storage=self._storage,
                codec=self._codec,
                delete=self._delete_entry,
            )
        await self.notify_fill(result)
        return result

    async def notify_fill(self, result: Optional[FillResult]) -> None:
        callback = self._options.fillcallback
        if callback is None:
            return
        out = callback(result)
        if inspect.isawaitable(out):
            await out

    async def _delete_all(self) -> None:
        # One file at a time; a failing unlink does not stop the reset
        for key in self._index.keys():
            try:
                await self._delete_entry(key)
            except DiskCacheError as e:
                logger.warning("Reset could not remove file for key %r: %s", key, e)

    async def _delete_entry(self, key: str) -> None:
        # Caller must hold self._lock
        meta = self._index.remove(key)
        if meta is None or not meta.filename:
            return
        await self._storage.remove(meta.filename)

    async def _discard_partial(self, filename: str) -> None:
        try:
            await self._storage.remove(filename)
        except DiskCacheError as e:
            logger.warning("Could not remove partially written %s: %s", filename, e)
