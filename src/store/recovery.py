"""Startup recovery: rebuild the metadata index from cache files.

Files are processed one at a time. A file that cannot be read is
skipped; a file that cannot be decoded is deleted; an entry that has
already expired is inserted and deleted right away. No single file can
abort the scan.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from core.clock import is_expired
from core.codec import EnvelopeCodec
from core.errors import DecodeError, DiskCacheError
from core.index import MetadataIndex
from core.models import CacheEntryMetadata, FillResult
from store.file_storage import FileStorage

logger = logging.getLogger(__name__)


async def fill_index(
    *,
    index: MetadataIndex,
    storage: FileStorage,
    codec: EnvelopeCodec,
    delete: Callable[[str], Awaitable[None]],
) -> FillResult:
    loaded = expired = discarded = failed = 0

    try:
        filenames = await storage.list_files(storage_only=True)
    except DiskCacheError as e:
        logger.warning("Cache fill skipped, directory not listable: %s", e)
        return FillResult()

    for filename in filenames:
        try:
            data = await storage.read(filename)
        except DiskCacheError as e:
            logger.warning("Cache fill skipped %s: %s", filename, e)
            failed += 1
            continue

        try:
            entry = codec.decode(data)
        except DecodeError as e:
            # Most likely a write interrupted by a crash
            logger.warning("Cache fill discarding %s: %s", filename, e)
            discarded += 1
            try:
                await storage.remove(filename)
            except DiskCacheError as unlink_err:
                logger.warning("Could not remove undecodable file %s: %s", filename, unlink_err)
            continue

        existing = index.lookup(entry.key)
        if existing is not None:
            if existing.filename == filename:
                loaded += 1
                continue
            if existing.expires_at >= entry.expires_at:
                # Duplicate key left behind by an earlier crash; keep the longer-lived copy
                discarded += 1
                try:
                    await storage.remove(filename)
                except DiskCacheError as e:
                    logger.warning("Could not remove duplicate file %s: %s", filename, e)
                continue
            try:
                await delete(entry.key)
            except DiskCacheError as e:
                logger.warning("Could not remove duplicate file %s: %s", existing.filename, e)
            discarded += 1

        # Size is the raw on-disk length, never a value carried in the envelope
        index.insert(
            CacheEntryMetadata(
                key=entry.key,
                filename=filename,
                expires_at=entry.expires_at,
                size=len(data),
            )
        )

        if is_expired(entry.expires_at):
            expired += 1
            try:
                await delete(entry.key)
            except DiskCacheError as e:
                logger.warning("Could not remove expired file %s: %s", filename, e)
            continue

        loaded += 1

    result = FillResult(loaded=loaded, expired=expired, discarded=discarded, failed=failed)
    logger.info(
        "Cache fill from %s: %d loaded, %d expired, %d discarded, %d failed",
        storage.directory,
        result.loaded,
        result.expired,
        result.discarded,
        result.failed,
    )
    return result
