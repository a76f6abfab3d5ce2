"""Size-bounded eviction for the disk cache.

Two phases, run only while the tracked size is over quota:
1. Expiry sweep: drop every entry whose expiry has passed.
2. TTL proximity: drop live entries soonest-to-expire first, ties
   broken by insertion order, until the quota is met.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from core.clock import is_expired
from core.errors import DiskCacheError
from core.index import MetadataIndex

logger = logging.getLogger(__name__)

DeleteFn = Callable[[str], Awaitable[None]]


class Evictor:
    def __init__(self, *, maxsize: int) -> None:
        self._maxsize = max(0, int(maxsize))

    @property
    def maxsize(self) -> int:
        return self._maxsize

    def _over_quota(self, index: MetadataIndex) -> bool:
        return index.current_size > self._maxsize

    async def free_up_space(self, index: MetadataIndex, delete: DeleteFn) -> int:
        # Returns the number of evicted entries; maxsize == 0 disables eviction
        if not self._maxsize or not self._over_quota(index):
            return 0

        evicted = await self._sweep_expired(index, delete)

        if not self._over_quota(index):
            return evicted

        candidates = sorted(index.all(), key=lambda m: (m.expires_at, m.sequence))
        for meta in candidates:
            if not self._over_quota(index):
                break
            await self._delete_quietly(delete, meta.key)
            evicted += 1

        if evicted:
            logger.debug("Evicted %d entries, current size %d/%d bytes", evicted, index.current_size, self._maxsize)
        return evicted

    async def _sweep_expired(self, index: MetadataIndex, delete: DeleteFn) -> int:
        removed = 0
        for meta in index.all():
            if is_expired(meta.expires_at):
                await self._delete_quietly(delete, meta.key)
                removed += 1
        return removed

    async def _delete_quietly(self, delete: DeleteFn, key: str) -> None:
        # The delete path drops the metadata before touching the file, so a
        # failure here only leaves an orphaned file behind.
        try:
            await delete(key)
        except DiskCacheError as e:
            logger.warning("Eviction of key %r could not remove its file: %s", key, e)
