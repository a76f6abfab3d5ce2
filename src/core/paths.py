from __future__ import annotations

import re
import uuid

"""
Storage file naming used across the store.

Cache files are named 'cache_<uuid4>.dat'. Names are minted fresh for
every write and never derived from the cache key.
"""

STORAGE_PREFIX = "cache_"
STORAGE_SUFFIX = ".dat"

_STORAGE_NAME_RE = re.compile(
    r"^cache_[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}\.dat$",
    re.IGNORECASE,
)


def new_storage_name() -> str:
    """Return a fresh, unique storage filename."""
    return f"{STORAGE_PREFIX}{uuid.uuid4()}{STORAGE_SUFFIX}"


def is_storage_name(name: str) -> bool:
    """Check whether a bare filename follows the storage naming convention.

    Filters out foreign files such as '.DS_Store' or editor backups.
    """
    return bool(_STORAGE_NAME_RE.match(name or ""))
