"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
the default disk store settings (DISK_CACHE_PATH, DISK_CACHE_TTL,
quota limits, codec flags) plus LOG_LEVEL.
"""

from __future__ import annotations

import os

from core.models import StoreOptions


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


# Storage
DISK_CACHE_PATH = os.environ.get("DISK_CACHE_PATH", "cache").strip() or "cache"

# Expiry (seconds)
DISK_CACHE_TTL = _env_float("DISK_CACHE_TTL", 60.0)

# Quota (bytes, 0 disables)
DISK_CACHE_MAXSIZE = _env_int("DISK_CACHE_MAXSIZE", 0)
DISK_CACHE_MAX_ENTRY_SIZE = _env_int("DISK_CACHE_MAX_ENTRY_SIZE", 0)

# Codec / startup
DISK_CACHE_COMPRESS = _env_bool("DISK_CACHE_COMPRESS", False)
DISK_CACHE_REVIVE_BINARY = _env_bool("DISK_CACHE_REVIVE_BINARY", False)
DISK_CACHE_PREVENT_FILL = _env_bool("DISK_CACHE_PREVENT_FILL", False)

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"


def default_store_options() -> StoreOptions:
    return StoreOptions(
        path=DISK_CACHE_PATH,
        ttl=DISK_CACHE_TTL,
        maxsize=DISK_CACHE_MAXSIZE,
        max_entry_size=DISK_CACHE_MAX_ENTRY_SIZE,
        compress=DISK_CACHE_COMPRESS,
        revive_binary_payloads=DISK_CACHE_REVIVE_BINARY,
        preventfill=DISK_CACHE_PREVENT_FILL,
    )
