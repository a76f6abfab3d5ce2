from __future__ import annotations


class DiskCacheError(Exception):
    """Base error for the disk cache store."""


class ValidationError(DiskCacheError):
    """Raised when options or user input are invalid."""


class SizeExceededError(DiskCacheError):
    """Raised when an encoded entry is larger than the per-entry cap."""


class StorageError(DiskCacheError):
    """Raised when reading, writing or removing a cache file fails."""


class DecodeError(DiskCacheError):
    """Raised when file content is not a valid cache envelope."""
