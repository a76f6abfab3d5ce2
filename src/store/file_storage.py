from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List

from core.errors import StorageError, ValidationError
from core.paths import is_storage_name


"""Filesystem access for cache files.

All blocking calls are offloaded to a thread. Filenames are resolved
under the storage directory with a containment check so a tampered
name can never escape it.
"""


class FileStorage:
    # Async wrapper around one storage directory.

    def __init__(self, *, directory: Path) -> None:
        directory.mkdir(parents=True, exist_ok=True)
        self._directory = directory.resolve()

    @property
    def directory(self) -> Path:
        return self._directory

    def _resolve_under_root(self, filename: str) -> Path:
        raw = (filename or "").strip()
        if not raw:
            raise ValidationError("Filename is empty")

        p = (self._directory / raw).resolve()

        # Containment check: storage names are bare filenames
        if p.parent != self._directory:
            raise ValidationError(f"Filename escapes the storage directory: {filename}")

        return p

    async def read(self, filename: str) -> bytes:
        p = self._resolve_under_root(filename)
        try:
            return await asyncio.to_thread(p.read_bytes)
        except OSError as e:
            raise StorageError(f"Failed to read cache file {filename}: {e}") from e

    async def write(self, filename: str, data: bytes) -> None:
        p = self._resolve_under_root(filename)
        try:
            await asyncio.to_thread(p.write_bytes, data)
        except OSError as e:
            raise StorageError(f"Failed to write cache file {filename}: {e}") from e

    async def remove(self, filename: str) -> bool:
        # Returns False when the file was already gone; that is not an error.
        p = self._resolve_under_root(filename)
        try:
            await asyncio.to_thread(p.unlink)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to remove cache file {filename}: {e}") from e
        return True

    async def list_files(self, *, storage_only: bool = True) -> List[str]:
        """List regular files in the storage directory, sorted by name.

        With storage_only, names not matching the cache naming convention
        are skipped.
        """

        def _do() -> List[str]:
            out: List[str] = []
            for p in self._directory.iterdir():
                if not p.is_file():
                    continue
                if storage_only and not is_storage_name(p.name):
                    continue
                out.append(p.name)
            return sorted(out)

        try:
            return await asyncio.to_thread(_do)
        except OSError as e:
            raise StorageError(f"Failed to list storage directory {self._directory}: {e}") from e
