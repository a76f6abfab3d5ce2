"""Factory for building a ready-to-use DiskStore.

Exposes create_store which normalizes options, constructs the store and
runs the startup fill (unless preventfill is set).
"""

from __future__ import annotations

import dataclasses
from typing import Any, Mapping, Union

from core.errors import ValidationError
from core.models import StoreOptions
from store.disk_store import DiskStore

# Option names accepted in mappings besides the StoreOptions field names
_ALIASES = {
    "zip": "compress",
    "reviveBuffers": "revive_binary_payloads",
    "reviveBinaryPayloads": "revive_binary_payloads",
    "maxEntrySize": "max_entry_size",
}

_FIELDS = {f.name for f in dataclasses.fields(StoreOptions)}


def build_options(
    options: Union[StoreOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> StoreOptions:
    """
    Normalize options into a validated StoreOptions.

    Accepts a StoreOptions, a plain mapping, or a mapping nesting the real
    options under "options". Keyword overrides win over both.
    """
    if isinstance(options, StoreOptions):
        base = {name: getattr(options, name) for name in _FIELDS}
    elif options is None:
        base = {}
    elif isinstance(options, Mapping):
        nested = options.get("options")
        base = dict(nested) if isinstance(nested, Mapping) else dict(options)
    else:
        raise ValidationError(f"Unsupported options type: {type(options).__name__}")

    merged: dict = {}
    for name, value in {**base, **overrides}.items():
        field = _ALIASES.get(name, name)
        if field not in _FIELDS:
            raise ValidationError(f"Unknown store option: {name}")
        merged[field] = value

    return StoreOptions(**merged)


async def create_store(
    options: Union[StoreOptions, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> DiskStore:
    store = DiskStore(build_options(options, **overrides))

    if store.options.preventfill:
        await store.notify_fill(None)
    else:
        await store.fill()

    return store

