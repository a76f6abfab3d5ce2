import pytest

from core.errors import ValidationError
from core.models import FillResult, StoreOptions
from store.disk_store import DiskStore
from store.store_factory import build_options, create_store


def test_build_options_defaults():
    opts = build_options()
    assert opts == StoreOptions()
    assert opts.path == "cache/"
    assert opts.ttl == 60
    assert opts.maxsize == 0


def test_build_options_nested_mapping_and_aliases(tmp_path):
    opts = build_options({"options": {"path": str(tmp_path), "zip": True, "reviveBuffers": True}})
    assert opts.path == str(tmp_path)
    assert opts.compress is True
    assert opts.revive_binary_payloads is True


def test_build_options_overrides_win(tmp_path):
    base = StoreOptions(path=str(tmp_path), ttl=5)
    opts = build_options(base, ttl=10, maxsize=100)
    assert opts.ttl == 10
    assert opts.maxsize == 100
    assert opts.path == str(tmp_path)


def test_build_options_unknown_option_raises():
    with pytest.raises(ValidationError):
        build_options({"colour": "blue"})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"path": "  "},
        {"maxsize": -1},
        {"max_entry_size": -5},
        {"fillcallback": "not callable"},
        {"maxsize": "lots"},
        {"max_entry_size": 1.5},
        {"maxsize": True},
        {"ttl": "soon"},
        {"ttl": None},
        {"ttl": float("inf")},
        {"ttl": float("nan")},
    ],
)
def test_build_options_invalid_values_raise(kwargs):
    with pytest.raises(ValidationError):
        build_options(**kwargs)


def test_entry_cap_falls_back_to_maxsize():
    assert StoreOptions(maxsize=100).entry_cap == 100
    assert StoreOptions(maxsize=100, max_entry_size=10).entry_cap == 10
    assert StoreOptions().entry_cap == 0


@pytest.mark.asyncio
async def test_create_store_fills_and_calls_callback(tmp_path):
    first = await create_store(path=str(tmp_path), preventfill=True)
    await first.set("k", "v")

    seen = []
    store = await create_store({"path": str(tmp_path), "fillcallback": seen.append})

    assert isinstance(store, DiskStore)
    assert await store.get("k") == "v"
    assert seen == [FillResult(loaded=1)]


@pytest.mark.asyncio
async def test_create_store_awaits_async_callback(tmp_path):
    seen = []

    async def on_fill(result):
        seen.append(result)

    await create_store(path=str(tmp_path), fillcallback=on_fill)

    assert seen == [FillResult()]


@pytest.mark.asyncio
async def test_create_store_preventfill_skips_fill(tmp_path):
    first = await create_store(path=str(tmp_path), preventfill=True)
    await first.set("k", "v")

    seen = []
    store = await create_store(path=str(tmp_path), preventfill=True, fillcallback=seen.append)

    assert store.keys() == []
    assert seen == [None]


@pytest.mark.asyncio
async def test_create_store_creates_nested_directory(tmp_path):
    d = tmp_path / "deep" / "cache"
    await create_store(path=str(d))
    assert d.is_dir()
