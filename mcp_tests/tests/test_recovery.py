import pytest

from core.codec import EnvelopeCodec
from core.errors import StorageError
from core.paths import new_storage_name
from core.models import StoreOptions
from store.disk_store import DiskStore


@pytest.mark.asyncio
async def test_fill_restores_entries_and_drops_expired(make_store, cache_dir):
    s = make_store()
    await s.set("RestoreDontSurvive", "data", ttl=-1)
    await s.set("RestoreTest", "test")

    t = make_store()
    result = await t.fill()

    assert result.loaded == 1
    assert result.expired == 1
    assert await t.get("RestoreTest") == "test"
    assert await t.get("RestoreDontSurvive") is None
    assert t.keys() == ["RestoreTest"]
    assert len(list(cache_dir.iterdir())) == 1


@pytest.mark.asyncio
async def test_fill_recomputes_size_from_disk(make_store, cache_dir):
    s = make_store()
    await s.set("a", "x" * 50)
    await s.set("b", {"nested": [1, 2, 3]})

    t = make_store()
    await t.fill()

    on_disk = sum(p.stat().st_size for p in cache_dir.iterdir())
    assert t.current_size == on_disk == s.current_size
    assert t.current_size > 0


@pytest.mark.asyncio
async def test_fill_with_compression(make_store):
    s = make_store(compress=True)
    await s.set("testkey", "value")

    t = make_store(compress=True)
    await t.fill()

    assert await t.get("testkey") == "value"


@pytest.mark.asyncio
async def test_fill_skips_non_cache_files(make_store, cache_dir):
    s = make_store()
    (cache_dir / ".DS_Store").write_text("not JSON data", encoding="utf-8")
    await s.set("key0", "data0")

    # Ungracefully drop the in-memory index
    s.index.clear()
    result = await s.fill()

    assert result.discarded == 0
    assert await s.get("key0") == "data0"
    assert (cache_dir / ".DS_Store").exists()


@pytest.mark.asyncio
async def test_fill_deletes_truncated_files(make_store, cache_dir):
    s = make_store()
    await s.set("getTruncated", "some data...")
    filename = s.index.lookup("getTruncated").filename

    path = cache_dir / filename
    path.write_bytes(path.read_bytes()[:20])

    s.index.clear()
    result = await s.fill()

    assert result.discarded == 1
    assert await s.get("getTruncated") is None
    assert not path.exists()


@pytest.mark.asyncio
async def test_fill_wrong_mode_files_are_discarded(make_store, cache_dir):
    s = make_store(compress=False)
    await s.set("k", "v")

    t = make_store(compress=True)
    result = await t.fill()

    assert result.discarded == 1
    assert t.keys() == []
    assert list(cache_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_fill_keeps_longest_lived_duplicate(cache_dir, fake_clock):
    now_ms = int(fake_clock.now * 1000)
    codec = EnvelopeCodec()
    cache_dir.mkdir()
    older = new_storage_name()
    newer = new_storage_name()
    (cache_dir / older).write_bytes(codec.encode("dup", "old", now_ms + 1_000))
    (cache_dir / newer).write_bytes(codec.encode("dup", "new", now_ms + 60_000))

    s = DiskStore(StoreOptions(path=str(cache_dir)))
    result = await s.fill()

    assert result.discarded == 1
    assert await s.get("dup") == "new"
    assert [p.name for p in cache_dir.iterdir()] == [newer]
    assert s.current_size == (cache_dir / newer).stat().st_size


@pytest.mark.asyncio
async def test_fill_is_idempotent(make_store):
    s = make_store()
    await s.set("a", 1)
    size = s.current_size

    await s.fill()

    assert s.keys() == ["a"]
    assert s.current_size == size
    assert await s.get("a") == 1


@pytest.mark.asyncio
async def test_fill_isolates_read_errors(make_store, monkeypatch):
    s = make_store()
    await s.set("a", 1)
    await s.set("b", 2)
    bad = s.index.lookup("a").filename

    t = make_store()
    orig_read = t._storage.read

    async def flaky_read(filename: str) -> bytes:
        if filename == bad:
            raise StorageError("permission denied")
        return await orig_read(filename)

    monkeypatch.setattr(t._storage, "read", flaky_read)
    result = await t.fill()

    assert result.failed == 1
    assert result.loaded == 1
    assert t.keys() == ["b"]


@pytest.mark.asyncio
async def test_fill_empty_directory_runs_callback(make_store):
    seen = []
    s = make_store(fillcallback=seen.append)

    result = await s.fill()

    assert result.loaded == 0
    assert seen == [result]
