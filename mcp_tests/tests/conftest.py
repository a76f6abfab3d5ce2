import pytest

import core.clock as clock_mod
from core.models import StoreOptions
from store.disk_store import DiskStore


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool registration."""

    def __init__(self) -> None:
        self.tools = {}

    def tool(self, *, name: str):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator


class FakeClock:
    """Controllable wall clock, in seconds."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def time(self) -> float:
        return self.now


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def fake_clock(monkeypatch):
    clock = FakeClock()
    monkeypatch.setattr(clock_mod.time, "time", clock.time)
    return clock


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def make_store(cache_dir):
    def _make(**kwargs) -> DiskStore:
        kwargs.setdefault("path", str(cache_dir))
        return DiskStore(StoreOptions(**kwargs))
    return _make
