"""Tests for the TTL cache."""
from __future__ import annotations

import pytest

from hospital_admin.app.services.cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


class TestTTLCache:
    def test_hit_before_expiry(self, clock: FakeClock) -> None:
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.set("k", [1, 2])
        clock.now += 59
        assert cache.get("k") == [1, 2]

    def test_entry_expires(self, clock: FakeClock) -> None:
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.set("k", "v")
        clock.now += 60
        assert cache.get("k") is None
        assert cache.get("k", "fallback") == "fallback"
        assert len(cache) == 0

    def test_oldest_evicted_when_full(self, clock: FakeClock) -> None:
        cache = TTLCache(ttl_seconds=60, max_entries=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert cache.get("a") is None
        assert cache.get("b") == 2
        assert cache.get("c") == 3

    def test_rewrite_refreshes_position_and_age(self, clock: FakeClock) -> None:
        cache = TTLCache(ttl_seconds=60, max_entries=2, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        clock.now += 30
        cache.set("a", 10)
        cache.set("c", 3)
        assert cache.get("b") is None
        clock.now += 45
        assert cache.get("a") == 10

    def test_get_or_load_calls_loader_once(self, clock: FakeClock) -> None:
        cache = TTLCache(ttl_seconds=60, clock=clock)
        calls = []

        def loader() -> list[str]:
            calls.append(1)
            return ["row"]

        assert cache.get_or_load("rows", loader) == ["row"]
        assert cache.get_or_load("rows", loader) == ["row"]
        assert len(calls) == 1

        clock.now += 61
        cache.get_or_load("rows", loader)
        assert len(calls) == 2

    def test_cached_none_is_a_hit(self, clock: FakeClock) -> None:
        cache = TTLCache(ttl_seconds=60, clock=clock)
        calls = []
        cache.get_or_load("k", lambda: calls.append(1))
        cache.get_or_load("k", lambda: calls.append(1))
        assert calls == [1]

    def test_invalidate(self, clock: FakeClock) -> None:
        cache = TTLCache(ttl_seconds=60, clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate("a")
        assert cache.get("a") is None
        assert cache.get("b") == 2
        cache.invalidate()
        assert len(cache) == 0

    @pytest.mark.parametrize(("ttl", "size"), [(0, 10), (-1, 10), (60, 0)])
    def test_rejects_bad_limits(self, ttl: float, size: int) -> None:
        with pytest.raises(ValueError):
            TTLCache(ttl_seconds=ttl, max_entries=size)
