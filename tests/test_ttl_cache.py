"""
Tests for the in-process TTL cache.

Expiry is driven by an injected fake monotonic clock.
"""

import threading

import pytest


class TestTTLCache:
    """Tests for TTLCache get/set/expiry."""

    def test_miss_on_empty(self, monotonic) -> None:
        from app.infrastructure.market.ttl_cache import TTLCache

        cache = TTLCache(clock=monotonic)
        assert cache.get("missing") is None
        assert cache.stats["misses"] == 1

    def test_hit_until_ttl_then_miss(self, monotonic) -> None:
        from app.infrastructure.market.ttl_cache import TTLCache

        cache = TTLCache(default_ttl=120, clock=monotonic)
        cache.set(("risk", "turkey", "energy"), "value")

        monotonic.advance(120)
        assert cache.get(("risk", "turkey", "energy")) == "value"

        monotonic.advance(0.001)
        assert cache.get(("risk", "turkey", "energy")) is None
        assert cache.stats["evictions"] == 1
        assert len(cache) == 0

    def test_per_entry_ttl_overrides_default(self, monotonic) -> None:
        from app.infrastructure.market.ttl_cache import TTLCache

        cache = TTLCache(default_ttl=120, clock=monotonic)
        cache.set("short", 1, ttl=5)
        monotonic.advance(6)
        assert cache.get("short") is None

    def test_last_writer_wins(self, monotonic) -> None:
        from app.infrastructure.market.ttl_cache import TTLCache

        cache = TTLCache(clock=monotonic)
        cache.set("k", "first")
        cache.set("k", "second")
        assert cache.get("k") == "second"

    def test_invalidate_all(self, monotonic) -> None:
        from app.infrastructure.market.ttl_cache import TTLCache

        cache = TTLCache(clock=monotonic)
        for i in range(5):
            cache.set(i, i)
        cache.invalidate_all()

        assert all(cache.get(i) is None for i in range(5))
        assert cache.stats["invalidations"] == 1
        assert cache.stats["entries"] == 0

    def test_invalidate_single_key(self, monotonic) -> None:
        from app.infrastructure.market.ttl_cache import TTLCache

        cache = TTLCache(clock=monotonic)
        cache.set("a", 1)
        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False

    def test_rejects_non_positive_ttl(self) -> None:
        from app.infrastructure.market.ttl_cache import TTLCache

        with pytest.raises(ValueError):
            TTLCache(default_ttl=0)

    def test_concurrent_writers_leave_a_written_value(self) -> None:
        from app.infrastructure.market.ttl_cache import TTLCache

        cache = TTLCache()
        written = set(range(8))

        def writer(value: int) -> None:
            for _ in range(200):
                cache.set("shared", value)
                assert cache.get("shared") in written

        threads = [threading.Thread(target=writer, args=(v,)) for v in written]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert cache.get("shared") in written
