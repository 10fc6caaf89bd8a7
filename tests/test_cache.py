"""Tests for the response cache."""

import itertools
import threading

from opensurvey.source.cache import ResponseCache, make_key


class FakeClock:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestMakeKey:
    """Test make_key."""

    def test_parameters_are_sorted(self):
        """Parameter order does not change the key."""
        assert make_key("responses", {"offset": 0, "limit": 50}) == (
            "responses:limit=50|offset=0"
        )
        assert make_key("responses", {"limit": 50, "offset": 0}) == (
            "responses:limit=50|offset=0"
        )


class TestResponseCache:
    """Test ResponseCache."""

    def test_hit_within_ttl(self):
        """Values are served until the TTL elapses."""
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=120, clock=clock)
        cache.set("k", ("a",))

        clock.advance(119)
        assert cache.get("k") == ("a",)

    def test_expires_at_ttl(self):
        """An entry is stale once the TTL has elapsed."""
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=120, clock=clock)
        cache.set("k", ("a",))

        clock.advance(120)
        assert cache.get("k") is None
        assert cache.stats().size == 0

    def test_counts_hits_and_misses(self):
        """Stats report hits, misses and keys."""
        cache = ResponseCache(ttl_seconds=60, clock=FakeClock())
        cache.get("missing")
        cache.set("k", 1)
        cache.get("k")

        stats = cache.stats()
        assert (stats.hits, stats.misses, stats.size, stats.keys) == (1, 1, 1, ["k"])

    def test_expiry_during_nested_read(self):
        """A read triggered while another read is expiring the key returns None."""
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=10, clock=clock)
        cache.set("k", 1)
        clock.advance(10)

        entered = []
        nested = []

        def reading_clock():
            if not entered:
                entered.append(True)
                nested.append(cache.get("k"))
            return clock()

        cache._clock = reading_clock
        assert cache.get("k") is None
        assert nested == [None]
        assert cache.stats().misses == 2

    def test_concurrent_access(self):
        """Threads reading, writing and invalidating never raise."""
        ticks = itertools.count()
        cache = ResponseCache(ttl_seconds=3, clock=lambda: float(next(ticks)))
        errors = []

        def worker(worker_id: int) -> None:
            try:
                for i in range(300):
                    key = f"responses:{i % 20}"
                    cache.set(key, (worker_id, i))
                    cache.get(key)
                    if i % 7 == 0:
                        cache.invalidate_prefix("responses")
                    cache.stats()
            except Exception as e:
                errors.append(repr(e))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []

    def test_invalidate_prefix(self):
        """Only keys with the prefix are dropped."""
        cache = ResponseCache(ttl_seconds=60, clock=FakeClock())
        cache.set("responses:limit=None|offset=0", ())
        cache.set("responses:limit=5|offset=0", ())
        cache.set("surveys:active=True", ())

        assert cache.invalidate_prefix("responses") == 2
        assert cache.stats().keys == ["surveys:active=True"]

    def test_zero_ttl_disables_caching(self):
        """A zero TTL stores nothing."""
        cache = ResponseCache(ttl_seconds=0, clock=FakeClock())
        cache.set("k", 1)
        assert cache.get("k") is None

    def test_expired_entries_swept_on_write(self):
        """Expired entries are removed once the cache grows large."""
        clock = FakeClock()
        cache = ResponseCache(ttl_seconds=10, clock=clock)
        for i in range(100):
            cache.set(f"old-{i}", i)

        clock.advance(10)
        cache.set("new", 1)

        assert cache.stats().keys == ["new"]
