"""Tests for RankingCache — memoized slices with generation-guarded writes."""

import pytest
from rankings.engine.cache import RankingCache
from rankings.engine.ranking import OVERALL


class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture()
def cache():
    return RankingCache()


class TestGetAndPut:
    def test_miss_then_hit(self, cache):
        assert cache.get("fantasy", 10, 0) is None
        assert cache.put("fantasy", 10, 0, ["a", "b"], cache.generation("fantasy"))
        assert cache.get("fantasy", 10, 0) == ("a", "b")
        assert cache.hits == 1
        assert cache.misses == 1

    def test_entries_keyed_by_slice(self, cache):
        cache.put("fantasy", 10, 0, ["a"], cache.generation("fantasy"))
        assert cache.get("fantasy", 10, 10) is None
        assert cache.get("fantasy", None, 0) is None
        assert len(cache) == 1

    def test_disabled_cache_never_stores(self):
        cache = RankingCache(enabled=False)
        assert cache.put("fantasy", 10, 0, ["a"], 0) is False
        assert cache.get("fantasy", 10, 0) is None
        assert len(cache) == 0


class TestInvalidation:
    def test_invalidate_drops_genre_entries(self, cache):
        cache.put("fantasy", 10, 0, ["a"], cache.generation("fantasy"))
        cache.put("horror", 10, 0, ["b"], cache.generation("horror"))

        cache.invalidate("fantasy")

        assert cache.get("fantasy", 10, 0) is None
        assert cache.get("horror", 10, 0) == ("b",)

    def test_item_change_invalidates_genre_and_overall(self, cache):
        for genre in ("fantasy", "horror", OVERALL):
            cache.put(genre, 10, 0, [genre], cache.generation(genre))

        cache.invalidate_for_item("fantasy")

        assert cache.get("fantasy", 10, 0) is None
        assert cache.get(OVERALL, 10, 0) is None
        assert cache.get("horror", 10, 0) == ("horror",)

    def test_stale_put_is_discarded(self, cache):
        generation = cache.generation("fantasy")
        # A writer invalidates while the reader is still querying the engine
        cache.invalidate_for_item("fantasy")

        assert cache.put("fantasy", 10, 0, ["stale"], generation) is False
        assert cache.get("fantasy", 10, 0) is None

    def test_clear_drops_everything_and_rejects_pending_puts(self, cache):
        generation = cache.generation("fantasy")
        cache.put("fantasy", 10, 0, ["a"], generation)

        cache.clear()

        assert len(cache) == 0
        assert cache.put("fantasy", 10, 0, ["a"], generation) is False


class TestTimeToLive:
    def test_entry_expires(self):
        clock = _Clock()
        cache = RankingCache(ttl_seconds=30, clock=clock)
        cache.put("fantasy", 10, 0, ["a"], cache.generation("fantasy"))

        clock.now = 29
        assert cache.get("fantasy", 10, 0) == ("a",)

        clock.now = 30
        assert cache.get("fantasy", 10, 0) is None
        assert len(cache) == 0

    def test_without_ttl_entries_never_expire(self):
        clock = _Clock()
        cache = RankingCache(clock=clock)
        cache.put("fantasy", 10, 0, ["a"], cache.generation("fantasy"))

        clock.now = 10_000
        assert cache.get("fantasy", 10, 0) == ("a",)
