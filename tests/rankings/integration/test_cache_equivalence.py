"""The ranking cache changes latency, never results."""

import random

from rankings.engine.ranking import OVERALL
from rankings.engine.service import RatingService
from shared.config import EngineSettings

GENRES = ["fantasy", "horror", "scifi"]


def _replay(service, seed):
    """Apply a seeded mix of writes, reading after each one."""
    rng = random.Random(seed)
    reads = []
    for index in range(15):
        service.register_item(f"item-{index:02d}", rng.choice(GENRES))

    for step in range(300):
        item_id = f"item-{rng.randrange(15):02d}"
        author_id = f"reader-{rng.randrange(10)}"
        if rng.random() < 0.2 and service.store.active_review(author_id, item_id):
            service.remove_review(author_id, item_id)
        else:
            service.submit_review(author_id, item_id, rng.choice([1, 1.5, 2, 3, 3.5, 4, 4.5, 5]))

        genre = rng.choice(GENRES + [OVERALL])
        limit = rng.choice([None, 3, 5])
        offset = rng.choice([0, 0, 2])
        reads.append([(e.item_id, e.bayesian_score) for e in service.rankings(genre, limit, offset)])
    return reads


class TestCacheEquivalence:
    def test_cached_and_uncached_reads_agree(self):
        cached = RatingService(settings=EngineSettings(cache_enabled=True))
        uncached = RatingService(settings=EngineSettings(cache_enabled=False))

        assert _replay(cached, seed=42) == _replay(uncached, seed=42)
        assert cached.cache.hits > 0
        assert uncached.cache.hits == 0

    def test_final_snapshots_agree(self):
        cached = RatingService(settings=EngineSettings(cache_enabled=True))
        uncached = RatingService(settings=EngineSettings(cache_enabled=False))
        _replay(cached, seed=7)
        _replay(uncached, seed=7)

        assert cached.engine.snapshot() == uncached.engine.snapshot()
        for genre in GENRES + [OVERALL]:
            assert cached.rankings(genre) == uncached.rankings(genre)
