"""RankingCache — memoized ranking slices, invalidated on aggregate change.

Entries are keyed by ``(genre, limit, offset)`` and dropped, never patched, when
any item of the genre changes. Each genre carries a generation counter: a reader
takes the generation before querying the engine and ``put`` discards its result
if the genre was invalidated in the meantime, so a slow reader cannot write a
stale slice back into the cache.

The cache is an optimization only; disabling it changes latency, not results.
"""

import threading
import time

from shared.logging_config import get_logger

from rankings.engine.ranking import OVERALL

logger = get_logger(__name__)


class RankingCache:
    def __init__(self, enabled: bool = True, ttl_seconds: float | None = None, clock=time.monotonic):
        self.enabled = enabled
        self.ttl_seconds = ttl_seconds
        self._clock = clock

        self._lock = threading.Lock()
        self._entries: dict[str, dict[tuple, tuple]] = {}
        self._generations: dict[str, int] = {}
        self.hits = 0
        self.misses = 0

    def get(self, genre: str, limit: int | None, offset: int):
        """Return the cached slice, or ``None`` on a miss or an expired entry."""
        if not self.enabled:
            return None

        with self._lock:
            entry = self._entries.get(genre, {}).get((limit, offset))
            if entry is not None:
                stored_at, items = entry
                if self.ttl_seconds is None or self._clock() - stored_at < self.ttl_seconds:
                    self.hits += 1
                    return items
                del self._entries[genre][(limit, offset)]
            self.misses += 1
            return None

    def generation(self, genre: str) -> int:
        with self._lock:
            return self._generations.get(genre, 0)

    def put(self, genre: str, limit: int | None, offset: int, items, generation: int) -> bool:
        """Store a slice computed at ``generation``; returns whether it was kept."""
        if not self.enabled:
            return False

        with self._lock:
            if self._generations.get(genre, 0) != generation:
                return False
            self._entries.setdefault(genre, {})[(limit, offset)] = (self._clock(), tuple(items))
            return True

    def invalidate(self, genre: str):
        with self._lock:
            self._invalidate(genre)

    def invalidate_for_item(self, genre: str | None):
        """Drop every entry for an item's genre bucket and for "overall"."""
        with self._lock:
            self._invalidate(OVERALL)
            if genre and genre != OVERALL:
                self._invalidate(genre)

    def _invalidate(self, genre):
        self._generations[genre] = self._generations.get(genre, 0) + 1
        dropped = self._entries.pop(genre, None)
        if dropped:
            logger.debug("Ranking cache invalidated", genre=genre, entries=len(dropped))

    def clear(self):
        with self._lock:
            for genre in list(self._entries) + list(self._generations):
                self._generations[genre] = self._generations.get(genre, 0) + 1
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return sum(len(entries) for entries in self._entries.values())
