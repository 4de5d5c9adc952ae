"""RankingEngine — Bayesian-adjusted scores and ordered ranking buckets.

    bayesian_score = (C * m + rating_sum) / (C + rating_count)

``m`` is the prior mean and ``C`` the prior weight in phantom reviews. Items with
few reviews regress toward ``m``; as the count grows the score tends to the
item's own average.

Buckets are sorted by score desc, then rating count desc, then item id asc. The
sort key embeds the item id, so no two items ever compare equal. A change to one
item repositions it with a remove + ``insort`` under the bucket lock instead of
re-sorting the bucket.
"""

import threading
from bisect import bisect_left, insort
from contextlib import ExitStack
from dataclasses import dataclass
from decimal import Decimal

from shared.config import EngineSettings, get_settings
from shared.errors import InvalidInput, NotFound
from shared.logging_config import get_logger

from rankings.engine.port import Aggregate
from rankings.engine.store import AggregateStore

logger = get_logger(__name__)

OVERALL = "overall"


@dataclass(frozen=True)
class RankedItem:
    """A rated item as seen by ranking readers."""

    item_id: str
    genre: str
    rating_count: int
    rating_sum: Decimal
    average_rating: Decimal
    bayesian_score: Decimal

    @property
    def sort_key(self) -> tuple:
        return (-self.bayesian_score, -self.rating_count, self.item_id)


class RankingBucket:
    """Ordered view of the items of one genre (or of every item, for "overall")."""

    def __init__(self, genre: str):
        self.genre = genre
        self.lock = threading.Lock()
        self._keys: list[tuple] = []
        self._entries: dict[str, RankedItem] = {}

    def reposition(self, entry: RankedItem):
        """Move ``entry`` to its place; caller holds ``self.lock``."""
        self._remove(entry.item_id)
        insort(self._keys, entry.sort_key)
        self._entries[entry.item_id] = entry

    def discard(self, item_id: str):
        """Drop an item; caller holds ``self.lock``."""
        self._remove(item_id)

    def _remove(self, item_id):
        previous = self._entries.pop(item_id, None)
        if previous is None:
            return
        index = bisect_left(self._keys, previous.sort_key)
        del self._keys[index]

    def slice(self, limit: int | None, offset: int) -> list[RankedItem]:
        with self.lock:
            stop = None if limit is None else offset + limit
            return [self._entries[key[2]] for key in self._keys[offset:stop]]

    def item_ids(self) -> tuple[str, ...]:
        with self.lock:
            return tuple(key[2] for key in self._keys)

    def __contains__(self, item_id):
        return item_id in self._entries

    def __len__(self):
        return len(self._keys)


class RankingEngine:
    def __init__(self, store: AggregateStore, settings: EngineSettings | None = None):
        settings = settings or get_settings()
        self.store = store
        self.prior_mean = Decimal(str(settings.prior_mean))
        self.prior_weight = Decimal(str(settings.prior_weight))

        self._buckets_lock = threading.Lock()
        self._buckets: dict[str, RankingBucket] = {OVERALL: RankingBucket(OVERALL)}
        self._memberships: dict[str, str] = {}

    # -------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------
    def bayesian_score(self, rating_count: int, rating_sum: Decimal) -> Decimal:
        denominator = self.prior_weight + rating_count
        if denominator == 0:
            # C = 0 and no reviews: nothing to blend, fall back to the prior
            return self.prior_mean
        return (self.prior_weight * self.prior_mean + rating_sum) / denominator

    def score_for(self, aggregate: Aggregate) -> RankedItem:
        return RankedItem(
            item_id=aggregate.item_id,
            genre=aggregate.genre,
            rating_count=aggregate.rating_count,
            rating_sum=aggregate.rating_sum,
            average_rating=aggregate.average_rating,
            bayesian_score=self.bayesian_score(aggregate.rating_count, aggregate.rating_sum),
        )

    # -------------------------------------------------------------------
    # Bucket maintenance
    # -------------------------------------------------------------------
    def on_aggregate_changed(self, item_id: str, genre: str | None = None) -> RankedItem | None:
        """Recompute an item's score and reposition it in "overall" and its genre.

        An item no longer present in the store is removed from every bucket and
        ``None`` is returned.
        """
        try:
            aggregate = self.store.read(item_id)
        except NotFound:
            self._drop(item_id)
            return None

        genre = genre or aggregate.genre
        entry = self.score_for(aggregate)

        previous_genre = self._memberships.get(item_id)
        affected = {OVERALL, genre}
        if previous_genre and previous_genre != genre:
            affected.add(previous_genre)

        buckets = self._buckets_for(affected)
        with ExitStack() as stack:
            # Fixed acquisition order across writers
            for tag in sorted(buckets):
                stack.enter_context(buckets[tag].lock)

            for tag, bucket in buckets.items():
                if tag in (OVERALL, genre):
                    bucket.reposition(entry)
                else:
                    bucket.discard(item_id)
            self._memberships[item_id] = genre

        logger.debug(
            "Item repositioned",
            item_id=item_id,
            genre=genre,
            bayesian_score=str(entry.bayesian_score),
        )
        return entry

    def _drop(self, item_id):
        genre = self._memberships.get(item_id)
        buckets = self._buckets_for({OVERALL} | ({genre} if genre else set()))
        with ExitStack() as stack:
            for tag in sorted(buckets):
                stack.enter_context(buckets[tag].lock)
            for bucket in buckets.values():
                bucket.discard(item_id)
            self._memberships.pop(item_id, None)

        logger.info("Item removed from rankings", item_id=item_id, genre=genre)

    def _buckets_for(self, tags) -> dict[str, RankingBucket]:
        with self._buckets_lock:
            for tag in tags:
                if tag not in self._buckets:
                    self._buckets[tag] = RankingBucket(tag)
            return {tag: self._buckets[tag] for tag in tags}

    def rebuild(self):
        """Recompute every bucket from the store, from scratch.

        Meant for startup and recovery; concurrent writers are not expected while
        the buckets are swapped.
        """
        entries = []
        for item_id in self.store.item_ids():
            try:
                entries.append(self.score_for(self.store.read(item_id)))
            except NotFound:
                continue

        buckets = {OVERALL: RankingBucket(OVERALL)}
        memberships = {}
        for entry in sorted(entries, key=lambda e: e.sort_key):
            buckets.setdefault(entry.genre, RankingBucket(entry.genre))
            buckets[OVERALL].reposition(entry)
            buckets[entry.genre].reposition(entry)
            memberships[entry.item_id] = entry.genre

        with self._buckets_lock:
            self._buckets = buckets
            self._memberships = memberships

        logger.info("Rankings rebuilt", item_count=len(entries), genre_count=len(buckets) - 1)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def query(self, genre: str, limit: int | None = None, offset: int = 0) -> list[RankedItem]:
        """Return a slice of a bucket. Unknown or empty genres give an empty list."""
        if limit is not None and limit < 0:
            raise InvalidInput({"limit": ["Limit cannot be negative"]})
        if offset < 0:
            raise InvalidInput({"offset": ["Offset cannot be negative"]})
        if not genre:
            return []

        with self._buckets_lock:
            bucket = self._buckets.get(genre)
        if bucket is None:
            return []
        return bucket.slice(limit, offset)

    def genres(self) -> list[str]:
        with self._buckets_lock:
            return sorted(tag for tag, bucket in self._buckets.items() if tag != OVERALL and len(bucket))

    def bucket_size(self, genre: str = OVERALL) -> int:
        with self._buckets_lock:
            bucket = self._buckets.get(genre)
        if bucket is None:
            return 0
        with bucket.lock:
            return len(bucket)

    def snapshot(self) -> dict[str, tuple[str, ...]]:
        """Bucket contents by genre, for comparisons across engines."""
        with self._buckets_lock:
            buckets = dict(self._buckets)
        return {tag: bucket.item_ids() for tag, bucket in sorted(buckets.items()) if len(bucket)}
