"""RatingService — the atomic units behind review writes and ranking reads.

A review write holds the item's critical section across three steps: the
aggregate commit, the bucket reposition and the cache invalidation. When the
call returns, every later reader sees the new aggregate and ranking position.
If the reposition fails, the aggregate and review row are restored before the
error propagates, so no half-applied write is ever visible.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from shared.config import EngineSettings, get_settings
from shared.errors import InvalidInput
from shared.logging_config import get_logger

from rankings.engine.cache import RankingCache
from rankings.engine.ranking import OVERALL, RankedItem, RankingEngine
from rankings.engine.store import AggregateStore, ReviewChange, as_rating

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReviewOutcome:
    """What a review write returns to the caller for display."""

    item_id: str
    author_id: str
    review_id: str | None
    created: bool
    rating_count: int
    average_rating: float
    bayesian_score: float


def normalize_genre(genre: str | None) -> str:
    return (genre or "").strip().lower()


class RatingService:
    def __init__(
        self,
        settings: EngineSettings | None = None,
        store: AggregateStore | None = None,
        cache: RankingCache | None = None,
    ):
        self.settings = settings or get_settings()
        self.store = store or AggregateStore(settings=self.settings)
        self.engine = RankingEngine(self.store, self.settings)
        self.cache = cache or RankingCache(
            enabled=self.settings.cache_enabled,
            ttl_seconds=self.settings.cache_ttl_seconds,
        )
        self._rating_min = Decimal(str(self.settings.rating_min))
        self._rating_max = Decimal(str(self.settings.rating_max))

    # -------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------
    def validate_rating(self, rating) -> Decimal:
        if rating is None or isinstance(rating, bool):
            raise InvalidInput({"rating": ["Rating is required"]})

        value = as_rating(rating)
        if value < self._rating_min or value > self._rating_max:
            raise InvalidInput(
                {"rating": [f"Rating must be between {self.settings.rating_min:g} and {self.settings.rating_max:g}"]}
            )
        return value

    @staticmethod
    def validate_genre(genre) -> str:
        tag = normalize_genre(genre)
        if not tag:
            raise InvalidInput({"genre": ["Genre is required"]})
        if tag == OVERALL:
            raise InvalidInput({"genre": [f'"{OVERALL}" is a reserved ranking tag']})
        return tag

    # -------------------------------------------------------------------
    # Catalogue membership
    # -------------------------------------------------------------------
    def register_item(self, item_id: str, genre: str) -> RankedItem:
        tag = self.validate_genre(genre)

        with self.store.item_lock(item_id):
            self.store.register_item(item_id, tag)
            try:
                entry = self.engine.on_aggregate_changed(item_id, tag)
            except Exception:
                self.store.delist_item(item_id)
                raise
            finally:
                self.cache.invalidate_for_item(tag)

        return entry

    def delist_item(self, item_id: str):
        with self.store.item_lock(item_id):
            aggregate = self.store.delist_item(item_id)
            try:
                self.engine.on_aggregate_changed(item_id, aggregate.genre)
            finally:
                self.cache.invalidate_for_item(aggregate.genre)
        return aggregate

    # -------------------------------------------------------------------
    # Review writes
    # -------------------------------------------------------------------
    def submit_review(self, author_id: str, item_id: str, rating, created_at: datetime | None = None) -> ReviewOutcome:
        """Create or update the author's review; returns the item's new average and score."""
        value = self.validate_rating(rating)

        with self.store.item_lock(item_id):
            change = self.store.record_review(author_id, item_id, value, created_at=created_at)
            entry = self._reposition(change)

        logger.info(
            "Review recorded",
            item_id=item_id,
            author_id=author_id,
            rating=str(value),
            created=change.created,
            rating_count=entry.rating_count,
        )
        return self._outcome(change, entry)

    def remove_review(self, author_id: str, item_id: str) -> ReviewOutcome:
        """Withdraw the author's active review of the item."""
        with self.store.item_lock(item_id):
            change = self.store.withdraw_review(author_id, item_id)
            entry = self._reposition(change)

        logger.info(
            "Review withdrawn",
            item_id=item_id,
            author_id=author_id,
            rating_count=entry.rating_count,
        )
        return self._outcome(change, entry)

    def _reposition(self, change: ReviewChange) -> RankedItem:
        item_id = change.current.item_id
        genre = change.current.genre
        try:
            return self.engine.on_aggregate_changed(item_id, genre)
        except Exception:
            logger.error("Ranking reposition failed, restoring aggregate", item_id=item_id)
            self.store.restore(change)
            self.engine.on_aggregate_changed(item_id, genre)
            raise
        finally:
            self.cache.invalidate_for_item(genre)

    @staticmethod
    def _outcome(change: ReviewChange, entry: RankedItem) -> ReviewOutcome:
        return ReviewOutcome(
            item_id=entry.item_id,
            author_id=change.author_id,
            review_id=change.review.review_id if change.review else None,
            created=change.created,
            rating_count=entry.rating_count,
            average_rating=float(entry.average_rating),
            bayesian_score=float(entry.bayesian_score),
        )

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def rankings(self, genre: str, limit: int | None = None, offset: int = 0) -> list[RankedItem]:
        """Ranked slice of a genre (or "overall"); cached when the cache is enabled."""
        tag = normalize_genre(genre)

        cached = self.cache.get(tag, limit, offset)
        if cached is not None:
            return list(cached)

        generation = self.cache.generation(tag)
        items = self.engine.query(tag, limit, offset)
        self.cache.put(tag, limit, offset, items, generation)
        return items

    def item_summary(self, item_id: str) -> RankedItem:
        return self.engine.score_for(self.store.read(item_id))

    def item_count(self) -> int:
        return self.engine.bucket_size(OVERALL)

    def review_count(self) -> int:
        return self.store.review_count()

    def author_count(self) -> int:
        return self.store.distinct_author_count()

    def recent_reviews(self, limit: int = 10):
        return self.store.recent_reviews(limit)

    def rebuild(self):
        self.engine.rebuild()
        self.cache.clear()
