"""AggregateStore — durable per-item rating statistics.

Every mutation of one item's aggregate runs inside that item's critical
section; different items never contend. Snapshots are immutable and replaced
wholesale, so ``read`` never observes a torn sum/count pair.

Sums are kept as ``Decimal``: removing a review and adding the same rating back
restores the previous sum exactly, which binary floats do not guarantee.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from uuid import uuid4

from shared.clock import as_utc, utc_now
from shared.config import EngineSettings, get_settings
from shared.errors import Conflict, InvalidInput, NotFound
from shared.locks import KeyedLocks
from shared.logging_config import get_logger

from rankings.engine.memory_adapter import InMemoryAggregateRepository
from rankings.engine.port import ZERO, Aggregate, AggregateRepository, ReviewEntry

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReviewChange:
    """Before/after state of one review write, enough to undo it."""

    previous: Aggregate
    current: Aggregate
    previous_review: ReviewEntry | None
    review: ReviewEntry | None

    @property
    def author_id(self) -> str:
        entry = self.review or self.previous_review
        return entry.author_id

    @property
    def created(self) -> bool:
        return self.previous_review is None and self.review is not None


def as_rating(value) -> Decimal:
    """Convert a rating to ``Decimal`` through its string form (3.5 stays 3.5)."""
    if isinstance(value, Decimal):
        rating = value
    else:
        try:
            rating = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidInput({"rating": [f"Rating {value!r} is not a number"]}) from exc

    if not rating.is_finite():
        raise InvalidInput({"rating": ["Rating must be a finite number"]})
    return rating


class AggregateStore:
    def __init__(
        self,
        repository: AggregateRepository | None = None,
        locks: KeyedLocks | None = None,
        settings: EngineSettings | None = None,
    ):
        self.repository = repository or InMemoryAggregateRepository()
        self.locks = locks or KeyedLocks()
        self.settings = settings or get_settings()

    def item_lock(self, item_id: str):
        """Critical section for one item; reentrant, so callers may wrap store calls in it."""
        return self.locks.hold(item_id)

    # -------------------------------------------------------------------
    # Catalogue membership
    # -------------------------------------------------------------------
    def register_item(self, item_id: str, genre: str) -> Aggregate:
        aggregate = Aggregate(item_id=item_id, genre=genre)
        with self.item_lock(item_id):
            try:
                self.repository.insert(aggregate)
            except Conflict as exc:
                raise InvalidInput({"item_id": [f"Item {item_id} is already registered"]}) from exc

        logger.info("Rated item registered", item_id=item_id, genre=genre)
        return aggregate

    def delist_item(self, item_id: str) -> Aggregate:
        """Remove an item and its reviews; returns the last snapshot."""
        with self.item_lock(item_id):
            aggregate = self.repository.load(item_id)
            self.repository.delete(item_id, expected_version=aggregate.version)

        logger.info("Rated item delisted", item_id=item_id, review_count=aggregate.rating_count)
        return aggregate

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def read(self, item_id: str) -> Aggregate:
        return self.repository.load(item_id)

    def active_review(self, author_id: str, item_id: str) -> ReviewEntry | None:
        return self.repository.active_review(author_id, item_id)

    def reviews_for(self, item_id: str) -> list[ReviewEntry]:
        self.repository.load(item_id)
        return self.repository.reviews_for(item_id)

    def item_ids(self) -> list[str]:
        return self.repository.item_ids()

    def review_count(self) -> int:
        return self.repository.review_count()

    def distinct_author_count(self) -> int:
        return self.repository.distinct_author_count()

    def recent_reviews(self, limit: int = 10) -> list[ReviewEntry]:
        """Active reviews across all items, newest first."""
        if limit < 0:
            raise InvalidInput({"limit": ["Limit cannot be negative"]})
        return self.repository.recent_reviews(limit)

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def apply_review(self, item_id: str, old_rating=None, new_rating=None) -> Aggregate:
        """Apply the delta between an old and a new rating to one item.

        ``None`` means "no review": ``(None, r)`` adds a review, ``(r, None)``
        removes one, ``(r1, r2)`` replaces a rating in place.

        Counters only: no review row is written. Imports and rebuilds that
        already own their review rows use this; review writes go through
        ``record_review`` and ``withdraw_review``.
        """
        old = None if old_rating is None else as_rating(old_rating)
        new = None if new_rating is None else self._within_scale(as_rating(new_rating))

        def operation():
            current = self.repository.load(item_id)
            updated = self._with_delta(current, old, new)
            self.repository.commit(updated, expected_version=current.version)
            return updated

        with self.item_lock(item_id):
            return self._retrying(item_id, operation)

    def record_review(self, author_id: str, item_id: str, rating, created_at: datetime | None = None) -> ReviewChange:
        """Create the author's review of the item, or update it if one is active."""
        new = self._within_scale(as_rating(rating))
        timestamp = as_utc(created_at) or utc_now()

        def operation():
            current = self.repository.load(item_id)
            existing = self.repository.active_review(author_id, item_id)
            old = existing.rating if existing else None

            if existing is None:
                review = ReviewEntry(
                    review_id=str(uuid4()),
                    author_id=author_id,
                    item_id=item_id,
                    rating=new,
                    created_at=timestamp,
                    updated_at=timestamp,
                )
            else:
                review = replace(existing, rating=new, updated_at=timestamp)

            updated = self._with_delta(current, old, new)
            self.repository.commit(
                updated,
                expected_version=current.version,
                review_key=(author_id, item_id),
                review=review,
            )
            return ReviewChange(previous=current, current=updated, previous_review=existing, review=review)

        with self.item_lock(item_id):
            return self._retrying(item_id, operation)

    def withdraw_review(self, author_id: str, item_id: str) -> ReviewChange:
        """Delete the author's active review of the item."""

        def operation():
            current = self.repository.load(item_id)
            existing = self.repository.active_review(author_id, item_id)
            if existing is None:
                raise NotFound({"review": [f"No active review by {author_id} for item {item_id}"]})

            updated = self._with_delta(current, existing.rating, None)
            self.repository.commit(
                updated,
                expected_version=current.version,
                review_key=(author_id, item_id),
                review=None,
            )
            return ReviewChange(previous=current, current=updated, previous_review=existing, review=None)

        with self.item_lock(item_id):
            return self._retrying(item_id, operation)

    def restore(self, change: ReviewChange) -> Aggregate:
        """Undo ``change``, putting back the previous counters and review row.

        Used when a later step of the same unit of work fails.
        """
        with self.item_lock(change.current.item_id):
            restored = replace(change.previous, version=change.current.version + 1)
            entry = change.review or change.previous_review
            self.repository.commit(
                restored,
                expected_version=change.current.version,
                review_key=(entry.author_id, entry.item_id),
                review=change.previous_review,
            )

        logger.warning(
            "Review write rolled back",
            item_id=change.current.item_id,
            author_id=change.author_id,
        )
        return restored

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _within_scale(self, rating: Decimal) -> Decimal:
        low, high = self.settings.rating_min, self.settings.rating_max
        if rating < Decimal(str(low)) or rating > Decimal(str(high)):
            raise InvalidInput({"rating": [f"Rating must be between {low:g} and {high:g}"]})
        return rating

    @staticmethod
    def _with_delta(current: Aggregate, old: Decimal | None, new: Decimal | None) -> Aggregate:
        delta = (new if new is not None else ZERO) - (old if old is not None else ZERO)
        count_delta = (1 if new is not None else 0) - (1 if old is not None else 0)

        rating_count = current.rating_count + count_delta
        rating_sum = current.rating_sum + delta
        if rating_count < 0 or rating_sum < 0:
            raise InvalidInput({"rating": [f"Removing a rating from item {current.item_id} would leave negative totals"]})
        if rating_count == 0:
            rating_sum = ZERO

        return replace(
            current,
            rating_count=rating_count,
            rating_sum=rating_sum,
            version=current.version + 1,
        )

    @staticmethod
    def _retrying(item_id, operation):
        try:
            return operation()
        except Conflict:
            logger.warning("Aggregate write conflicted, retrying with a fresh read", item_id=item_id)
            return operation()
