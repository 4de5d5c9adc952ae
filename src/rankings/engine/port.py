"""Aggregate persistence port (abstract interface) and its value types.

The AggregateStore talks to durable storage only through this contract, so the
same per-item locking discipline holds whichever backend is plugged in. The
in-memory adapter is the default for development and tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

ZERO = Decimal(0)


@dataclass(frozen=True)
class Aggregate:
    """Rating statistics for one item. Immutable; every write produces a new snapshot."""

    item_id: str
    genre: str
    rating_count: int = 0
    rating_sum: Decimal = ZERO
    version: int = 0

    @property
    def average_rating(self) -> Decimal:
        if self.rating_count == 0:
            return ZERO
        return self.rating_sum / self.rating_count


@dataclass(frozen=True)
class ReviewEntry:
    """The single active review of one author for one item."""

    review_id: str
    author_id: str
    item_id: str
    rating: Decimal
    created_at: datetime
    updated_at: datetime


class AggregateRepository(ABC):
    """Abstract storage for aggregates and their active review rows."""

    @abstractmethod
    def load(self, item_id: str) -> Aggregate:
        """Return the stored aggregate or raise ``NotFound``."""
        ...

    @abstractmethod
    def insert(self, aggregate: Aggregate) -> None:
        """Store a new aggregate; ``Conflict`` if the id is taken."""
        ...

    @abstractmethod
    def commit(
        self,
        aggregate: Aggregate,
        expected_version: int,
        review_key: tuple[str, str] | None = None,
        review: ReviewEntry | None = None,
    ) -> None:
        """Replace the aggregate and, when ``review_key`` is given, its review row.

        ``review=None`` with a key deletes the row. Both writes land together or
        not at all. Raises ``Conflict`` when the stored version is not
        ``expected_version`` or the item has vanished.
        """
        ...

    @abstractmethod
    def delete(self, item_id: str, expected_version: int) -> None:
        """Remove an aggregate and all of its review rows."""
        ...

    @abstractmethod
    def active_review(self, author_id: str, item_id: str) -> ReviewEntry | None: ...

    @abstractmethod
    def reviews_for(self, item_id: str) -> list[ReviewEntry]: ...

    @abstractmethod
    def recent_reviews(self, limit: int) -> list[ReviewEntry]:
        """Active reviews of every item, newest ``created_at`` first."""
        ...

    @abstractmethod
    def item_ids(self) -> list[str]: ...

    @abstractmethod
    def review_count(self) -> int: ...

    @abstractmethod
    def distinct_author_count(self) -> int: ...
