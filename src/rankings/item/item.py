"""RpgItem aggregate — catalogue metadata of a rated RPG product.

The rating counters themselves are owned by the AggregateStore; this aggregate
holds what the catalogue knows about the product and records the audit trail of
review activity as domain events.

State Machine (2 states):
    LISTED → DELISTED
    DELISTED → (terminal)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from rankings.domain import rankings


class ItemStatus(Enum):
    LISTED = "Listed"
    DELISTED = "Delisted"


@rankings.aggregate
class RpgItem:
    """A tabletop RPG product that readers can review and rank."""

    title = String(required=True, max_length=200)
    genre = String(required=True, max_length=50)
    game_system = String(max_length=100)
    publisher = String(max_length=100)
    status = String(choices=ItemStatus, default=ItemStatus.LISTED.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def title_must_not_be_empty(self):
        if self.title is not None and len(self.title.strip()) == 0:
            raise ValidationError({"title": ["Item title cannot be empty"]})

    @classmethod
    def register(cls, title, genre, game_system=None, publisher=None):
        from rankings.item.events import ItemListed

        now = datetime.now(UTC)
        item = cls(
            title=title,
            genre=genre,
            game_system=game_system,
            publisher=publisher,
            status=ItemStatus.LISTED.value,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            ItemListed(
                item_id=str(item.id),
                title=title,
                genre=genre,
                game_system=game_system,
                listed_at=now,
            )
        )
        return item

    def delist(self):
        from rankings.item.events import ItemDelisted

        if self.status == ItemStatus.DELISTED.value:
            raise ValidationError({"status": ["Item is already delisted"]})

        now = datetime.now(UTC)
        self.status = ItemStatus.DELISTED.value
        self.updated_at = now
        self.raise_(ItemDelisted(item_id=str(self.id), genre=self.genre, delisted_at=now))

    def record_review(self, outcome, rating):
        """Record a review write that the rating service has already applied."""
        from rankings.item.events import ReviewRecorded

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ReviewRecorded(
                item_id=str(self.id),
                author_id=outcome.author_id,
                rating=float(rating),
                is_update=not outcome.created,
                rating_count=outcome.rating_count,
                average_rating=outcome.average_rating,
                bayesian_score=outcome.bayesian_score,
                recorded_at=now,
            )
        )

    def withdraw_review(self, outcome):
        from rankings.item.events import ReviewWithdrawn

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            ReviewWithdrawn(
                item_id=str(self.id),
                author_id=outcome.author_id,
                rating_count=outcome.rating_count,
                average_rating=outcome.average_rating,
                bayesian_score=outcome.bayesian_score,
                withdrawn_at=now,
            )
        )
