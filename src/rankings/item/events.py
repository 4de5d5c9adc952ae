"""Domain events for the RpgItem aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from rankings.domain import rankings


@rankings.event(part_of="RpgItem")
class ItemListed:
    """A new RPG product was added to the catalogue and entered the rankings."""

    __version__ = "v1"

    item_id: Identifier(required=True)
    title: String(required=True)
    genre: String(required=True)
    game_system: String()
    listed_at: DateTime(required=True)


@rankings.event(part_of="RpgItem")
class ItemDelisted:
    """An RPG product was withdrawn from the catalogue; its reviews are gone."""

    __version__ = "v1"

    item_id: Identifier(required=True)
    genre: String(required=True)
    delisted_at: DateTime(required=True)


@rankings.event(part_of="RpgItem")
class ReviewRecorded:
    """A review was created or updated; carries the item's new standing."""

    __version__ = "v1"

    item_id: Identifier(required=True)
    author_id: Identifier(required=True)
    rating: Float(required=True)
    is_update: Boolean(default=False)
    rating_count: Integer(required=True)
    average_rating: Float(required=True)
    bayesian_score: Float(required=True)
    recorded_at: DateTime(required=True)


@rankings.event(part_of="RpgItem")
class ReviewWithdrawn:
    """An author's review was deleted and its rating taken out of the aggregate."""

    __version__ = "v1"

    item_id: Identifier(required=True)
    author_id: Identifier(required=True)
    rating_count: Integer(required=True)
    average_rating: Float(required=True)
    bayesian_score: Float(required=True)
    withdrawn_at: DateTime(required=True)
