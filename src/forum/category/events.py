"""Domain events for the ForumCategory aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from forum.domain import forum


@forum.event(part_of="ForumCategory")
class CategoryCreated:
    """A new discussion board was opened."""

    __version__ = "v1"

    category_id: Identifier(required=True)
    name: String(required=True)
    display_order: Integer(default=0)
    created_at: DateTime(required=True)
