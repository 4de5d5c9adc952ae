"""Domain events for the ForumPost aggregate."""

from protean.fields import DateTime, Identifier

from forum.domain import forum


@forum.event(part_of="ForumPost")
class PostCreated:
    """A member replied in a thread."""

    __version__ = "v1"

    post_id = Identifier(required=True)
    thread_id = Identifier(required=True)
    author_id = Identifier(required=True)
    created_at = DateTime(required=True)
