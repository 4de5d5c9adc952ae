"""Domain events for the ForumThread aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from forum.domain import forum


@forum.event(part_of="ForumThread")
class ThreadStarted:
    """A member opened a new discussion thread."""

    __version__ = "v1"

    thread_id = Identifier(required=True)
    category_id = Identifier(required=True)
    author_id = Identifier(required=True)
    title = String(required=True)
    started_at = DateTime(required=True)


@forum.event(part_of="ForumThread")
class ThreadLockChanged:
    """A moderator locked or reopened a thread."""

    __version__ = "v1"

    thread_id = Identifier(required=True)
    is_locked = Boolean(required=True)
    moderator_id = Identifier(required=True)
    changed_at = DateTime(required=True)


@forum.event(part_of="ForumThread")
class ThreadPinChanged:
    """A moderator pinned or unpinned a thread."""

    __version__ = "v1"

    thread_id = Identifier(required=True)
    is_pinned = Boolean(required=True)
    moderator_id = Identifier(required=True)
    changed_at = DateTime(required=True)
