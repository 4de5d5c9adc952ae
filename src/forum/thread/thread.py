"""ForumThread aggregate — metadata of a discussion thread.

Owns title, category, opening post and the moderator-controlled pin and lock
flags. Reply counters are owned by the ThreadActivityTracker and are never
stored here.

Lock state machine:
    OPEN ⇄ LOCKED   (moderator actions)

Pinning is a display-order hint only.
"""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String, Text
from shared.clock import as_utc, utc_now
from shared.errors import InvalidInput

from forum.domain import forum


@forum.aggregate
class ForumThread:
    """A discussion started by a member inside a forum category."""

    category_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    body = Text(required=True)
    author_id = Identifier(required=True)
    is_pinned = Boolean(default=False)
    is_locked = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def title_must_not_be_empty(self):
        if self.title is not None and len(self.title.strip()) == 0:
            raise ValidationError({"title": ["Thread title cannot be empty"]})

    @classmethod
    def start(cls, category_id, author_id, title, body, created_at=None):
        """Open a new thread; the body is the opening post."""
        from forum.thread.events import ThreadStarted

        if not title or not title.strip():
            raise InvalidInput({"title": ["Thread title cannot be empty"]})
        if not body or not body.strip():
            raise InvalidInput({"body": ["Opening post cannot be empty"]})

        now = as_utc(created_at) or utc_now()
        thread = cls(
            category_id=category_id,
            title=title.strip(),
            body=body.strip(),
            author_id=author_id,
            is_pinned=False,
            is_locked=False,
            created_at=now,
            updated_at=now,
        )
        thread.raise_(
            ThreadStarted(
                thread_id=str(thread.id),
                category_id=str(category_id),
                author_id=str(author_id),
                title=thread.title,
                started_at=now,
            )
        )
        return thread

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def lock(self, moderator_id):
        if self.is_locked:
            raise ValidationError({"is_locked": ["Thread is already locked"]})
        self._change_lock(True, moderator_id)

    def unlock(self, moderator_id):
        if not self.is_locked:
            raise ValidationError({"is_locked": ["Thread is not locked"]})
        self._change_lock(False, moderator_id)

    def _change_lock(self, locked, moderator_id):
        from forum.thread.events import ThreadLockChanged

        now = utc_now()
        self.is_locked = locked
        self.updated_at = now
        self.raise_(
            ThreadLockChanged(
                thread_id=str(self.id),
                is_locked=locked,
                moderator_id=str(moderator_id),
                changed_at=now,
            )
        )

    def set_pinned(self, pinned, moderator_id):
        from forum.thread.events import ThreadPinChanged

        if self.is_pinned == pinned:
            return

        now = utc_now()
        self.is_pinned = pinned
        self.updated_at = now
        self.raise_(
            ThreadPinChanged(
                thread_id=str(self.id),
                is_pinned=pinned,
                moderator_id=str(moderator_id),
                changed_at=now,
            )
        )
