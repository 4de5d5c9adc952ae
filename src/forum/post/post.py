"""ForumPost aggregate — a reply inside a forum thread."""

from protean.fields import DateTime, Identifier, Text
from shared.clock import as_utc, utc_now
from shared.errors import InvalidInput

from forum.domain import forum


@forum.aggregate
class ForumPost:
    thread_id = Identifier(required=True)
    author_id = Identifier(required=True)
    content = Text(required=True)
    created_at = DateTime()

    @classmethod
    def create(cls, thread_id, author_id, content, created_at=None):
        """Build a reply. Content is trimmed and must not be empty."""
        from forum.post.events import PostCreated

        text = (content or "").strip()
        if not text:
            raise InvalidInput({"content": ["Post content cannot be empty"]})

        now = as_utc(created_at) or utc_now()
        post = cls(
            thread_id=thread_id,
            author_id=author_id,
            content=text,
            created_at=now,
        )
        post.raise_(
            PostCreated(
                post_id=str(post.id),
                thread_id=str(thread_id),
                author_id=str(author_id),
                created_at=now,
            )
        )
        return post
