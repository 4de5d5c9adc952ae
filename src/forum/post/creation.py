"""CreateForumPost — reply to a thread.

The post is persisted inside the thread's critical section together with the
reply counter update. A locked or unknown thread fails the whole command:
neither the post nor a counter change is ever left behind.
"""

from protean.fields import DateTime, Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from forum.activity import get_activity_tracker
from forum.domain import forum
from forum.post.post import ForumPost


@forum.command(part_of="ForumPost")
class CreateForumPost:
    thread_id = Identifier(required=True)
    author_id = Identifier(required=True)
    content = Text()
    created_at = DateTime()


@forum.command_handler(part_of=ForumPost)
class CreateForumPostHandler:
    @handle(CreateForumPost)
    def create_post(self, command):
        post = ForumPost.create(
            thread_id=command.thread_id,
            author_id=command.author_id,
            content=command.content,
            created_at=command.created_at,
        )

        repo = current_domain.repository_for(ForumPost)
        summary = get_activity_tracker().record_post(
            str(command.thread_id),
            post.created_at,
            persist=lambda: repo.add(post),
        )
        return {
            "post_id": str(post.id),
            "reply_count": summary.reply_count,
            "last_activity_at": summary.last_activity_at,
        }
