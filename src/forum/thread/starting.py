"""StartThread — open a discussion thread inside an existing category.

The new thread is registered with the activity tracker so replies can be
counted from the first one onwards.
"""

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.errors import NotFound

from forum.activity import get_activity_tracker
from forum.category.category import ForumCategory
from forum.domain import forum
from forum.thread.thread import ForumThread


@forum.command(part_of="ForumThread")
class StartThread:
    category_id = Identifier(required=True)
    author_id = Identifier(required=True)
    title = String(max_length=200)
    body = Text()
    created_at = DateTime()


@forum.command_handler(part_of=ForumThread)
class StartThreadHandler:
    @handle(StartThread)
    def start_thread(self, command):
        try:
            current_domain.repository_for(ForumCategory).get(command.category_id)
        except ObjectNotFoundError as exc:
            raise NotFound({"category_id": [f"Category {command.category_id} not found"]}) from exc

        thread = ForumThread.start(
            category_id=command.category_id,
            author_id=command.author_id,
            title=command.title,
            body=command.body,
            created_at=command.created_at,
        )
        get_activity_tracker().open_thread(str(thread.id), thread.created_at)
        current_domain.repository_for(ForumThread).add(thread)
        return str(thread.id)
