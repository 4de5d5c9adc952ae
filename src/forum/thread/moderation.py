"""Thread moderation — lock, unlock, pin and unpin.

Lock changes are mirrored into the activity tracker, which is what rejects
replies to a locked thread.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain
from shared.errors import NotFound

from forum.activity import get_activity_tracker
from forum.domain import forum
from forum.thread.thread import ForumThread


@forum.command(part_of="ForumThread")
class LockThread:
    thread_id: Identifier(required=True)
    moderator_id: Identifier(required=True)


@forum.command(part_of="ForumThread")
class UnlockThread:
    thread_id: Identifier(required=True)
    moderator_id: Identifier(required=True)


@forum.command(part_of="ForumThread")
class PinThread:
    thread_id: Identifier(required=True)
    moderator_id: Identifier(required=True)


@forum.command(part_of="ForumThread")
class UnpinThread:
    thread_id: Identifier(required=True)
    moderator_id: Identifier(required=True)


def load_thread(repo, thread_id):
    try:
        return repo.get(thread_id)
    except ObjectNotFoundError as exc:
        raise NotFound({"thread_id": [f"Thread {thread_id} not found"]}) from exc


@forum.command_handler(part_of=ForumThread)
class ModerateThreadHandler:
    @handle(LockThread)
    def lock_thread(self, command):
        repo = current_domain.repository_for(ForumThread)
        thread = load_thread(repo, command.thread_id)
        thread.lock(command.moderator_id)
        get_activity_tracker().set_locked(str(thread.id), True)
        repo.add(thread)

    @handle(UnlockThread)
    def unlock_thread(self, command):
        repo = current_domain.repository_for(ForumThread)
        thread = load_thread(repo, command.thread_id)
        thread.unlock(command.moderator_id)
        get_activity_tracker().set_locked(str(thread.id), False)
        repo.add(thread)

    @handle(PinThread)
    def pin_thread(self, command):
        repo = current_domain.repository_for(ForumThread)
        thread = load_thread(repo, command.thread_id)
        thread.set_pinned(True, command.moderator_id)
        repo.add(thread)

    @handle(UnpinThread)
    def unpin_thread(self, command):
        repo = current_domain.repository_for(ForumThread)
        thread = load_thread(repo, command.thread_id)
        thread.set_pinned(False, command.moderator_id)
        repo.add(thread)
