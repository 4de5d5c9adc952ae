"""ThreadActivityTracker — denormalized reply counters per forum thread.

Each thread has one critical section; posts to different threads never wait on
each other. Counter state is an immutable ``ThreadSummary`` replaced wholesale
under the thread's lock, so ``describe`` reads it without locking and always
sees a matching (reply_count, last_activity_at) pair.

``last_activity_at`` only moves forward: a post delivered out of order still
counts as a reply but never rewinds the timestamp.
"""

import threading
from dataclasses import dataclass, replace
from datetime import datetime

from shared.clock import as_utc
from shared.errors import InvalidInput, NotFound, ThreadLocked
from shared.locks import KeyedLocks
from shared.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ThreadSummary:
    thread_id: str
    reply_count: int
    last_activity_at: datetime
    is_locked: bool = False

    @property
    def state(self) -> str:
        return "Locked" if self.is_locked else "Open"


class ThreadActivityTracker:
    def __init__(self, locks: KeyedLocks | None = None):
        self.locks = locks or KeyedLocks()
        self._threads: dict[str, ThreadSummary] = {}
        self._registry_lock = threading.Lock()
        self._post_total = 0
        self._total_lock = threading.Lock()

    def open_thread(self, thread_id: str, created_at: datetime, locked: bool = False) -> ThreadSummary:
        """Start tracking a new thread; its creation time is its first activity."""
        created_at = as_utc(created_at)
        with self.locks.hold(thread_id):
            if thread_id in self._threads:
                raise InvalidInput({"thread_id": [f"Thread {thread_id} is already tracked"]})
            summary = ThreadSummary(
                thread_id=thread_id,
                reply_count=0,
                last_activity_at=created_at,
                is_locked=locked,
            )
            with self._registry_lock:
                self._threads[thread_id] = summary
        return summary

    def set_locked(self, thread_id: str, locked: bool) -> ThreadSummary:
        """Moderator setter: Open → Locked and Locked → Open."""
        with self.locks.hold(thread_id):
            summary = replace(self._current(thread_id), is_locked=locked)
            self._threads[thread_id] = summary

        logger.info("Thread lock changed", thread_id=thread_id, state=summary.state)
        return summary

    def record_post(self, thread_id: str, post_created_at: datetime, persist=None) -> ThreadSummary:
        """Count a new reply and advance the thread's last activity.

        ``persist`` (optional) stores the post itself. It runs inside the
        thread's critical section after the lock check and before the counters
        move; if it raises, the counters stay as they were.
        """
        post_created_at = as_utc(post_created_at)
        with self.locks.hold(thread_id):
            current = self._current(thread_id)
            if current.is_locked:
                raise ThreadLocked({"thread_id": [f"Thread {thread_id} is locked"]})

            if persist is not None:
                persist()

            summary = replace(
                current,
                reply_count=current.reply_count + 1,
                last_activity_at=max(current.last_activity_at, post_created_at),
            )
            self._threads[thread_id] = summary
            with self._total_lock:
                self._post_total += 1

        if post_created_at < current.last_activity_at:
            logger.info(
                "Out-of-order post kept last activity",
                thread_id=thread_id,
                post_created_at=post_created_at.isoformat(),
                last_activity_at=current.last_activity_at.isoformat(),
            )
        return summary

    def describe(self, thread_id: str) -> ThreadSummary:
        return self._current(thread_id)

    def _current(self, thread_id):
        summary = self._threads.get(thread_id)
        if summary is None:
            raise NotFound({"thread_id": [f"Thread {thread_id} not found"]})
        return summary

    def summaries(self) -> list[ThreadSummary]:
        with self._registry_lock:
            return list(self._threads.values())

    def thread_count(self) -> int:
        return len(self._threads)

    def post_count(self) -> int:
        with self._total_lock:
            return self._post_total
