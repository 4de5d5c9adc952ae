"""Per-key critical sections.

One reentrant lock per identifier (item id, thread id). Locks for different keys
never contend; the registry entry is dropped once nobody holds or waits on it,
so long-running processes do not accumulate a lock per entity ever touched.
"""

import threading
from contextlib import contextmanager


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.RLock()
        self.users = 0


class KeyedLocks:
    """Registry of reentrant locks keyed by identifier."""

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    @contextmanager
    def hold(self, key: str):
        """Hold the critical section for ``key`` for the duration of the block.

        Released on every exit path, including exceptions raised inside the block.
        """
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[key]

    def active_keys(self) -> int:
        """Number of keys currently held or waited on."""
        with self._guard:
            return len(self._entries)
