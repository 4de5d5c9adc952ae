"""StatsProjector — site-wide display counters.

A pure read-side projection over the rating service and the thread activity
tracker; it keeps no state of its own beyond the last snapshot. Counters may be
up to ``refresh_seconds`` stale, which is fine for display purposes.
"""

from __future__ import annotations

import threading
import time
from datetime import UTC, datetime

from pydantic import BaseModel
from shared.config import get_settings
from shared.logging_config import get_logger

logger = get_logger(__name__)

_projector_instance = None


class SiteStats(BaseModel):
    item_count: int
    review_count: int
    user_count: int
    forum_post_count: int
    thread_count: int
    generated_at: datetime


class StatsProjector:
    def __init__(self, rating_service, activity_tracker, refresh_seconds: float = 0.0, clock=time.monotonic):
        self.rating_service = rating_service
        self.activity_tracker = activity_tracker
        self.refresh_seconds = refresh_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: SiteStats | None = None
        self._taken_at: float | None = None

    def snapshot(self) -> SiteStats:
        """Current counters, recomputed when the last snapshot is older than the interval."""
        with self._lock:
            fresh = (
                self._snapshot is not None
                and self.refresh_seconds > 0
                and self._clock() - self._taken_at < self.refresh_seconds
            )
            if not fresh:
                self._snapshot = self._project()
                self._taken_at = self._clock()
            return self._snapshot

    def refresh(self) -> SiteStats:
        with self._lock:
            self._snapshot = self._project()
            self._taken_at = self._clock()
            return self._snapshot

    def _project(self) -> SiteStats:
        stats = SiteStats(
            item_count=self.rating_service.item_count(),
            review_count=self.rating_service.review_count(),
            user_count=self.rating_service.author_count(),
            forum_post_count=self.activity_tracker.post_count(),
            thread_count=self.activity_tracker.thread_count(),
            generated_at=datetime.now(UTC),
        )
        logger.debug("Site stats projected", **stats.model_dump(exclude={"generated_at"}))
        return stats


def get_stats_projector() -> StatsProjector:
    """Return the process-wide StatsProjector (singleton) over the process-wide services."""
    global _projector_instance
    if _projector_instance is None:
        from forum.activity import get_activity_tracker
        from rankings.engine import get_rating_service

        _projector_instance = StatsProjector(
            rating_service=get_rating_service(),
            activity_tracker=get_activity_tracker(),
            refresh_seconds=get_settings().stats_refresh_seconds,
        )
    return _projector_instance


def reset_stats_projector():
    """Reset the projector singleton (useful for testing)."""
    global _projector_instance
    _projector_instance = None
