"""Tests for StatsProjector — site-wide display counters."""

from datetime import UTC, datetime

import pytest
from forum.activity import get_activity_tracker
from forum.activity.tracker import ThreadActivityTracker
from rankings.engine import get_rating_service
from rankings.engine.service import RatingService
from shared.config import EngineSettings
from stats.projector import StatsProjector, get_stats_projector

T0 = datetime(2024, 6, 1, tzinfo=UTC)


class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture()
def service():
    service = RatingService(settings=EngineSettings())
    service.register_item("item-1", "fantasy")
    service.register_item("item-2", "horror")
    service.submit_review("alice", "item-1", 5)
    service.submit_review("alice", "item-2", 3)
    service.submit_review("bob", "item-2", 4)
    return service


@pytest.fixture()
def tracker():
    tracker = ThreadActivityTracker()
    tracker.open_thread("thread-1", T0)
    tracker.open_thread("thread-2", T0)
    tracker.record_post("thread-1", T0)
    return tracker


class TestSnapshot:
    def test_counts_come_from_the_engines(self, service, tracker):
        stats = StatsProjector(service, tracker).snapshot()

        assert stats.item_count == 2
        assert stats.review_count == 3
        assert stats.user_count == 2
        assert stats.forum_post_count == 1
        assert stats.thread_count == 2
        assert stats.generated_at.tzinfo is not None

    def test_empty_site(self):
        stats = StatsProjector(RatingService(settings=EngineSettings()), ThreadActivityTracker()).snapshot()
        assert stats.item_count == 0
        assert stats.review_count == 0
        assert stats.user_count == 0
        assert stats.forum_post_count == 0

    def test_withdrawn_reviews_not_counted(self, service, tracker):
        service.remove_review("alice", "item-1")
        stats = StatsProjector(service, tracker).snapshot()
        assert stats.review_count == 2
        assert stats.user_count == 2


class TestRefreshInterval:
    def test_zero_interval_recomputes_every_read(self, service, tracker):
        projector = StatsProjector(service, tracker)
        projector.snapshot()
        tracker.record_post("thread-2", T0)
        assert projector.snapshot().forum_post_count == 2

    def test_snapshot_reused_within_interval(self, service, tracker):
        clock = _Clock()
        projector = StatsProjector(service, tracker, refresh_seconds=60, clock=clock)
        first = projector.snapshot()

        tracker.record_post("thread-2", T0)
        clock.now = 59
        assert projector.snapshot() is first

        clock.now = 60
        assert projector.snapshot().forum_post_count == 2

    def test_refresh_forces_recompute(self, service, tracker):
        projector = StatsProjector(service, tracker, refresh_seconds=60, clock=_Clock())
        projector.snapshot()
        tracker.record_post("thread-2", T0)
        assert projector.refresh().forum_post_count == 2


class TestProcessWideProjector:
    def test_reads_process_wide_services(self):
        get_rating_service().register_item("item-1", "fantasy")
        get_activity_tracker().open_thread("thread-1", T0)

        stats = get_stats_projector().snapshot()
        assert stats.item_count == 1
        assert stats.thread_count == 1
        assert get_stats_projector() is get_stats_projector()
