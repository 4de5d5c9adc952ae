"""Application tests for the forum read side."""

from datetime import UTC, datetime, timedelta

import pytest
from forum.category.management import CreateCategory
from forum.post.creation import CreateForumPost
from forum.thread.moderation import PinThread
from forum.thread.starting import StartThread
from forum.thread.views import describe_thread, list_threads
from protean import current_domain
from shared.errors import NotFound

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def _at(seconds):
    return T0 + timedelta(seconds=seconds)


def _category(name):
    return current_domain.process(CreateCategory(name=name), asynchronous=False)


def _thread(category_id, title, created_at):
    return current_domain.process(
        StartThread(
            category_id=category_id,
            author_id="member-001",
            title=title,
            body="Opening post",
            created_at=created_at,
        ),
        asynchronous=False,
    )


def _reply(thread_id, created_at):
    current_domain.process(
        CreateForumPost(thread_id=thread_id, author_id="member-002", content="Reply", created_at=created_at),
        asynchronous=False,
    )


class TestDescribeThread:
    def test_merges_metadata_and_counters(self):
        thread_id = _thread(_category("General"), "Welcome", _at(0))
        _reply(thread_id, _at(30))

        view = describe_thread(thread_id)
        assert view.title == "Welcome"
        assert view.reply_count == 1
        assert view.last_activity_at == _at(30)
        assert view.is_locked is False

    def test_unknown_thread(self):
        with pytest.raises(NotFound):
            describe_thread("no-such-thread")


class TestListThreads:
    def test_most_recent_activity_first(self):
        category_id = _category("General")
        quiet = _thread(category_id, "Quiet", _at(0))
        busy = _thread(category_id, "Busy", _at(10))
        _reply(quiet, _at(500))

        assert [v.thread_id for v in list_threads()] == [quiet, busy]

    def test_pinned_threads_come_first(self):
        category_id = _category("General")
        rules = _thread(category_id, "Forum rules", _at(0))
        latest = _thread(category_id, "Latest news", _at(100))
        current_domain.process(PinThread(thread_id=rules, moderator_id="mod-001"), asynchronous=False)

        assert [v.thread_id for v in list_threads()] == [rules, latest]

    def test_filter_by_category(self):
        general = _category("General")
        trading = _category("Trading")
        _thread(general, "Hello", _at(0))
        sale = _thread(trading, "Selling dice", _at(5))

        assert [v.thread_id for v in list_threads(category_id=trading)] == [sale]
