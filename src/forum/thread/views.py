"""Read side of the forum — thread pages and the thread index.

Counters come from the activity tracker, everything else from the ForumThread
aggregate. The index lists pinned threads first, then the most recently active.
"""

from __future__ import annotations

from datetime import datetime

from protean.utils.globals import current_domain
from pydantic import BaseModel

from forum.activity import get_activity_tracker
from forum.post.post import ForumPost
from forum.thread.moderation import load_thread
from forum.thread.thread import ForumThread


class ThreadView(BaseModel):
    thread_id: str
    category_id: str
    title: str
    author_id: str
    is_pinned: bool
    is_locked: bool
    reply_count: int
    last_activity_at: datetime
    created_at: datetime


class PostView(BaseModel):
    post_id: str
    author_id: str
    content: str
    created_at: datetime


def _merge(thread, summary) -> ThreadView:
    return ThreadView(
        thread_id=str(thread.id),
        category_id=str(thread.category_id),
        title=thread.title,
        author_id=str(thread.author_id),
        is_pinned=bool(thread.is_pinned),
        is_locked=summary.is_locked,
        reply_count=summary.reply_count,
        last_activity_at=summary.last_activity_at,
        created_at=thread.created_at,
    )


def describe_thread(thread_id: str) -> ThreadView:
    """Thread metadata merged with its live counters; ``NotFound`` if unknown."""
    summary = get_activity_tracker().describe(str(thread_id))
    thread = load_thread(current_domain.repository_for(ForumThread), thread_id)
    return _merge(thread, summary)


def list_threads(category_id: str | None = None) -> list[ThreadView]:
    repo = current_domain.repository_for(ForumThread)

    views = []
    for summary in get_activity_tracker().summaries():
        thread = load_thread(repo, summary.thread_id)
        if category_id is not None and str(thread.category_id) != str(category_id):
            continue
        views.append(_merge(thread, summary))

    views.sort(key=lambda view: view.thread_id)
    views.sort(key=lambda view: view.last_activity_at, reverse=True)
    views.sort(key=lambda view: not view.is_pinned)
    return views


def thread_posts(thread_id: str) -> list[PostView]:
    """Replies of a thread, oldest first."""
    repo = current_domain.repository_for(ForumPost)
    posts = repo._dao.query.filter(thread_id=str(thread_id)).all().items
    posts = sorted(posts, key=lambda post: (post.created_at, str(post.id)))
    return [
        PostView(
            post_id=str(post.id),
            author_id=str(post.author_id),
            content=post.content,
            created_at=post.created_at,
        )
        for post in posts
    ]
