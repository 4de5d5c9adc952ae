"""Forum bounded context — categories, threads, posts and thread activity.

Thread metadata (title, category, pin/lock flags) is owned by the ForumThread
aggregate; the denormalized reply counter and last-activity timestamp are owned
by the ThreadActivityTracker and updated in the same unit as each new post.
"""

from protean.domain import Domain
from shared.logging_config import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

forum = Domain(name="forum")
