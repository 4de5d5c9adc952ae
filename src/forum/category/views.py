"""Category index of the forum home page."""

from __future__ import annotations

from protean.utils.globals import current_domain
from pydantic import BaseModel

from forum.category.category import ForumCategory
from forum.thread.thread import ForumThread


class CategoryView(BaseModel):
    category_id: str
    name: str
    description: str | None = None
    display_order: int
    thread_count: int


def list_categories() -> list[CategoryView]:
    """Every category by ``display_order``; equal orders fall back to name."""
    categories = current_domain.repository_for(ForumCategory)._dao.query.all().items
    threads = current_domain.repository_for(ForumThread)._dao.query.all().items

    per_category: dict[str, int] = {}
    for thread in threads:
        key = str(thread.category_id)
        per_category[key] = per_category.get(key, 0) + 1

    categories = sorted(categories, key=lambda c: (c.display_order or 0, c.name, str(c.id)))
    return [
        CategoryView(
            category_id=str(category.id),
            name=category.name,
            description=category.description,
            display_order=category.display_order or 0,
            thread_count=per_category.get(str(category.id), 0),
        )
        for category in categories
    ]
