"""Read side of the rankings context — ranked listings, the browse page and the
recent-reviews feed, all with catalogue metadata.

Rankings come from the rating service (cache first, then engine). Titles are
looked up on the RpgItem aggregate; an item whose catalogue record is missing
is still listed, with no title.
"""

from __future__ import annotations

from datetime import datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from pydantic import BaseModel

from rankings.engine import get_rating_service
from rankings.engine.ranking import RankedItem
from rankings.engine.service import normalize_genre
from rankings.item.item import ItemStatus, RpgItem


class RankedItemView(BaseModel):
    position: int
    item_id: str
    title: str | None = None
    genre: str
    rating_count: int
    average_rating: float
    bayesian_score: float


class ItemView(BaseModel):
    item_id: str
    title: str
    genre: str
    game_system: str | None = None
    publisher: str | None = None
    rating_count: int
    average_rating: float
    bayesian_score: float


class ReviewView(BaseModel):
    review_id: str
    item_id: str
    title: str | None = None
    author_id: str
    rating: float
    created_at: datetime
    updated_at: datetime


def _title_of(item_id: str) -> str | None:
    try:
        return current_domain.repository_for(RpgItem).get(item_id).title
    except ObjectNotFoundError:
        return None


def _view(entry: RankedItem, position: int) -> RankedItemView:
    return RankedItemView(
        position=position,
        item_id=entry.item_id,
        title=_title_of(entry.item_id),
        genre=entry.genre,
        rating_count=entry.rating_count,
        average_rating=round(float(entry.average_rating), 2),
        bayesian_score=round(float(entry.bayesian_score), 2),
    )


def ranked_items(genre: str = "overall", limit: int | None = 10, offset: int = 0) -> list[RankedItemView]:
    """Top items of a genre; an unknown genre yields an empty list."""
    entries = get_rating_service().rankings(genre, limit=limit, offset=offset)
    return [_view(entry, offset + index + 1) for index, entry in enumerate(entries)]


def item_rating(item_id: str) -> RankedItemView:
    """Current standing of a single item within its genre; ``NotFound`` for unknown items."""
    service = get_rating_service()
    entry = service.item_summary(item_id)
    ids = [ranked.item_id for ranked in service.rankings(entry.genre, limit=None)]
    position = ids.index(item_id) + 1 if item_id in ids else 0
    return _view(entry, position)


def browse_items(genre: str | None = None, game_system: str | None = None) -> list[ItemView]:
    """Listed items by title, optionally narrowed to one genre and/or game system."""
    items = current_domain.repository_for(RpgItem)._dao.query.filter(status=ItemStatus.LISTED.value).all().items

    tag = normalize_genre(genre)
    if tag:
        items = [item for item in items if normalize_genre(item.genre) == tag]
    if game_system and game_system.strip():
        system = game_system.strip().casefold()
        items = [item for item in items if (item.game_system or "").strip().casefold() == system]

    service = get_rating_service()
    views = []
    for item in sorted(items, key=lambda i: (i.title.casefold(), str(i.id))):
        entry = service.item_summary(str(item.id))
        views.append(
            ItemView(
                item_id=str(item.id),
                title=item.title,
                genre=entry.genre,
                game_system=item.game_system,
                publisher=item.publisher,
                rating_count=entry.rating_count,
                average_rating=round(float(entry.average_rating), 2),
                bayesian_score=round(float(entry.bayesian_score), 2),
            )
        )
    return views


def recent_reviews(limit: int = 10) -> list[ReviewView]:
    """Newest active reviews across the catalogue."""
    return [
        ReviewView(
            review_id=review.review_id,
            item_id=review.item_id,
            title=_title_of(review.item_id),
            author_id=review.author_id,
            rating=float(review.rating),
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
        for review in get_rating_service().recent_reviews(limit)
    ]
