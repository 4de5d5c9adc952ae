"""SubmitReview — create or update an author's review of an RPG item.

One active review per author per item: a second submission for the same pair
updates the rating in place. The rating service applies the aggregate change,
the ranking reposition and the cache invalidation as one unit; the RpgItem then
records the outcome as a domain event.
"""

from protean.fields import DateTime, Float, Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from rankings.domain import rankings
from rankings.engine import get_rating_service
from rankings.item.item import RpgItem


@rankings.command(part_of="RpgItem")
class SubmitReview:
    author_id = Identifier(required=True)
    item_id = Identifier(required=True)
    rating = Float(required=True)
    created_at = DateTime()


@rankings.command_handler(part_of=RpgItem)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        outcome = get_rating_service().submit_review(
            author_id=str(command.author_id),
            item_id=str(command.item_id),
            rating=command.rating,
            created_at=command.created_at,
        )

        repo = current_domain.repository_for(RpgItem)
        item = repo.get(command.item_id)
        item.record_review(outcome, command.rating)
        repo.add(item)
        return outcome
