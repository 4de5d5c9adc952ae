"""RemoveReview — delete an author's active review of an RPG item."""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from rankings.domain import rankings
from rankings.engine import get_rating_service
from rankings.item.item import RpgItem


@rankings.command(part_of="RpgItem")
class RemoveReview:
    author_id = Identifier(required=True)
    item_id = Identifier(required=True)


@rankings.command_handler(part_of=RpgItem)
class RemoveReviewHandler:
    @handle(RemoveReview)
    def remove_review(self, command):
        outcome = get_rating_service().remove_review(
            author_id=str(command.author_id),
            item_id=str(command.item_id),
        )

        repo = current_domain.repository_for(RpgItem)
        item = repo.get(command.item_id)
        item.withdraw_review(outcome)
        repo.add(item)
        return outcome
