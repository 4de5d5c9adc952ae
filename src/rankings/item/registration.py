"""RpgItem registration and delisting — commands and handler.

Registering an item creates its empty rating aggregate and places it in the
"overall" and genre rankings at the prior mean.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from rankings.domain import rankings
from rankings.engine import get_rating_service
from rankings.engine.service import RatingService
from rankings.item.item import RpgItem


@rankings.command(part_of="RpgItem")
class RegisterItem:
    title: String(required=True, max_length=200)
    genre: String(required=True, max_length=50)
    game_system: String(max_length=100)
    publisher: String(max_length=100)


@rankings.command(part_of="RpgItem")
class DelistItem:
    item_id: Identifier(required=True)


@rankings.command_handler(part_of=RpgItem)
class ItemRegistrationHandler:
    @handle(RegisterItem)
    def register_item(self, command):
        genre = RatingService.validate_genre(command.genre)

        item = RpgItem.register(
            title=command.title,
            genre=genre,
            game_system=command.game_system,
            publisher=command.publisher,
        )
        get_rating_service().register_item(str(item.id), genre)
        current_domain.repository_for(RpgItem).add(item)
        return str(item.id)

    @handle(DelistItem)
    def delist_item(self, command):
        repo = current_domain.repository_for(RpgItem)
        item = repo.get(command.item_id)
        item.delist()
        get_rating_service().delist_item(str(item.id))
        repo.add(item)
