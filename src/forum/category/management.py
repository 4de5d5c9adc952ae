"""Forum category management — command and handler."""

from protean import handle
from protean.fields import Integer, String, Text
from protean.utils.globals import current_domain

from forum.category.category import ForumCategory
from forum.domain import forum


@forum.command(part_of="ForumCategory")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()
    display_order: Integer(default=0)


@forum.command_handler(part_of=ForumCategory)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        category = ForumCategory.create(
            name=command.name,
            description=command.description,
            display_order=command.display_order or 0,
        )
        current_domain.repository_for(ForumCategory).add(category)
        return str(category.id)
