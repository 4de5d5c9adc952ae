"""ForumCategory aggregate — a board that groups discussion threads."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, Text

from forum.domain import forum


@forum.aggregate
class ForumCategory:
    name: String(required=True, max_length=100)
    description: Text()
    display_order: Integer(default=0)
    created_at: DateTime()

    @classmethod
    def create(cls, name, description=None, display_order=0):
        from forum.category.events import CategoryCreated

        if not name or not name.strip():
            raise ValidationError({"name": ["Category name cannot be empty"]})

        now = datetime.now(UTC)
        category = cls(
            name=name.strip(),
            description=description,
            display_order=display_order,
            created_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=str(category.id),
                name=category.name,
                display_order=display_order,
                created_at=now,
            )
        )
        return category
