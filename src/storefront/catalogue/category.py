"""Category aggregate for grouping products."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String, Text

from storefront.domain import storefront


@storefront.aggregate
class Category:
    """A named grouping of products. Names are unique across the catalogue."""

    name: String(required=True, max_length=100, unique=True)
    description: Text()
    parent_category_id: Identifier()
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, name, description=None, parent_category_id=None):
        from storefront.catalogue.events import CategoryCreated

        now = datetime.now(UTC)
        category = cls(
            name=name,
            description=description,
            parent_category_id=parent_category_id,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=name,
                parent_category_id=parent_category_id,
            )
        )
        return category

    def update_details(self, name=None, description=None, parent_category_id=None):
        from storefront.catalogue.events import CategoryUpdated

        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if parent_category_id is not None:
            self.parent_category_id = parent_category_id

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CategoryUpdated(
                category_id=self.id,
                name=self.name,
                parent_category_id=self.parent_category_id,
            )
        )
