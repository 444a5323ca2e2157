"""Query helpers for catalogue aggregates."""

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.repository(part_of=Category)
class CategoryRepository:
    def find_by_name(self, name):
        return self._dao.query.filter(name=name).all().first

    def list_all(self):
        return self._dao.query.order_by("name").limit(None).all().items

    def has_subcategories(self, category_id) -> bool:
        return self._dao.query.filter(parent_category_id=str(category_id)).all().total > 0


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_by_sku(self, sku):
        return self._dao.query.filter(sku=sku).all().first

    def count_in_category(self, category_id) -> int:
        return self._dao.query.filter(category_id=str(category_id)).all().total

    def search(self, keyword=None, category_id=None, min_price=None, max_price=None, page=0, size=20):
        """Filter products and return one page of results, ordered by name.

        ``page`` is zero-based. The returned ResultSet carries ``total`` for
        the whole filtered set.
        """
        criteria = {}
        if keyword:
            criteria["name__icontains"] = keyword
        if category_id:
            criteria["category_id"] = category_id
        if min_price is not None:
            criteria["price__gte"] = min_price
        if max_price is not None:
            criteria["price__lte"] = max_price

        query = self._dao.query
        if criteria:
            query = query.filter(**criteria)

        return query.order_by("name").offset(page * size).limit(size).all()
