from storefront.domain import storefront
from storefront.reviews.review import Review


@storefront.repository(part_of=Review)
class ReviewRepository:
    def for_product(self, product_id):
        return self._dao.query.filter(product_id=product_id).order_by("-created_at").limit(None).all().items

    def page_for_product(self, product_id, page=0, size=10):
        query = self._dao.query.filter(product_id=product_id).order_by("-created_at")
        return query.offset(page * size).limit(size).all()

    def by_author(self, user_id, product_id):
        return self._dao.query.filter(user_id=user_id, product_id=product_id).all().first
