from storefront.domain import storefront
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def for_user(self, user_id):
        """All of the user's orders, newest first."""
        return self._dao.query.filter(user_id=user_id).order_by("-placed_at").limit(None).all().items

    def newest_first(self):
        return self._dao.query.order_by("-placed_at").limit(None).all().items

    def page_for_user(self, user_id, page=0, size=20):
        """One zero-based page of the user's orders, newest first.

        The ResultSet's ``total`` counts all of the user's orders.
        """
        query = self._dao.query.filter(user_id=user_id).order_by("-placed_at")
        return query.offset(page * size).limit(size).all()

    def page_all(self, page=0, size=20):
        return self._dao.query.order_by("-placed_at").offset(page * size).limit(size).all()

    def find_by_code(self, order_code):
        return self._dao.query.filter(order_code=order_code).all().first

    def references_address(self, address_id) -> bool:
        address_id = str(address_id)
        return bool(
            self._dao.query.filter(shipping_address_id=address_id).all().total
            or self._dao.query.filter(billing_address_id=address_id).all().total
        )
