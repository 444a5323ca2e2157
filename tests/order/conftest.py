import pytest
from protean import current_domain

from storefront.order.order import Order
from storefront.order.placement import PlaceOrder, place_order


@pytest.fixture
def stocked_product(create_product):
    return create_product(name="Fountain Pen", price=24.0, stock=5)


@pytest.fixture
def place():
    def _place(user_id, shipping_address_id, **kwargs):
        return place_order(PlaceOrder(user_id=user_id, shipping_address_id=shipping_address_id, **kwargs))

    return _place


@pytest.fixture
def placed_order(customer, shipping_address, stocked_product, add_to_cart, place):
    """A PENDING order for 2 of the 5 stocked units."""
    add_to_cart(customer, stocked_product, 2)
    order_id = place(customer, shipping_address)
    return current_domain.repository_for(Order).get(order_id)
