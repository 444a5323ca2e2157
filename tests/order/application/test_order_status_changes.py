"""Application tests for cancellation and administrative status updates."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.catalogue.product import Product
from storefront.order.cancellation import CancelOrder, cancel_order
from storefront.order.order import Order
from storefront.order.status import UpdateOrderStatus, UpdatePaymentStatus, run_with_order_locks


def _stock(product_id):
    return current_domain.repository_for(Product).get(product_id).stock_quantity


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


def _set_status(order_id, status):
    return run_with_order_locks(UpdateOrderStatus(order_id=order_id, status=status))


class TestCancelOrder:
    def test_cancel_restores_stock(self, placed_order, customer, stocked_product):
        assert _stock(stocked_product) == 3
        cancel_order(CancelOrder(order_id=placed_order.id, user_id=customer))

        assert _order(placed_order.id).status == "CANCELLED"
        assert _stock(stocked_product) == 5

    def test_cancel_processing_order(self, placed_order, customer, stocked_product):
        _set_status(placed_order.id, "PROCESSING")
        cancel_order(CancelOrder(order_id=placed_order.id, user_id=customer))
        assert _stock(stocked_product) == 5

    def test_cancel_restores_every_line(self, customer, shipping_address, create_product, add_to_cart, place):
        mug = create_product(name="Mug", stock=4)
        pen = create_product(name="Pen", stock=9)
        add_to_cart(customer, mug, 4)
        add_to_cart(customer, pen, 2)
        order_id = place(customer, shipping_address)

        cancel_order(CancelOrder(order_id=order_id, user_id=customer))
        assert (_stock(mug), _stock(pen)) == (4, 9)

    def test_shipped_order_cannot_be_cancelled(self, placed_order, customer, stocked_product):
        _set_status(placed_order.id, "PROCESSING")
        _set_status(placed_order.id, "SHIPPED")

        with pytest.raises(ValidationError) as exc:
            cancel_order(CancelOrder(order_id=placed_order.id, user_id=customer))
        assert exc.value.messages["status"] == ["Order cannot be cancelled"]
        assert _stock(stocked_product) == 3

    def test_cancelling_twice_is_rejected(self, placed_order, customer, stocked_product):
        cancel_order(CancelOrder(order_id=placed_order.id, user_id=customer))
        with pytest.raises(ValidationError):
            cancel_order(CancelOrder(order_id=placed_order.id, user_id=customer))
        assert _stock(stocked_product) == 5

    def test_other_users_order_is_not_found(self, placed_order, register_user, stocked_product):
        intruder = register_user(username="mallory")
        with pytest.raises(ObjectNotFoundError):
            cancel_order(CancelOrder(order_id=placed_order.id, user_id=intruder))
        assert _order(placed_order.id).status == "PENDING"

    def test_unknown_order_is_not_found(self, customer):
        with pytest.raises(ObjectNotFoundError):
            cancel_order(CancelOrder(order_id="no-such-order", user_id=customer))


class TestUpdateOrderStatus:
    def test_happy_path_to_delivered(self, placed_order, stocked_product):
        for status in ("PROCESSING", "SHIPPED", "DELIVERED"):
            _set_status(placed_order.id, status)
        assert _order(placed_order.id).status == "DELIVERED"
        assert _stock(stocked_product) == 3

    def test_same_status_is_a_no_op(self, placed_order):
        _set_status(placed_order.id, "PENDING")
        assert _order(placed_order.id).status == "PENDING"

    def test_transition_outside_table_is_rejected(self, placed_order):
        with pytest.raises(ValidationError):
            _set_status(placed_order.id, "DELIVERED")
        assert _order(placed_order.id).status == "PENDING"

    @pytest.mark.parametrize("target", ["CANCELLED", "FAILED"])
    def test_admin_cancel_or_fail_restores_stock(self, placed_order, stocked_product, target):
        _set_status(placed_order.id, target)
        assert _stock(stocked_product) == 5

    def test_failing_a_shipped_order_keeps_stock_out(self, placed_order, stocked_product):
        _set_status(placed_order.id, "PROCESSING")
        _set_status(placed_order.id, "SHIPPED")
        _set_status(placed_order.id, "FAILED")
        assert _stock(stocked_product) == 3

    def test_terminal_states_are_final(self, placed_order):
        _set_status(placed_order.id, "CANCELLED")
        with pytest.raises(ValidationError):
            _set_status(placed_order.id, "PROCESSING")

    def test_unknown_order_is_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            _set_status("no-such-order", "PROCESSING")


class TestUpdatePaymentStatus:
    def _pay(self, order_id, status):
        current_domain.process(UpdatePaymentStatus(order_id=order_id, payment_status=status), asynchronous=False)

    def test_paid_then_refunded(self, placed_order):
        self._pay(placed_order.id, "PAID")
        self._pay(placed_order.id, "REFUNDED")
        assert _order(placed_order.id).payment_status == "REFUNDED"

    def test_refund_before_payment_is_rejected(self, placed_order):
        with pytest.raises(ValidationError):
            self._pay(placed_order.id, "REFUNDED")

    def test_payment_does_not_touch_order_status(self, placed_order):
        self._pay(placed_order.id, "PAID")
        assert _order(placed_order.id).status == "PENDING"
