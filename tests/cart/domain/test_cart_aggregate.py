"""Tests for the Cart aggregate."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.cart.cart import Cart
from storefront.cart.events import CartCleared, CartLineAdded, CartLineRemoved


def _make_cart():
    return Cart.create(user_id="user-001")


class TestAddProduct:
    def test_add_product(self):
        cart = _make_cart()
        cart.add_product("prod-001", 2, available_stock=10)
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 2

    def test_add_raises_event(self):
        cart = _make_cart()
        cart.add_product("prod-001", 1, available_stock=10)
        events = [e for e in cart._events if isinstance(e, CartLineAdded)]
        assert len(events) == 1
        assert events[0].product_id == "prod-001"

    def test_same_product_merges_quantity(self):
        cart = _make_cart()
        cart.add_product("prod-001", 1, available_stock=10)
        cart.add_product("prod-001", 2, available_stock=10)
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 3

    def test_merged_quantity_is_checked_against_stock(self):
        cart = _make_cart()
        cart.add_product("prod-001", 3, available_stock=4)
        with pytest.raises(ValidationError):
            cart.add_product("prod-001", 2, available_stock=4)
        assert cart.lines[0].quantity == 3

    def test_quantity_must_be_positive(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.add_product("prod-001", 0, available_stock=10)


class TestChangeQuantity:
    def test_change_quantity(self):
        cart = _make_cart()
        line = cart.add_product("prod-001", 1, available_stock=10)
        cart.change_quantity(line.id, 5, available_stock=10)
        assert cart.lines[0].quantity == 5

    def test_change_beyond_stock_is_rejected(self):
        cart = _make_cart()
        line = cart.add_product("prod-001", 1, available_stock=3)
        with pytest.raises(ValidationError):
            cart.change_quantity(line.id, 4, available_stock=3)

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_zero_or_less_removes_line(self, quantity):
        cart = _make_cart()
        line = cart.add_product("prod-001", 1, available_stock=3)
        cart.change_quantity(line.id, quantity, available_stock=0)
        assert cart.is_empty

    def test_unknown_line_is_not_found(self):
        cart = _make_cart()
        with pytest.raises(ObjectNotFoundError):
            cart.change_quantity("missing", 1, available_stock=10)


class TestRemoveAndClear:
    def test_remove_line(self):
        cart = _make_cart()
        line = cart.add_product("prod-001", 1, available_stock=10)
        cart.remove_line(line.id)
        assert cart.is_empty
        assert [e for e in cart._events if isinstance(e, CartLineRemoved)]

    def test_remove_unknown_line_is_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            _make_cart().remove_line("missing")

    def test_clear(self):
        cart = _make_cart()
        cart.add_product("prod-001", 1, available_stock=10)
        cart.add_product("prod-002", 2, available_stock=10)
        assert cart.clear() == 2
        assert cart.is_empty
        assert cart.item_count == 0
        assert [e for e in cart._events if isinstance(e, CartCleared)]

    def test_item_count_sums_quantities(self):
        cart = _make_cart()
        cart.add_product("prod-001", 2, available_stock=10)
        cart.add_product("prod-002", 3, available_stock=10)
        assert cart.item_count == 5
        assert sorted(cart.product_ids) == ["prod-001", "prod-002"]
