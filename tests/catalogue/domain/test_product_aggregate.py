"""Tests for the Product aggregate: pricing and stock movements."""

import pytest
from protean.exceptions import ValidationError

from storefront.catalogue.events import ProductCreated, ProductPriceChanged, StockAdjusted
from storefront.catalogue.product import Product


def _make_product(stock=5, price=19.99):
    return Product.create(name="Fountain Pen", sku="PEN-FP1", price=price, stock_quantity=stock)


class TestProductCreation:
    def test_create_sets_fields(self):
        product = _make_product()
        assert product.name == "Fountain Pen"
        assert product.sku == "PEN-FP1"
        assert product.price == 19.99
        assert product.stock_quantity == 5

    def test_create_raises_product_created(self):
        product = _make_product()
        events = [e for e in product._events if isinstance(e, ProductCreated)]
        assert len(events) == 1
        assert events[0].sku == "PEN-FP1"

    def test_price_is_rounded_to_cents(self):
        product = _make_product(price=10.005)
        assert product.price == 10.01

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            _make_product(price=0)

    def test_stock_cannot_start_negative(self):
        with pytest.raises(ValidationError):
            _make_product(stock=-1)


class TestTakeStock:
    def test_take_stock_decrements(self):
        product = _make_product(stock=5)
        product.take_stock(3)
        assert product.stock_quantity == 2

    def test_take_all_stock(self):
        product = _make_product(stock=5)
        product.take_stock(5)
        assert product.stock_quantity == 0

    def test_take_more_than_available_names_the_product(self):
        product = _make_product(stock=2)
        with pytest.raises(ValidationError) as exc:
            product.take_stock(3)
        assert "Fountain Pen" in exc.value.messages["stock_quantity"][0]
        assert product.stock_quantity == 2

    def test_take_stock_requires_positive_quantity(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.take_stock(0)

    def test_take_stock_raises_stock_adjusted(self):
        product = _make_product(stock=5)
        product.take_stock(2, reason="Order placed")
        events = [e for e in product._events if isinstance(e, StockAdjusted)]
        assert events[-1].delta == -2
        assert events[-1].stock_quantity == 3


class TestReturnAndAdjustStock:
    def test_return_stock_increments(self):
        product = _make_product(stock=1)
        product.return_stock(4)
        assert product.stock_quantity == 5

    def test_adjust_stock_up_and_down(self):
        product = _make_product(stock=5)
        product.adjust_stock(10, "Delivery received")
        product.adjust_stock(-3, "Damaged")
        assert product.stock_quantity == 12

    def test_adjust_below_zero_is_rejected(self):
        product = _make_product(stock=2)
        with pytest.raises(ValidationError):
            product.adjust_stock(-3, "Shrinkage")
        assert product.stock_quantity == 2

    def test_zero_adjustment_is_rejected(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.adjust_stock(0, "Nothing")


class TestPriceAndImages:
    def test_change_price_raises_event(self):
        product = _make_product(price=10.0)
        product.change_price(12.5)
        assert product.price == 12.5
        events = [e for e in product._events if isinstance(e, ProductPriceChanged)]
        assert events[0].previous_price == 10.0
        assert events[0].new_price == 12.5

    def test_same_price_is_a_no_op(self):
        product = _make_product(price=10.0)
        product.change_price(10.0)
        assert not [e for e in product._events if isinstance(e, ProductPriceChanged)]

    def test_images_are_ordered_by_display_order(self):
        product = _make_product()
        product.add_image("https://cdn.example.com/b.jpg", display_order=2)
        product.add_image("https://cdn.example.com/a.jpg", display_order=1)
        assert product.primary_image_url == "https://cdn.example.com/a.jpg"

    def test_image_display_order_defaults_to_position(self):
        product = _make_product()
        product.add_image("https://cdn.example.com/a.jpg")
        second = product.add_image("https://cdn.example.com/b.jpg")
        assert second.display_order == 1
