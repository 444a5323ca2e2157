"""Application tests for catalogue commands and product search."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.catalogue.category import Category
from storefront.cart.cart import Cart
from storefront.catalogue.management import (
    AddProductImage,
    AdjustStock,
    CreateCategory,
    RemoveCategory,
    RemoveProduct,
    UpdateCategory,
    UpdateProduct,
    adjust_stock,
    remove_product,
)
from storefront.catalogue.product import Product
from storefront.order.placement import PlaceOrder, place_order
from storefront.reviews.management import SubmitReview
from storefront.reviews.review import Review
from storefront.shared.errors import ConflictError


def _create_category(name="Kitchen", parent_category_id=None):
    return current_domain.process(CreateCategory(name=name, parent_category_id=parent_category_id), asynchronous=False)


class TestCategories:
    def test_create_category(self):
        category_id = _create_category()
        category = current_domain.repository_for(Category).get(category_id)
        assert category.name == "Kitchen"

    def test_duplicate_name_conflicts(self):
        _create_category()
        with pytest.raises(ConflictError):
            _create_category()

    def test_unknown_parent_is_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(CreateCategory(name="Mugs", parent_category_id="missing"), asynchronous=False)

    def test_listing_has_no_row_cap(self):
        for number in range(105):
            _create_category(f"Category {number:03d}")
        names = [category.name for category in current_domain.repository_for(Category).list_all()]
        assert len(names) == 105
        assert names == sorted(names)


class TestCategoryMaintenance:
    def _update(self, category_id, **changes):
        return current_domain.process(UpdateCategory(category_id=category_id, **changes), asynchronous=False)

    def test_update_details(self):
        parent = _create_category("Home")
        category_id = _create_category()
        self._update(category_id, name="Kitchenware", description="Pots and pans", parent_category_id=parent)

        category = current_domain.repository_for(Category).get(category_id)
        assert category.name == "Kitchenware"
        assert category.description == "Pots and pans"
        assert category.parent_category_id == parent

    def test_keeping_the_same_name_is_allowed(self):
        category_id = _create_category()
        self._update(category_id, name="Kitchen", description="Cookware")
        assert current_domain.repository_for(Category).get(category_id).description == "Cookware"

    def test_renaming_onto_another_category_conflicts(self):
        _create_category("Garden")
        category_id = _create_category()
        with pytest.raises(ConflictError):
            self._update(category_id, name="Garden")
        assert current_domain.repository_for(Category).get(category_id).name == "Kitchen"

    def test_category_cannot_be_its_own_parent(self):
        category_id = _create_category()
        with pytest.raises(ValidationError) as exc:
            self._update(category_id, parent_category_id=category_id)
        assert "parent_category_id" in exc.value.messages

    def test_category_cannot_move_under_its_descendant(self):
        home = _create_category("Home")
        kitchen = _create_category("Kitchen", parent_category_id=home)
        mugs = _create_category("Mugs", parent_category_id=kitchen)
        with pytest.raises(ValidationError):
            self._update(home, parent_category_id=mugs)
        assert current_domain.repository_for(Category).get(home).parent_category_id is None

    def test_unknown_parent_is_not_found(self):
        category_id = _create_category()
        with pytest.raises(ObjectNotFoundError):
            self._update(category_id, parent_category_id="missing")

    def test_remove_empty_category(self):
        category_id = _create_category()
        current_domain.process(RemoveCategory(category_id=category_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Category).get(category_id)

    def test_category_with_products_is_kept(self, create_product):
        category_id = _create_category()
        create_product(category_id=category_id)
        with pytest.raises(ValidationError) as exc:
            current_domain.process(RemoveCategory(category_id=category_id), asynchronous=False)
        assert "products" in exc.value.messages["category_id"][0]
        assert current_domain.repository_for(Category).get(category_id).name == "Kitchen"

    def test_category_with_subcategories_is_kept(self):
        home = _create_category("Home")
        _create_category("Kitchen", parent_category_id=home)
        with pytest.raises(ValidationError) as exc:
            current_domain.process(RemoveCategory(category_id=home), asynchronous=False)
        assert "sub-categories" in exc.value.messages["category_id"][0]


class TestProducts:
    def test_create_product_persists(self, create_product):
        product_id = create_product(name="Skillet", price=39.9, stock=12, sku="SKL-010")
        product = current_domain.repository_for(Product).get(product_id)
        assert product.sku == "SKL-010"
        assert product.stock_quantity == 12

    def test_duplicate_sku_conflicts(self, create_product):
        create_product(sku="MUG-001")
        with pytest.raises(ConflictError):
            create_product(sku="MUG-001")

    def test_unknown_category_is_not_found(self, create_product):
        with pytest.raises(ObjectNotFoundError):
            create_product(category_id="no-such-category")

    def test_update_product(self, create_product):
        category_id = _create_category()
        product_id = create_product(price=10.0)
        current_domain.process(
            UpdateProduct(product_id=product_id, name="Big Mug", price=11.0, category_id=category_id),
            asynchronous=False,
        )
        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Big Mug"
        assert product.price == 11.0
        assert product.category_id == category_id

    def test_adjust_stock(self, create_product):
        product_id = create_product(stock=3)
        result = adjust_stock(AdjustStock(product_id=product_id, delta=7, reason="Delivery"))
        assert result == 10
        assert current_domain.repository_for(Product).get(product_id).stock_quantity == 10

    def test_adjust_stock_below_zero_is_rejected(self, create_product):
        product_id = create_product(stock=3)
        with pytest.raises(ValidationError):
            adjust_stock(AdjustStock(product_id=product_id, delta=-4, reason="Shrinkage"))
        assert current_domain.repository_for(Product).get(product_id).stock_quantity == 3

    def test_add_image(self, create_product):
        product_id = create_product()
        current_domain.process(
            AddProductImage(product_id=product_id, url="https://cdn.example.com/mug.jpg"),
            asynchronous=False,
        )
        product = current_domain.repository_for(Product).get(product_id)
        assert [image.url for image in product.images] == ["https://cdn.example.com/mug.jpg"]


class TestProductRemoval:
    def _product(self, product_id):
        return current_domain.repository_for(Product).get(product_id)

    def test_remove_product_with_images_and_reviews(self, create_product, customer):
        product_id = create_product()
        current_domain.process(
            AddProductImage(product_id=product_id, url="https://cdn.example.com/mug.jpg"),
            asynchronous=False,
        )
        current_domain.process(SubmitReview(user_id=customer, product_id=product_id, rating=5), asynchronous=False)

        remove_product(RemoveProduct(product_id=product_id))

        with pytest.raises(ObjectNotFoundError):
            self._product(product_id)
        assert current_domain.repository_for(Review).for_product(product_id) == []

    def test_product_in_a_cart_is_kept(self, create_product, customer, add_to_cart):
        product_id = create_product(stock=4)
        add_to_cart(customer, product_id, 1)

        with pytest.raises(ValidationError) as exc:
            remove_product(RemoveProduct(product_id=product_id))

        assert "cart" in exc.value.messages["product_id"][0]
        assert self._product(product_id).stock_quantity == 4
        assert len(current_domain.repository_for(Cart).for_user(customer).lines) == 1

    def test_ordered_product_is_kept(self, create_product, customer, shipping_address, add_to_cart):
        product_id = create_product(stock=4)
        add_to_cart(customer, product_id, 1)
        place_order(PlaceOrder(user_id=customer, shipping_address_id=shipping_address))

        with pytest.raises(ValidationError) as exc:
            remove_product(RemoveProduct(product_id=product_id))

        assert "order" in exc.value.messages["product_id"][0]
        assert self._product(product_id).stock_quantity == 3

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            remove_product(RemoveProduct(product_id="no-such-product"))


class TestProductSearch:
    @pytest.fixture
    def catalogue(self, create_product):
        kitchen = _create_category("Kitchen")
        stationery = _create_category("Stationery")
        create_product(name="Ceramic Mug", price=12.5, category_id=kitchen)
        create_product(name="Cast Iron Skillet", price=39.9, category_id=kitchen)
        create_product(name="Dot Grid Notebook", price=8.75, category_id=stationery)
        create_product(name="Travel Mug", price=18.0, category_id=kitchen)
        return {"kitchen": kitchen, "stationery": stationery}

    def _names(self, **criteria):
        results = current_domain.repository_for(Product).search(**criteria)
        return [product.name for product in results.items]

    def test_keyword_is_case_insensitive(self, catalogue):
        assert self._names(keyword="mug") == ["Ceramic Mug", "Travel Mug"]

    def test_filter_by_category(self, catalogue):
        assert self._names(category_id=catalogue["stationery"]) == ["Dot Grid Notebook"]

    def test_price_range(self, catalogue):
        assert self._names(min_price=10, max_price=20) == ["Ceramic Mug", "Travel Mug"]

    def test_pagination(self, catalogue):
        first = current_domain.repository_for(Product).search(page=0, size=3)
        second = current_domain.repository_for(Product).search(page=1, size=3)
        assert len(first.items) == 3
        assert [p.name for p in second.items] == ["Travel Mug"]
        assert first.total == 4
