"""Product aggregate root with its owned images.

Stock on hand lives on the product. Every movement goes through
``take_stock``, ``return_stock`` or ``adjust_stock`` so the quantity can never
drop below zero and each change raises ``StockAdjusted``.
"""

from datetime import UTC, datetime
from decimal import Decimal

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.money import as_float, to_money


@storefront.entity(part_of="Product")
class ProductImage:
    url: String(required=True, max_length=500)
    display_order: Integer(default=0, min_value=0)


@storefront.aggregate
class Product:
    """A sellable item with a list price and a stock count."""

    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.01)
    sku: String(required=True, max_length=100, unique=True)
    stock_quantity: Integer(default=0, min_value=0)
    category_id: Identifier()
    images: HasMany(ProductImage)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def price_must_have_at_most_two_decimals(self):
        if self.price is not None and Decimal(str(self.price)) != to_money(self.price):
            raise ValidationError({"price": ["Price must have at most two decimal places"]})

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock_quantity is not None and self.stock_quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock quantity cannot be negative"]})

    @classmethod
    def create(cls, name, sku, price, stock_quantity=0, description=None, category_id=None):
        from storefront.catalogue.events import ProductCreated

        now = datetime.now(UTC)
        product = cls(
            name=name,
            sku=sku,
            price=as_float(to_money(price)),
            stock_quantity=stock_quantity or 0,
            description=description,
            category_id=category_id,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                sku=sku,
                name=name,
                price=product.price,
                stock_quantity=product.stock_quantity,
                category_id=category_id,
                created_at=now,
            )
        )
        return product

    @property
    def primary_image_url(self):
        if not self.images:
            return None
        return sorted(self.images, key=lambda image: image.display_order or 0)[0].url

    def has_stock_for(self, quantity: int) -> bool:
        return (self.stock_quantity or 0) >= quantity

    def update_details(self, name=None, description=None, category_id=None):
        from storefront.catalogue.events import ProductDetailsUpdated

        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if category_id is not None:
            self.category_id = category_id

        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                description=self.description,
                category_id=self.category_id,
            )
        )

    def change_price(self, new_price):
        from storefront.catalogue.events import ProductPriceChanged

        new_amount = as_float(to_money(new_price))
        if new_amount == self.price:
            return

        previous_price = self.price
        self.price = new_amount
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductPriceChanged(
                product_id=self.id,
                previous_price=previous_price,
                new_price=new_amount,
            )
        )

    def take_stock(self, quantity: int, reason: str = "Order placed"):
        """Remove ``quantity`` units from stock, refusing to oversell."""
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if not self.has_stock_for(quantity):
            raise ValidationError({"stock_quantity": [f"Not enough stock available for product: {self.name}"]})

        self._move_stock(-quantity, reason)

    def return_stock(self, quantity: int, reason: str = "Order cancelled"):
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        self._move_stock(quantity, reason)

    def adjust_stock(self, delta: int, reason: str):
        """Apply a signed manual correction to stock on hand."""
        if not delta:
            raise ValidationError({"delta": ["Stock adjustment cannot be zero"]})
        if (self.stock_quantity or 0) + delta < 0:
            raise ValidationError(
                {"stock_quantity": [f"Adjustment of {delta} would leave negative stock for product: {self.name}"]}
            )

        self._move_stock(delta, reason)

    def _move_stock(self, delta: int, reason: str):
        from storefront.catalogue.events import StockAdjusted

        self.stock_quantity = (self.stock_quantity or 0) + delta
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockAdjusted(
                product_id=self.id,
                delta=delta,
                stock_quantity=self.stock_quantity,
                reason=reason,
            )
        )

    def add_image(self, url, display_order=None):
        from storefront.catalogue.events import ProductImageAdded

        if display_order is None:
            display_order = len(self.images)

        image = ProductImage(url=url, display_order=display_order)
        self.add_images(image)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductImageAdded(
                product_id=self.id,
                image_id=image.id,
                url=url,
                display_order=display_order,
            )
        )
        return image
