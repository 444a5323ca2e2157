"""Domain events for the Category and Product aggregates."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Category")
class CategoryCreated:
    """A category was added to the catalogue."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    parent_category_id: Identifier()


@storefront.event(part_of="Category")
class CategoryUpdated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    parent_category_id: Identifier()


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was listed."""

    __version__ = 1

    product_id: Identifier(required=True)
    sku: String(required=True)
    name: String(required=True)
    price: Float(required=True)
    stock_quantity: Integer(required=True)
    category_id: Identifier()
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    description: String()
    category_id: Identifier()


@storefront.event(part_of="Product")
class ProductPriceChanged:
    """The list price changed. Orders already placed keep their captured price."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: Float(required=True)
    new_price: Float(required=True)


@storefront.event(part_of="Product")
class StockAdjusted:
    """Stock on hand moved by ``delta`` units."""

    __version__ = 1

    product_id: Identifier(required=True)
    delta: Integer(required=True)
    stock_quantity: Integer(required=True)
    reason: String(required=True)


@storefront.event(part_of="Product")
class ProductImageAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    image_id: Identifier(required=True)
    url: String(required=True)
    display_order: Integer()
