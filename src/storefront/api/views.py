"""Aggregate to response-model translation."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddressResponse,
    AddressSnapshotSchema,
    CartLineResponse,
    CartResponse,
    CategoryResponse,
    OrderLineResponse,
    OrderResponse,
    ProductImageResponse,
    ProductResponse,
    ReviewResponse,
    UserResponse,
)
from storefront.catalogue.product import Product
from storefront.shared.money import as_float, line_subtotal, money_sum

_ADDRESS_PARTS = (
    "apartment_number",
    "floor",
    "building",
    "street_number",
    "street",
    "ward",
    "district",
    "city",
    "country",
)


def _opt_str(value):
    return str(value) if value is not None else None


def user_view(user) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        username=user.username,
        email=user.email.address,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        role=user.role,
        status=user.status,
    )


def address_view(address) -> AddressResponse:
    return AddressResponse(
        id=str(address.id),
        user_id=str(address.user_id),
        address_type=address.address_type,
        **{name: getattr(address, name) for name in _ADDRESS_PARTS},
    )


def category_view(category) -> CategoryResponse:
    return CategoryResponse(
        id=str(category.id),
        name=category.name,
        description=category.description,
        parent_category_id=_opt_str(category.parent_category_id),
    )


def product_view(product) -> ProductResponse:
    images = sorted(product.images, key=lambda image: image.display_order or 0)
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        description=product.description,
        price=product.price,
        sku=product.sku,
        stock_quantity=product.stock_quantity,
        category_id=_opt_str(product.category_id),
        images=[
            ProductImageResponse(id=str(image.id), url=image.url, display_order=image.display_order or 0)
            for image in images
        ],
    )


def review_view(review) -> ReviewResponse:
    return ReviewResponse(
        id=str(review.id),
        user_id=str(review.user_id),
        product_id=str(review.product_id),
        rating=review.rating,
        comment=review.comment,
        created_at=review.created_at,
    )


def cart_view(cart) -> CartResponse:
    """Render a cart with each line priced at the product's current price."""
    product_repo = current_domain.repository_for(Product)

    lines = []
    for line in cart.lines:
        try:
            product = product_repo.get(line.product_id)
            name, price = product.name, product.price
        except ObjectNotFoundError:
            name, price = None, 0.0

        lines.append(
            CartLineResponse(
                id=str(line.id),
                product_id=str(line.product_id),
                product_name=name,
                unit_price=price,
                quantity=line.quantity,
                subtotal=as_float(line_subtotal(price, line.quantity)),
            )
        )

    return CartResponse(
        id=str(cart.id),
        user_id=str(cart.user_id),
        lines=lines,
        total_amount=as_float(money_sum(line.subtotal for line in lines)),
        total_items=cart.item_count,
    )


def _snapshot_view(snapshot):
    if snapshot is None:
        return None
    return AddressSnapshotSchema(**{name: getattr(snapshot, name) for name in _ADDRESS_PARTS})


def order_view(order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        order_code=order.order_code,
        user_id=str(order.user_id),
        status=order.status,
        payment_method=order.payment_method,
        payment_status=order.payment_status,
        notes=order.notes,
        total_amount=order.total_amount,
        shipping_address_id=str(order.shipping_address_id),
        shipping_address=_snapshot_view(order.shipping_address),
        billing_address_id=str(order.billing_address_id),
        billing_address=_snapshot_view(order.billing_address),
        lines=[
            OrderLineResponse(
                id=str(line.id),
                product_id=str(line.product_id),
                product_name=line.product_name,
                sku=line.sku,
                quantity=line.quantity,
                unit_price=line.unit_price,
                subtotal=line.subtotal,
            )
            for line in order.lines
        ],
        placed_at=order.placed_at,
        updated_at=order.updated_at,
    )
