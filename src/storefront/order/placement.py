"""Order placement: turn a user's cart into an order.

``place_order`` is the entry point. It learns which products the cart holds,
takes their locks through the inventory guard and only then runs the
``PlaceOrder`` command, so the locks stay held until the unit of work wrapping
the handler has committed. Inside the handler each line's read, check and
decrement runs in that product's critical section. A cart line whose product
lock the caller does not hold is refused with a retryable conflict.

Any failure aborts the whole unit of work: no order is created, no stock
moves and the cart keeps its lines.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.accounts.address import Address
from storefront.accounts.user import User
from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.order.guard import get_inventory_guard
from storefront.order.order import Order, PaymentMethod
from storefront.shared.errors import ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    shipping_address_id = Identifier(required=True)
    billing_address_id = Identifier()
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    notes = Text()


def _address_for_order(address_id, user_id, field, label):
    try:
        address = current_domain.repository_for(Address).get(address_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({field: [f"{label.capitalize()} address {address_id} not found"]}) from None

    if not address.belongs_to(user_id):
        raise ValidationError({field: [f"Invalid {label} address"]})
    return address


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        user = current_domain.repository_for(User).get(command.user_id)

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.for_user(user.id)
        if cart is None or cart.is_empty:
            raise ValidationError({"cart": ["Cannot create order from an empty cart"]})

        guard = get_inventory_guard()
        unlocked = set(cart.product_ids) - guard.held_product_ids()
        if unlocked:
            # A line was added after place_order took its locks
            raise ConflictError({"cart": ["The cart changed while the order was being placed, please retry"]})

        shipping = _address_for_order(command.shipping_address_id, user.id, "shipping_address_id", "shipping")
        billing = shipping
        if command.billing_address_id and str(command.billing_address_id) != str(shipping.id):
            billing = _address_for_order(command.billing_address_id, user.id, "billing_address_id", "billing")

        product_repo = current_domain.repository_for(Product)

        lines_data = []
        taken = []
        for line in list(cart.lines):

            def take(line=line):
                product = product_repo.get(line.product_id)
                product.take_stock(line.quantity, reason=f"Order placed by user {user.id}")
                return product

            product = guard.with_product_lock(line.product_id, take)
            taken.append(product)
            lines_data.append(
                {
                    "product_id": str(product.id),
                    "product_name": product.name,
                    "sku": product.sku,
                    "quantity": line.quantity,
                    "unit_price": product.price,
                }
            )

        order = Order.place(
            user_id=user.id,
            lines_data=lines_data,
            shipping_address=shipping,
            billing_address=billing,
            payment_method=command.payment_method,
            notes=command.notes,
        )

        for product in taken:
            product_repo.add(product)
        current_domain.repository_for(Order).add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_code=order.order_code,
            user_id=str(user.id),
            total_amount=order.total_amount,
            line_count=len(lines_data),
        )
        return str(order.id)


def place_order(command: PlaceOrder) -> str:
    """Run ``PlaceOrder`` while holding the locks of every product in the cart."""
    cart = current_domain.repository_for(Cart).for_user(command.user_id)
    product_ids = cart.product_ids if cart is not None else []

    with get_inventory_guard().hold(product_ids):
        return current_domain.process(command, asynchronous=False)
