"""Cart commands and handler.

A user's cart is created on first access. Quantities are validated against
the product's live stock whenever they grow.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.accounts.user import User
from storefront.cart.cart import Cart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Cart")
class OpenCart:
    user_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="Cart")
class UpdateCartLine:
    user_id = Identifier(required=True)
    line_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="Cart")
class RemoveCartLine:
    user_id = Identifier(required=True)
    line_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


def cart_for_user(user_id, create=True):
    """Return the user's cart, creating an empty one on first access.

    Raises ObjectNotFoundError when the user does not exist.
    """
    current_domain.repository_for(User).get(user_id)

    repo = current_domain.repository_for(Cart)
    cart = repo.for_user(user_id)
    if cart is None and create:
        cart = Cart.create(user_id=user_id)
        logger.debug("Cart created", user_id=str(user_id), cart_id=str(cart.id))
    return cart


@storefront.command_handler(part_of=Cart)
class CartHandler:
    @handle(OpenCart)
    def open_cart(self, command):
        cart = cart_for_user(command.user_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(AddToCart)
    def add_to_cart(self, command):
        cart = cart_for_user(command.user_id)
        product = current_domain.repository_for(Product).get(command.product_id)

        cart.add_product(product.id, command.quantity, product.stock_quantity)
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "Product added to cart",
            user_id=str(command.user_id),
            product_id=str(product.id),
            quantity=command.quantity,
        )
        return str(cart.id)

    @handle(UpdateCartLine)
    def update_cart_line(self, command):
        cart = cart_for_user(command.user_id)
        line = cart.line(command.line_id)

        available_stock = 0
        if command.quantity > 0:
            product = current_domain.repository_for(Product).get(line.product_id)
            available_stock = product.stock_quantity

        cart.change_quantity(command.line_id, command.quantity, available_stock)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(RemoveCartLine)
    def remove_cart_line(self, command):
        cart = cart_for_user(command.user_id)
        cart.remove_line(command.line_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = cart_for_user(command.user_id)
        removed = cart.clear()
        current_domain.repository_for(Cart).add(cart)

        logger.info("Cart cleared", user_id=str(command.user_id), lines_removed=removed)
        return str(cart.id)
