"""Administrative order status and payment status updates.

Moving a PENDING or PROCESSING order to CANCELLED or FAILED puts its stock
back in the same unit of work as the status change.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.order.guard import get_inventory_guard
from storefront.order.order import Order, OrderStatus, PaymentStatus
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@storefront.command(part_of="Order")
class UpdatePaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, choices=PaymentStatus)


def return_order_stock(order, reason):
    """Put every line's quantity back on its product, one critical section per line."""
    guard = get_inventory_guard()
    product_repo = current_domain.repository_for(Product)

    for product_id, quantity in order.stock_lines:

        def give_back(product_id=product_id, quantity=quantity):
            product = product_repo.get(product_id)
            product.return_stock(quantity, reason=reason)
            return product

        product_repo.add(guard.with_product_lock(product_id, give_back))


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        returns_stock = order.returns_stock_on(command.status)
        previous_status = order.status
        if not order.change_status(command.status):
            return str(order.id)

        if returns_stock:
            return_order_stock(order, reason=f"Order {order.order_code} moved to {order.status}")
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
            stock_returned=returns_stock,
        )
        return str(order.id)

    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        if order.change_payment_status(command.payment_status):
            repo.add(order)
            logger.info("Payment status changed", order_id=str(order.id), payment_status=order.payment_status)
        return str(order.id)


def _order_product_ids(order_id):
    # An unknown order locks nothing; the handler reports it as not found
    order = current_domain.repository_for(Order)._dao.query.filter(id=order_id).all().first
    return [product_id for product_id, _ in order.stock_lines] if order is not None else []


def run_with_order_locks(command) -> str:
    """Process an order command while holding the locks of the order's products."""
    with get_inventory_guard().hold(_order_product_ids(command.order_id)):
        return current_domain.process(command, asynchronous=False)