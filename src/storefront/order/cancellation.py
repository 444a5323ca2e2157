"""User-initiated order cancellation."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.status import return_order_stock, run_with_order_locks
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if not order.belongs_to(command.user_id):
            # Other users' orders are indistinguishable from missing ones
            raise ObjectNotFoundError({"order_id": [f"Order {command.order_id} not found"]})

        order.cancel()
        return_order_stock(order, reason=f"Order {order.order_code} cancelled by user")
        repo.add(order)

        logger.info("Order cancelled", order_id=str(order.id), user_id=str(command.user_id))
        return str(order.id)


def cancel_order(command: CancelOrder) -> str:
    return run_with_order_locks(command)
