"""Order emails: confirmation on placement, notice on every status change.

Email is best effort. A failed or raising send is logged and never fails the
order operation that triggered it.
"""

import os

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.accounts.user import User
from storefront.domain import storefront
from storefront.notifications import get_email_channel
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.order.order import Order

logger = structlog.get_logger(__name__)

_STATUS_MESSAGES = {
    "PROCESSING": "is being prepared",
    "SHIPPED": "has been shipped",
    "DELIVERED": "has been delivered",
    "CANCELLED": "has been cancelled",
    "FAILED": "could not be completed",
}


def _store_name() -> str:
    return os.getenv("STORE_NAME", "Storefront")


def render_confirmation(order, user) -> tuple[str, str]:
    lines = "\n".join(
        f"  {line.product_name} x {line.quantity} @ {line.unit_price:.2f} = {line.subtotal:.2f}" for line in order.lines
    )
    address = order.shipping_address
    address_text = ", ".join(
        part
        for part in (
            address.street_number,
            address.street,
            address.ward,
            address.district,
            address.city,
            address.country,
        )
        if part
    )
    subject = f"{_store_name()}: order {order.order_code} confirmed"
    body = (
        f"Hello {user.display_name},\n\n"
        f"Thank you for your order {order.order_code}.\n\n"
        f"{lines}\n\n"
        f"Total: {order.total_amount:.2f}\n"
        f"Payment method: {order.payment_method}\n"
        f"Shipping to: {address_text}\n"
    )
    return subject, body


def render_status_change(order, user, new_status) -> tuple[str, str]:
    subject = f"{_store_name()}: order {order.order_code} is now {new_status}"
    body = (
        f"Hello {user.display_name},\n\n"
        f"Your order {order.order_code} {_STATUS_MESSAGES.get(new_status, 'was updated')}.\n"
    )
    return subject, body


def _deliver(user, subject, body, **context):
    try:
        result = get_email_channel().send(to=user.email.address, subject=subject, body=body)
    except Exception:
        logger.exception("Order email raised", **context)
        return

    if result.get("status") != "sent":
        logger.warning("Order email not sent", error=result.get("error"), **context)
    else:
        logger.info("Order email sent", message_id=result.get("message_id"), **context)


def _load(order_id, user_id):
    try:
        order = current_domain.repository_for(Order).get(order_id)
        user = current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        logger.warning("Order email skipped, order or user missing", order_id=str(order_id), user_id=str(user_id))
        return None, None
    return order, user


@storefront.event_handler(part_of=Order)
class OrderEmailsHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        order, user = _load(event.order_id, event.user_id)
        if order is None:
            return

        subject, body = render_confirmation(order, user)
        _deliver(user, subject, body, order_id=str(event.order_id), kind="confirmation")

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        order, user = _load(event.order_id, event.user_id)
        if order is None:
            return

        subject, body = render_status_change(order, user, event.new_status)
        _deliver(user, subject, body, order_id=str(event.order_id), kind="status", status=event.new_status)
