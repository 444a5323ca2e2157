"""Order aggregate: a frozen snapshot of a cart plus a mutable status.

Lines, captured prices and address snapshots never change after placement.
Only ``status`` and ``payment_status`` move, along the tables below.

    PENDING -> PROCESSING -> SHIPPED -> DELIVERED
    PENDING | PROCESSING -> CANCELLED
    PENDING | PROCESSING | SHIPPED -> FAILED
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.order.events import OrderCancelled, OrderPlaced, OrderStatusChanged, PaymentStatusChanged
from storefront.shared.money import as_float, line_subtotal, money_sum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"


class PaymentMethod(Enum):
    COD = "COD"
    BANK_TRANSFER = "BANK_TRANSFER"
    CREDIT_CARD = "CREDIT_CARD"
    MOMO = "MOMO"
    VNPAY = "VNPAY"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED, OrderStatus.FAILED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.FAILED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.FAILED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.FAILED: set(),  # Terminal
}

# Stock has not left the warehouse yet in these states
_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.PROCESSING}

_STOCK_RETURNING_TARGETS = {OrderStatus.CANCELLED, OrderStatus.FAILED}

_VALID_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.FAILED: {PaymentStatus.PAID},
    PaymentStatus.REFUNDED: set(),
}


def _parse(enum_cls, value, field):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError({field: [f"Unknown value: {value!r}"]}) from None


def generate_order_code(now: datetime) -> str:
    return f"ORD-{now:%Y%m%d%H%M%S}-{uuid4().hex[:8].upper()}"


# ---------------------------------------------------------------------------
# Value Objects and Entities
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class AddressSnapshot:
    """The address as it read when the order was placed."""

    apartment_number = String(max_length=50)
    floor = String(max_length=50)
    building = String(max_length=255)
    street_number = String(max_length=50)
    street = String(max_length=255)
    ward = String(max_length=100)
    district = String(max_length=100)
    city = String(required=True, max_length=100)
    country = String(required=True, max_length=100)

    @classmethod
    def of(cls, address):
        return cls(
            apartment_number=address.apartment_number,
            floor=address.floor,
            building=address.building,
            street_number=address.street_number,
            street=address.street,
            ward=address.ward,
            district=address.district,
            city=address.city,
            country=address.country,
        )


@storefront.entity(part_of="Order")
class OrderLine:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    sku = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_code = String(required=True, max_length=50, unique=True)
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    notes = Text()
    total_amount = Float(required=True, min_value=0.0)
    shipping_address_id = Identifier(required=True)
    shipping_address = ValueObject(AddressSnapshot)
    billing_address_id = Identifier(required=True)
    billing_address = ValueObject(AddressSnapshot)
    lines = HasMany(OrderLine)
    placed_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_sum_of_lines(self):
        expected = money_sum(line.subtotal for line in self.lines)
        if as_float(expected) != self.total_amount:
            raise ValidationError({"total_amount": [f"Total {self.total_amount} does not match line sum {expected}"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, lines_data, shipping_address, billing_address, payment_method=None, notes=None):
        """Build a PENDING order.

        Args:
            user_id: The user placing the order.
            lines_data: List of dicts with product_id, product_name, sku,
                        quantity and unit_price (the price at order time).
            shipping_address: The Address aggregate to ship to.
            billing_address: The Address aggregate to bill, usually the same.
        """
        if not lines_data:
            raise ValidationError({"lines": ["An order needs at least one line"]})

        lines = []
        for data in lines_data:
            subtotal = line_subtotal(data["unit_price"], data["quantity"])
            lines.append(
                OrderLine(
                    product_id=data["product_id"],
                    product_name=data["product_name"],
                    sku=data.get("sku"),
                    quantity=data["quantity"],
                    unit_price=as_float(data["unit_price"]),
                    subtotal=as_float(subtotal),
                )
            )

        now = datetime.now(UTC)
        order = cls(
            order_code=generate_order_code(now),
            user_id=user_id,
            payment_method=payment_method or PaymentMethod.COD.value,
            notes=notes,
            total_amount=as_float(money_sum(line.subtotal for line in lines)),
            shipping_address_id=shipping_address.id,
            shipping_address=AddressSnapshot.of(shipping_address),
            billing_address_id=billing_address.id,
            billing_address=AddressSnapshot.of(billing_address),
            lines=lines,
            placed_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_code=order.order_code,
                user_id=str(user_id),
                total_amount=order.total_amount,
                line_count=len(lines),
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def belongs_to(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    @property
    def is_cancellable(self) -> bool:
        return OrderStatus(self.status) in _CANCELLABLE_STATES

    def returns_stock_on(self, target_status) -> bool:
        """True when moving to ``target_status`` puts the ordered stock back."""
        return self.is_cancellable and _parse(OrderStatus, target_status, "status") in _STOCK_RETURNING_TARGETS

    @property
    def stock_lines(self) -> list[tuple[str, int]]:
        return [(str(line.product_id), line.quantity) for line in self.lines]

    # -------------------------------------------------------------------
    # Status lifecycle
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def change_status(self, new_status) -> bool:
        """Move to ``new_status``. Returns False when already there."""
        target = _parse(OrderStatus, new_status, "status")
        if target == OrderStatus(self.status):
            return False

        self._assert_can_transition(target)

        previous_status = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_code=self.order_code,
                user_id=str(self.user_id),
                previous_status=previous_status,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True

    def cancel(self):
        if not self.is_cancellable:
            raise ValidationError({"status": ["Order cannot be cancelled"]})

        previous_status = self.status
        self.change_status(OrderStatus.CANCELLED.value)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_code=self.order_code,
                user_id=str(self.user_id),
                previous_status=previous_status,
                cancelled_at=self.updated_at,
            )
        )

    def change_payment_status(self, new_status) -> bool:
        target = _parse(PaymentStatus, new_status, "payment_status")
        current = PaymentStatus(self.payment_status)
        if target == current:
            return False

        if target not in _VALID_PAYMENT_TRANSITIONS[current]:
            raise ValidationError(
                {"payment_status": [f"Cannot change payment status from {current.value} to {target.value}"]}
            )

        now = datetime.now(UTC)
        self.payment_status = target.value
        self.updated_at = now
        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True
