"""Cart aggregate: one per user, holding (product, quantity) lines.

The cart never reads the catalogue itself. Callers pass the product's current
stock so that the merged quantity can be checked against it.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.cart.events import CartCleared, CartLineAdded, CartLineQuantityChanged, CartLineRemoved
from storefront.domain import storefront


@storefront.entity(part_of="Cart")
class CartLine:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class Cart:
    user_id = Identifier(required=True, unique=True)
    lines = HasMany(CartLine)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, created_at=now, updated_at=now)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def product_ids(self) -> list[str]:
        return [str(line.product_id) for line in self.lines]

    def line_for_product(self, product_id):
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    def line(self, line_id):
        line = next((line for line in self.lines if str(line.id) == str(line_id)), None)
        if line is None:
            raise ObjectNotFoundError({"line_id": [f"Cart item {line_id} not found in cart"]})
        return line

    def add_product(self, product_id, quantity: int, available_stock: int):
        """Add ``quantity`` of a product, merging with an existing line."""
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = self.line_for_product(product_id)
        merged_quantity = quantity + (existing.quantity if existing else 0)
        if merged_quantity > available_stock:
            raise ValidationError({"quantity": [f"Not enough stock available. Only {available_stock} left"]})

        now = datetime.now(UTC)
        if existing:
            existing.quantity = merged_quantity
            line = existing
        else:
            line = CartLine(product_id=product_id, quantity=quantity, added_at=now)
            self.add_lines(line)

        self.updated_at = now
        self.raise_(
            CartLineAdded(
                cart_id=str(self.id),
                line_id=str(line.id),
                product_id=str(product_id),
                quantity=quantity,
            )
        )
        return line

    def change_quantity(self, line_id, quantity: int, available_stock: int):
        """Set a line's quantity. Zero or less drops the line."""
        line = self.line(line_id)
        if quantity is None or quantity <= 0:
            self.remove_line(line_id)
            return None

        if quantity > available_stock:
            raise ValidationError({"quantity": [f"Not enough stock available. Only {available_stock} left"]})

        previous_quantity = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartLineQuantityChanged(
                cart_id=str(self.id),
                line_id=str(line.id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )
        return line

    def remove_line(self, line_id):
        line = self.line(line_id)
        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartLineRemoved(
                cart_id=str(self.id),
                line_id=str(line.id),
                product_id=str(line.product_id),
            )
        )

    def clear(self) -> int:
        removed = len(self.lines)
        for line in list(self.lines):
            self.remove_lines(line)

        self.updated_at = datetime.now(UTC)
        if removed:
            self.raise_(CartCleared(cart_id=str(self.id), lines_removed=removed))
        return removed
