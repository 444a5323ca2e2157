"""Address aggregate: a postal address owned by one user."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


class AddressType(Enum):
    SHIPPING = "SHIPPING"
    BILLING = "BILLING"
    OTHER = "OTHER"


# Order in which parts appear in the one-line rendering
_LINE_PARTS = (
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


@storefront.aggregate
class Address:
    """A delivery or billing location.

    Addresses are their own aggregate so that orders can reference them by id.
    Orders also keep a snapshot, so later edits never change a placed order.
    """

    user_id: Identifier(required=True)
    apartment_number: String(max_length=50)
    floor: String(max_length=50)
    building: String(max_length=255)
    street_number: String(max_length=50)
    street: String(max_length=255)
    ward: String(max_length=100)
    district: String(max_length=100)
    city: String(required=True, max_length=100)
    country: String(required=True, max_length=100)
    address_type: String(choices=AddressType, default=AddressType.SHIPPING.value)
    created_at: DateTime()

    @classmethod
    def create(cls, user_id, city, country, **parts):
        from storefront.accounts.events import AddressAdded

        address = cls(user_id=user_id, city=city, country=country, created_at=datetime.now(UTC), **parts)
        address.raise_(
            AddressAdded(
                user_id=user_id,
                address_id=address.id,
                city=city,
                country=country,
                address_type=address.address_type,
            )
        )
        return address

    def belongs_to(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    def one_line(self) -> str:
        return ", ".join(getattr(self, name) for name in _LINE_PARTS if getattr(self, name))
