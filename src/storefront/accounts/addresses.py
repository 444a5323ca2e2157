"""Address book management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.accounts.address import Address
from storefront.accounts.user import User
from storefront.domain import storefront
from storefront.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_OPTIONAL_PARTS = (
    "apartment_number",
    "floor",
    "building",
    "street_number",
    "street",
    "ward",
    "district",
    "address_type",
)


@storefront.command(part_of="Address")
class AddAddress:
    user_id = Identifier(required=True)
    apartment_number = String(max_length=50)
    floor = String(max_length=50)
    building = String(max_length=255)
    street_number = String(max_length=50)
    street = String(max_length=255)
    ward = String(max_length=100)
    district = String(max_length=100)
    city = String(required=True, max_length=100)
    country = String(required=True, max_length=100)
    address_type = String(max_length=20)


@storefront.command(part_of="Address")
class RemoveAddress:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


def owned_address(address_id, user_id, field="address_id"):
    """Load an address and make sure it belongs to ``user_id``.

    Someone else's address is reported exactly like a missing one.
    """
    try:
        address = current_domain.repository_for(Address).get(address_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({field: [f"Address {address_id} not found"]}) from None

    if not address.belongs_to(user_id):
        raise ObjectNotFoundError({field: [f"Address {address_id} not found"]})
    return address


@storefront.command_handler(part_of=Address)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        # Raises ObjectNotFoundError for an unknown user
        current_domain.repository_for(User).get(command.user_id)

        parts = {name: getattr(command, name) for name in _OPTIONAL_PARTS if getattr(command, name)}
        address = Address.create(
            user_id=command.user_id,
            city=command.city,
            country=command.country,
            **parts,
        )
        current_domain.repository_for(Address).add(address)

        logger.info("Address added", user_id=str(command.user_id), address_id=str(address.id))
        return str(address.id)

    @handle(RemoveAddress)
    def remove_address(self, command):
        address = owned_address(command.address_id, command.user_id)

        if current_domain.repository_for(Order).references_address(address.id):
            raise ValidationError({"address_id": ["Address is used by an existing order and cannot be removed"]})

        current_domain.repository_for(Address)._dao.delete(address)

        logger.info("Address removed", user_id=str(command.user_id), address_id=str(address.id))
        return str(address.id)
