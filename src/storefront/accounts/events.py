"""Domain events for the User and Address aggregates."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    __version__ = 1

    user_id: Identifier(required=True)
    username: String(required=True)
    email: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@storefront.event(part_of="User")
class UserProfileUpdated:
    __version__ = 1

    user_id: Identifier(required=True)
    first_name: String()
    last_name: String()
    phone: String()


@storefront.event(part_of="User")
class UserDeactivated:
    """The account was soft-deleted by an administrator."""

    __version__ = 1

    user_id: Identifier(required=True)
    username: String(required=True)
    deactivated_at: DateTime(required=True)


@storefront.event(part_of="Address")
class AddressAdded:
    __version__ = 1

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    city: String(required=True)
    country: String(required=True)
    address_type: String(required=True)

