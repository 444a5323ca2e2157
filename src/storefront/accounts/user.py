"""User aggregate: a registered shopper or store administrator."""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, String, ValueObject

from storefront.accounts.email import EmailAddress
from storefront.domain import storefront


class UserRole(Enum):
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"


class UserStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


@storefront.aggregate
class User:
    """A person who can shop, or administer the store when ``role`` is ADMIN.

    Credentials are handled outside this service; the API trusts the caller's
    identity header and resolves it to a User here.
    """

    username: String(required=True, max_length=255, unique=True)
    email: ValueObject(EmailAddress, required=True)
    first_name: String(max_length=255)
    last_name: String(max_length=255)
    phone: String(max_length=15)
    role: String(choices=UserRole, default=UserRole.CUSTOMER.value)
    status: String(choices=UserStatus, default=UserStatus.ACTIVE.value)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def register(cls, username, email, first_name=None, last_name=None, phone=None, role=None):
        from storefront.accounts.events import UserRegistered

        now = datetime.now(UTC)
        email_vo = EmailAddress(address=email) if isinstance(email, str) else email
        user = cls(
            username=username,
            email=email_vo,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=role or UserRole.CUSTOMER.value,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                username=username,
                email=email_vo.address,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value

    @property
    def display_name(self) -> str:
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.username

    def update_profile(self, first_name=None, last_name=None, phone=None):
        from storefront.accounts.events import UserProfileUpdated

        if first_name is not None:
            self.first_name = first_name
        if last_name is not None:
            self.last_name = last_name
        if phone is not None:
            self.phone = phone

        self.updated_at = datetime.now(UTC)
        self.raise_(
            UserProfileUpdated(
                user_id=self.id,
                first_name=self.first_name,
                last_name=self.last_name,
                phone=self.phone,
            )
        )

    def deactivate(self):
        """Soft-delete: the account stays for order history but drops out of listings."""
        from storefront.accounts.events import UserDeactivated

        if not self.is_active:
            return

        now = datetime.now(UTC)
        self.status = UserStatus.INACTIVE.value
        self.updated_at = now
        self.raise_(UserDeactivated(user_id=self.id, username=self.username, deactivated_at=now))
