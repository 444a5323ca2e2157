"""Profile maintenance and account deactivation."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.accounts.user import User
from storefront.domain import storefront
from storefront.shared.errors import ForbiddenError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class UpdateUserProfile:
    user_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    first_name = String(max_length=255)
    last_name = String(max_length=255)
    phone = String(max_length=15)


@storefront.command(part_of="User")
class DeactivateUser:
    user_id = Identifier(required=True)
    actor_id = Identifier(required=True)


def assert_self_or_admin(actor_id, user_id):
    """Only the user or an administrator may see or change an account."""
    if str(actor_id) == str(user_id):
        return
    actor = current_domain.repository_for(User).get_or_none(actor_id)
    if actor is None or not actor.is_admin:
        raise ForbiddenError({"user_id": ["You can only access your own account"]})


@storefront.command_handler(part_of=User)
class UserProfileHandler:
    @handle(UpdateUserProfile)
    def update_profile(self, command):
        assert_self_or_admin(command.actor_id, command.user_id)

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.update_profile(
            first_name=command.first_name,
            last_name=command.last_name,
            phone=command.phone,
        )
        repo.add(user)
        return str(user.id)

    @handle(DeactivateUser)
    def deactivate_user(self, command):
        if str(command.actor_id) == str(command.user_id):
            raise ValidationError({"user_id": ["You cannot deactivate your own account"]})

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.deactivate()
        repo.add(user)

        logger.info("User deactivated", user_id=str(user.id), actor_id=str(command.actor_id))
        return str(user.id)
