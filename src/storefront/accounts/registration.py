"""User registration: command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.accounts.user import User
from storefront.domain import storefront
from storefront.shared.errors import ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class RegisterUser:
    username = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    first_name = String(max_length=255)
    last_name = String(max_length=255)
    phone = String(max_length=15)
    role = String(max_length=20)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_username(command.username) is not None:
            raise ConflictError({"username": [f"Username '{command.username}' is already taken"]})

        user = User.register(
            username=command.username,
            email=command.email,
            first_name=command.first_name,
            last_name=command.last_name,
            phone=command.phone,
            role=command.role,
        )
        repo.add(user)

        logger.info("User registered", user_id=str(user.id), username=command.username)
        return str(user.id)
