"""Profile management for the signed-in user."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from freshcart.domain import freshcart
from freshcart.identity.security import verify_password
from freshcart.identity.user.registration import ensure_unique
from freshcart.identity.user.repository import ensure_deletable, load_user
from freshcart.identity.user.user import User
from freshcart.shared.errors import ValidationFailed

logger = structlog.get_logger(__name__)


@freshcart.command(part_of="User")
class UpdateProfile:
    user_id = Identifier(required=True)
    email = String(max_length=254)
    username = String(max_length=50)
    password_hash = String(max_length=255)
    image = String(max_length=500)
    phone_number = String(max_length=30)
    location = String(max_length=255)
    gender = String(max_length=20)
    dob = String(max_length=30)


@freshcart.command(part_of="User")
class DeleteAccount:
    user_id = Identifier(required=True)


@freshcart.command_handler(part_of=User)
class ProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        users = current_domain.repository_for(User)
        user = load_user(command.user_id)
        ensure_unique(users, command.email, command.username, current=user)

        user.update_details(
            email=command.email,
            username=command.username,
            password_hash=command.password_hash,
            image=command.image,
            phone_number=command.phone_number,
            location=command.location,
            gender=command.gender,
            dob=command.dob,
        )
        users.add(user)

        logger.info("profile_updated", user_id=str(user.id))
        return str(user.id)

    @handle(DeleteAccount)
    def delete_account(self, command):
        users = current_domain.repository_for(User)
        user = load_user(command.user_id)
        ensure_deletable(user)
        users._dao.delete(user)
        logger.info("account_deleted", user_id=str(command.user_id))


def delete_my_account(user_id: str, password: str) -> None:
    """Close the caller's own account once the password checks out."""
    user = load_user(user_id)
    if not verify_password(password, user.password_hash):
        raise ValidationFailed("Password is incorrect")
    current_domain.process(DeleteAccount(user_id=user_id), asynchronous=False)
