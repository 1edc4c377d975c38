"""Account registration and login."""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from freshcart.domain import freshcart
from freshcart.identity.security import create_access_token, hash_password, verify_password
from freshcart.identity.user.user import Role, User
from freshcart.shared.config import Settings
from freshcart.shared.errors import Conflict, NotFound, Unauthorized, ValidationFailed

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


@freshcart.command(part_of="User")
class RegisterUser:
    """Self-service sign-up; the password arrives already hashed."""

    email: String(required=True, max_length=254)
    username: String(required=True, max_length=50)
    password_hash: String(required=True, max_length=255)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User


def check_password(password: str, confirm_password: str | None = None) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if confirm_password is not None and password != confirm_password:
        raise ValidationFailed("Passwords do not match")


def new_password_hash(password: str, confirm_password: str | None = None) -> str:
    check_password(password, confirm_password)
    return hash_password(password)


def ensure_unique(users, email: str | None, username: str | None, current: User | None = None) -> None:
    if email is not None and (current is None or current.email != email.lower()):
        if users.by_email(email) is not None:
            raise Conflict("Email already in use")
    if username is not None and (current is None or current.username != username):
        if users.by_username(username) is not None:
            raise Conflict("Username already in use")


@freshcart.command_handler(part_of=User)
class RegistrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        users = current_domain.repository_for(User)
        ensure_unique(users, command.email, command.username)

        # Self-service accounts are always plain customers
        user = User.register(
            email=command.email,
            username=command.username,
            password_hash=command.password_hash,
            role=Role.USER.value,
        )
        users.add(user)

        logger.info("user_registered", user_id=str(user.id), username=user.username)
        return str(user.id)


def authenticate(email: str, password: str, settings: Settings) -> LoginResult:
    user = current_domain.repository_for(User).by_email(email)
    if user is None:
        raise NotFound("User not found")
    if not verify_password(password, user.password_hash):
        logger.info("login_rejected", user_id=str(user.id))
        raise Unauthorized("Invalid credentials")

    return LoginResult(token=create_access_token(user, settings), user=user)
