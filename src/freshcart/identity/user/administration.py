"""Admin management of user accounts."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from freshcart.domain import freshcart
from freshcart.fulfillment.driver.driver import VehicleType
from freshcart.identity.user.principal import Principal, principal_from, require_admin
from freshcart.identity.user.registration import ensure_unique
from freshcart.identity.user.repository import ensure_deletable, load_user
from freshcart.identity.user.user import Role, User, UserStatus
from freshcart.shared.errors import ValidationFailed
from freshcart.shared.pagination import Page, PageRequest

logger = structlog.get_logger(__name__)


@freshcart.command(part_of="User")
class CreateUser:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    email = String(required=True, max_length=254)
    username = String(required=True, max_length=50)
    password_hash = String(required=True, max_length=255)
    role = String(max_length=20, default=Role.USER.value)
    phone_number = String(max_length=30)
    location = String(max_length=255)
    vehicle_type = String(max_length=10)
    vehicle_number = String(max_length=30)
    license_no = String(max_length=50)


@freshcart.command(part_of="User")
class UpdateUser:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    user_id = Identifier(required=True)
    email = String(max_length=254)
    username = String(max_length=50)
    password_hash = String(max_length=255)
    role = String(max_length=20)
    status = String(max_length=20)
    image = String(max_length=500)
    phone_number = String(max_length=30)
    location = String(max_length=255)
    gender = String(max_length=20)
    dob = String(max_length=30)


@freshcart.command(part_of="User")
class DeleteUser:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=20)
    user_id = Identifier(required=True)


def _check_role(role: str) -> None:
    if role not in {r.value for r in Role}:
        raise ValidationFailed(f"Invalid role {role!r}")


def _check_vehicle_type(vehicle_type: str) -> None:
    if vehicle_type not in {v.value for v in VehicleType}:
        raise ValidationFailed(f"Invalid vehicle type {vehicle_type!r}")


@freshcart.command_handler(part_of=User)
class UserAdministrationHandler:
    @handle(CreateUser)
    def create_user(self, command):
        """Create an account with any role. A driver with a vehicle gets a profile."""
        admin = require_admin(principal_from(command.actor_id, command.actor_role))
        _check_role(command.role)
        if command.vehicle_type is not None:
            _check_vehicle_type(command.vehicle_type)

        users = current_domain.repository_for(User)
        ensure_unique(users, command.email, command.username)

        user = User.register(
            email=command.email,
            username=command.username,
            password_hash=command.password_hash,
            role=command.role,
            phone_number=command.phone_number,
            location=command.location,
        )
        if command.role == Role.DRIVER.value and command.vehicle_type:
            user.assign_vehicle(command.vehicle_type, command.vehicle_number, command.license_no)
        users.add(user)

        logger.info("user_created", user_id=str(user.id), role=user.role, created_by=admin.user_id)
        return str(user.id)

    @handle(UpdateUser)
    def update_user(self, command):
        require_admin(principal_from(command.actor_id, command.actor_role))
        if command.role is not None:
            _check_role(command.role)
        if command.status is not None and command.status not in {s.value for s in UserStatus}:
            raise ValidationFailed(f"Invalid status {command.status!r}")

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
        if command.role:
            user.change_role(command.role)
        if command.status:
            user.change_status(command.status)
        users.add(user)

        logger.info("user_updated", user_id=str(user.id))
        return str(user.id)

    @handle(DeleteUser)
    def delete_user(self, command):
        admin = require_admin(principal_from(command.actor_id, command.actor_role))
        users = current_domain.repository_for(User)
        user = load_user(command.user_id)
        ensure_deletable(user)
        users._dao.delete(user)
        logger.info("user_deleted", user_id=str(command.user_id), deleted_by=admin.user_id)


def list_users(principal: Principal, request: PageRequest, search: str | None = None, role: str | None = None) -> Page[User]:
    require_admin(principal)
    return current_domain.repository_for(User).search(request, search=search, role=role)


def get_user(principal: Principal, user_id: str) -> User:
    require_admin(principal)
    return load_user(user_id)
