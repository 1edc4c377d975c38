"""The authenticated principal.

Requests act on behalf of exactly one of ``Customer``, ``Admin`` or
``Driver``. Commands carry the actor as ``actor_id``/``actor_role``;
handlers rebuild the principal with ``principal_from`` and match on it, so
every role is handled explicitly at the entry point of a workflow.
"""

from dataclasses import dataclass
from typing import NoReturn

from freshcart.identity.user.user import Role, User
from freshcart.shared.errors import Forbidden, Unauthorized


@dataclass(frozen=True)
class Customer:
    user_id: str
    username: str = ""


@dataclass(frozen=True)
class Admin:
    user_id: str
    username: str = ""


@dataclass(frozen=True)
class Driver:
    user_id: str
    username: str = ""


Principal = Customer | Admin | Driver


def principal_from(actor_id: str, actor_role: str, username: str = "") -> Principal:
    match actor_role:
        case Role.USER.value:
            return Customer(user_id=actor_id, username=username)
        case Role.ADMIN.value:
            return Admin(user_id=actor_id, username=username)
        case Role.DRIVER.value:
            return Driver(user_id=actor_id, username=username)
    raise Unauthorized(f"Unknown role {actor_role!r}")


def principal_for(user: User) -> Principal:
    return principal_from(str(user.id), user.role, user.username)


def role_of(principal: Principal) -> str:
    match principal:
        case Customer():
            return Role.USER.value
        case Admin():
            return Role.ADMIN.value
        case Driver():
            return Role.DRIVER.value
    unreachable(principal)


def acting_as(principal: Principal) -> dict:
    """Command fields identifying who issues the command."""
    return {"actor_id": principal.user_id, "actor_role": role_of(principal)}


def require_admin(principal: Principal) -> Admin:
    if not isinstance(principal, Admin):
        raise Forbidden("Forbidden not admin")
    return principal


def require_driver(principal: Principal) -> Driver:
    if not isinstance(principal, Driver):
        raise Forbidden("Forbidden not driver")
    return principal


def unreachable(principal: object) -> NoReturn:
    raise TypeError(f"Unhandled principal {principal!r}")
