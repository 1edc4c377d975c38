"""Authentication dependencies: bearer token → current user → principal."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from protean.utils.globals import current_domain

from freshcart.identity.security import decode_access_token
from freshcart.identity.user.principal import Admin, Driver, Principal, principal_for, require_admin, require_driver
from freshcart.identity.user.user import User
from freshcart.shared.api import get_settings
from freshcart.shared.config import Settings
from freshcart.shared.errors import Unauthorized

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthorized("Unauthorized JWT invalid")

    payload = decode_access_token(credentials.credentials, settings)
    user = current_domain.repository_for(User).find(payload["id"])
    if user is None:
        raise Unauthorized("Unauthorized user not found")
    return user


async def get_principal(user: User = Depends(get_current_user)) -> Principal:
    return principal_for(user)


async def get_admin(principal: Principal = Depends(get_principal)) -> Admin:
    return require_admin(principal)


async def get_driver(principal: Principal = Depends(get_principal)) -> Driver:
    return require_driver(principal)
