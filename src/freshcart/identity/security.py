"""Password hashing and bearer tokens."""

from datetime import timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from freshcart.shared.clock import utcnow
from freshcart.shared.config import Settings
from freshcart.shared.errors import Unauthorized

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def create_access_token(user, settings: Settings) -> str:
    expire = utcnow() + timedelta(minutes=settings.token_expire_minutes)
    payload = {
        "id": str(user.id),
        "email": user.email,
        "username": user.username,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise Unauthorized("Unauthorized JWT invalid") from exc

    if not payload.get("id"):
        raise Unauthorized("Unauthorized JWT unverified")
    return payload
