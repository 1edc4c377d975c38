"""Runtime settings the domain configuration does not cover.

Databases, brokers and event processing live in ``freshcart/domain.toml``
and are selected by ``PROTEAN_ENV``. Everything the web layer needs on top
of that (tokens, logging, CORS) is read from environment variables here.
"""

import os
from dataclasses import dataclass, field, replace

DEFAULT_TOKEN_EXPIRE_MINUTES = 60 * 24 * 30


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


def current_environment() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = DEFAULT_TOKEN_EXPIRE_MINUTES
    log_level: str | None = None
    log_dir: str = "logs"
    log_to_file: bool = False
    auto_create_schema: bool = True
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        environment = current_environment()
        return cls(
            environment=environment,
            jwt_secret=os.getenv("JWT_SECRET", cls.jwt_secret),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            token_expire_minutes=int(os.getenv("TOKEN_EXPIRE_MINUTES", DEFAULT_TOKEN_EXPIRE_MINUTES)),
            log_level=os.getenv("LOG_LEVEL"),
            log_dir=os.getenv("LOG_DIR", "logs"),
            log_to_file=_env_bool("LOG_TO_FILE", environment in ("production", "staging")),
            auto_create_schema=_env_bool("AUTO_CREATE_SCHEMA", environment != "production"),
            cors_origins=_env_list("CORS_ORIGINS", ["*"]),
        )

    def override(self, **changes) -> "Settings":
        return replace(self, **changes)

    @property
    def is_production(self) -> bool:
        return self.environment in ("production", "staging")
