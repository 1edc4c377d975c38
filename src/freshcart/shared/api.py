"""HTTP plumbing shared by every router.

Every response uses the envelope ``{success, message?, data?}`` with
camelCase keys. ``AppError``, domain validation errors and request
validation failures are turned into the same envelope with
``success: false``.
"""

from typing import Generic, TypeVar

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError
from protean.exceptions import ValidationError as DomainValidationError
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError

from freshcart.shared.config import Settings
from freshcart.shared.errors import AppError
from freshcart.shared.pagination import Page

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None


class PaginationSchema(CamelModel):
    page: int
    size: int
    total: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page) -> "PaginationSchema":
        return cls(page=page.page, size=page.size, total=page.total, total_pages=page.total_pages)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _validation_message(errors: list[dict]) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", "Invalid input"))
    return "; ".join(parts) or "Invalid input"


def domain_error_message(exc: DomainValidationError) -> str:
    """Flatten ``{field: [messages]}`` into one line."""
    messages = getattr(exc, "messages", None) or {}
    if not isinstance(messages, dict):
        return str(messages) or "Invalid input"
    parts = []
    for field_name, field_messages in messages.items():
        if isinstance(field_messages, (list, tuple)):
            field_messages = ", ".join(str(message) for message in field_messages)
        parts.append(f"{field_name}: {field_messages}")
    return "; ".join(parts) or "Invalid input"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(DomainValidationError)
    async def handle_domain_validation(request: Request, exc: DomainValidationError) -> JSONResponse:
        return _error(400, domain_error_message(exc))

    @app.exception_handler(ObjectNotFoundError)
    async def handle_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
        return _error(404, "Record not found")

    @app.exception_handler(InvalidOperationError)
    async def handle_invalid_operation(request: Request, exc: InvalidOperationError) -> JSONResponse:
        return _error(400, str(exc) or "Invalid operation")

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, _validation_message(exc.errors()))

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(400, _validation_message(exc.errors()))

    @app.exception_handler(IntegrityError)
    async def handle_integrity(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning("integrity_error", path=request.url.path, error=str(exc.orig))
        return _error(409, "Conflicting or referenced record")

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=request.url.path)
        return _error(500, str(exc) or "Internal server error")
