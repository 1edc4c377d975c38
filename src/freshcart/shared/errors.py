"""Application errors.

Every business-rule violation raised by a handler is an ``AppError``. The
subclass tags the kind of failure and fixes the HTTP status the API layer
answers with; ``message`` is returned to the caller as-is.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code})"


class Unauthorized(AppError):
    status_code = 401


class Forbidden(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class ValidationFailed(AppError):
    status_code = 400


class Conflict(AppError):
    status_code = 409


class InvalidTransition(AppError):
    status_code = 400


class InsufficientStock(AppError):
    status_code = 400


class EmptyCart(AppError):
    status_code = 400


class StockUpdateConflict(AppError):
    status_code = 400
