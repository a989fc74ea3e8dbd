"""Typed application errors; app.api.errors maps each kind to one HTTP status."""

from typing import Any


class AppError(Exception):
    """
    Base class for service-layer errors.

    Each subclass fixes an HTTP status_code and a stable error_code. detail
    carries optional structured data (e.g. field-level validation errors).
    """

    status_code: int = 500
    error_code: str = "server_error"
    headers: dict[str, str] | None = None

    def __init__(self, message: str, *, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class UnauthorizedError(AppError):
    """Identity could not be established (401)."""

    status_code = 401
    error_code = "unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, message: str = "Unauthorized", *, detail: Any = None) -> None:
        super().__init__(message, detail=detail)


class ForbiddenError(AppError):
    """Identity established but the action is not allowed (403)."""

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self, message: str = "Forbidden - Insufficient permissions", *, detail: Any = None
    ) -> None:
        super().__init__(message, detail=detail)


class NotFoundError(AppError):
    """Referenced entity does not exist (404). Message reads '<resource> not found'."""

    status_code = 404
    error_code = "not_found"

    def __init__(self, resource: str = "Resource", *, detail: Any = None) -> None:
        super().__init__(f"{resource} not found", detail=detail)


class ConflictError(AppError):
    """Uniqueness invariant would be violated (409)."""

    status_code = 409
    error_code = "conflict"


class BadRequestError(AppError):
    """Input breaks a business rule (400)."""

    status_code = 400
    error_code = "bad_request"


class ValidationFailedError(AppError):
    """Structural input validation failed (422); detail lists the field errors."""

    status_code = 422
    error_code = "validation_failed"

    def __init__(self, errors: Any, message: str = "Validation failed") -> None:
        super().__init__(message, detail=errors)


__all__ = [
    "AppError",
    "BadRequestError",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationFailedError",
]
