"""Application error kinds.

Raised by the service layer. The API layer translates them into HTTP
responses through the handlers registered in ``shopcatalog.main``.
"""

from typing import Any

PRODUCT_NOT_FOUND = "product not found"
FORBIDDEN_RESOURCE = "you are not permitted to access this resource"
INTERNAL_ERROR = "internal server error"


class AppError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = 500
    default_message: str = INTERNAL_ERROR

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message}


class NotFoundError(AppError):
    """No matching non-deleted row for the requested identifier."""

    status_code = 404
    default_message = PRODUCT_NOT_FOUND


class ForbiddenError(AppError):
    """The actor does not own the resource."""

    status_code = 403
    default_message = FORBIDDEN_RESOURCE


class ValidationError(AppError):
    """Malformed or out-of-range input, with optional per-field detail."""

    status_code = 400
    default_message = "invalid request"

    def __init__(self, message: str | None = None, errors: dict[str, str] | None = None):
        super().__init__(message)
        self.errors = errors or {}

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "errors": self.errors}


class InternalError(AppError):
    """Storage or unexpected failure. The message never carries the cause."""

    status_code = 500
    default_message = INTERNAL_ERROR


def field_errors(errors: list[dict[str, Any]]) -> dict[str, str]:
    """Flatten pydantic error entries into ``{"field": "message"}``."""
    result: dict[str, str] = {}
    for error in errors:
        loc = [
            str(part)
            for part in error.get("loc", ())
            if part not in ("body", "query", "path", "header")
        ]
        result[".".join(loc) or "request"] = error.get("msg", "invalid value")
    return result
