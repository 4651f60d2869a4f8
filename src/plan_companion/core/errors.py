# src/plan_companion/core/errors.py

"""
Error taxonomy shared by the server and the client coordinator.

Every error carries:
- a stable `kind` (used by the client to categorise failures),
- an HTTP status code,
- a generic public message that is safe to show to the caller.

Internal detail (SQL errors, provider payloads) goes to the log, never into
`public_message`.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    kind = "internal"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, public_message: str | None = None, *, details: Any = None) -> None:
        self.public_message = public_message or self.default_message
        self.details = details
        super().__init__(self.public_message)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.public_message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    kind = "validation"
    status_code = 400
    default_message = "Invalid data"


class Unauthorized(AppError):
    kind = "unauthorized"
    status_code = 401
    default_message = "Unauthorized"


class NotFound(AppError):
    kind = "not_found"
    status_code = 404
    default_message = "Not found"


class ProviderError(AppError):
    kind = "provider"
    status_code = 500
    default_message = "AI provider request failed"


class InternalError(AppError):
    kind = "internal"
    status_code = 500
    default_message = "Internal server error"


_BY_STATUS: dict[int, type[AppError]] = {
    400: ValidationError,
    401: Unauthorized,
    404: NotFound,
}


def error_for_status(status_code: int, message: str | None = None) -> AppError:
    """Map an HTTP status back to the taxonomy (client side)."""
    cls = _BY_STATUS.get(int(status_code), InternalError)
    return cls(message)
