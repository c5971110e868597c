from __future__ import annotations

from typing import Any, Optional


# PUBLIC_INTERFACE
class AppError(Exception):
    """
    Base class for errors raised by the data-access, service and rendering layers.

    Each subclass carries the HTTP status code the API layer maps it to, so that
    handlers never need to translate errors themselves.
    """

    status_code: int = 500
    error: str = "AppError"

    def __init__(self, message: str, detail: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


# PUBLIC_INTERFACE
class NotFoundError(AppError):
    """The requested row does not exist."""

    status_code = 404
    error = "NotFound"


# PUBLIC_INTERFACE
class ValidationError(AppError):
    """Input has the wrong shape, e.g. an unknown todo filter."""

    status_code = 400
    error = "ValidationError"


# PUBLIC_INTERFACE
class StoreError(AppError):
    """The underlying SQLite query or connection failed."""

    status_code = 500
    error = "StoreError"


# PUBLIC_INTERFACE
class RenderError(AppError):
    """A template could not be rendered."""

    status_code = 500
    error = "RenderError"
