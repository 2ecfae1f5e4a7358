"""Domain errors raised while resolving a single record.

Nothing in the resolver catches these; translation to problem+json happens
in `records_api.http.problem` using `records_api.http.error_mapping`.
"""

from __future__ import annotations

from typing import Any


class RecordsError(Exception):
    """Base class for record resolution errors."""

    def __init__(self, message: str = "", **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class NotFoundError(RecordsError):
    """Raised by a lookup when no matching record exists."""

    def __init__(self, key: Any = None, message: str | None = None) -> None:
        super().__init__(message or f"record {key!r} not found", key=key)
        self.key = key


class AuthorizationError(RecordsError):
    """Raised when the caller may not access the resolved record."""


class EtagGenerationError(RecordsError):
    """Raised by an ETag generator that cannot produce a tag."""


class RecordNotResolvedError(RecordsError):
    """Raised when record accessors are used before resolution completed."""

    def __init__(self) -> None:
        super().__init__("record has not been resolved")


__all__ = [
    "RecordsError",
    "NotFoundError",
    "AuthorizationError",
    "EtagGenerationError",
    "RecordNotResolvedError",
]
