from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Failure surfaced from the store boundary or a write operation."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class OrderTransitionConflictError(ApiError):
    pass


class StoreError(ApiError):
    pass
