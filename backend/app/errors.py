from __future__ import annotations

from typing import List, Optional


class BookingError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Malformed or missing payload fields."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class PolicyError(BookingError):
    """Past booking, outside business hours or wrong duration."""


class ConflictError(BookingError):
    pass


class NotFoundError(BookingError):
    pass


class StoreError(BookingError):
    """Opaque persistence failure. Never retried."""
