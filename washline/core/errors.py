"""Washline — Domain error taxonomy.

Services raise these; the exception handlers in ``washline.main`` turn them into
the ``{success, data, message, errors}`` envelope with the matching status code.
"""
from fastapi import status


class WashlineError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, errors: dict[str, str] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(WashlineError):
    """Malformed or missing input. Never retried."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class NotFoundError(WashlineError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(WashlineError):
    """Quantity conservation violation or duplicate unique key."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class TransactionFailure(ConflictError):
    """Transaction kept aborting (serialization failure / deadlock) after all retries."""

    default_message = "The operation conflicted with a concurrent update, please retry"


class InternalError(WashlineError):
    pass


def order_capacity_message(remaining: int) -> str:
    return f"Quantity cannot exceed remaining order quantity ({remaining})"


def record_capacity_message(remaining: int) -> str:
    return f"Quantity cannot exceed remaining quantity ({remaining})"
