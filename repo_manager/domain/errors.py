"""Errors shared across the domain, application and infrastructure layers."""
from typing import Optional


class ApiError(Exception):
    """Raised by the GitHub adapter for any failed remote call.

    Attributes:
        message: Human readable description including the upstream error text
        status: HTTP status code, or 0 when no usable response was received
    """

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.message = message
        self.status = status


class AggregationError(Exception):
    """Raised when collecting a repository listing fails part way through.

    Aggregation is all-or-nothing, so this always means no records were
    returned.
    """

    def __init__(self, message: str, cause: Optional[ApiError] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def status(self) -> int:
        return self.cause.status if self.cause is not None else 0


class PaginationLimitExceeded(AggregationError):
    """Raised when a listing keeps returning pages past the safety cap."""
    pass


class OwnershipMismatchError(Exception):
    """Raised when a token authenticates as someone other than the claimed user."""

    def __init__(self, claimed: str, actual: str):
        super().__init__("Token does not belong to the specified username")
        self.claimed = claimed
        self.actual = actual
