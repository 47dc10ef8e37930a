"""Domain errors raised by the booking engine."""

from typing import Optional


class StayError(Exception):
    """Base class for every recoverable booking error."""


class ValidationError(StayError):
    """Required guest fields are missing or blank."""


class ConflictError(StayError):
    """A date range collides with an approved stay."""

    def __init__(self, message: str, conflicting_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.conflicting_id = conflicting_id


class PersistenceError(StayError):
    """The persistence collaborator failed to read or write."""


class NotFoundError(StayError):
    """No booking exists with the requested identifier."""


class InvalidTransitionError(StayError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Invalid booking status transition: {current} -> {target}")
        self.current = current
        self.target = target
