import secrets
from uuid import UUID
from fastapi import Header, HTTPException, status
from logging import Logger
from typing import NoReturn, Optional

from config import Config
from Stays.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    StayError,
    ValidationError,
)
from utils import date_to_key, key_to_date


def _parse_id(id: str, logger: Logger) -> UUID:
    """Validate and normalize a booking GUID identifier."""

    try:
        return UUID(id, version=4)
    except ValueError as exc:
        logger.warning("Invalid GUID supplied for booking_id", extra={"booking_id": id})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="The supplied booking id is not a valid UUID4.",
        ) from exc


def _parse_date_key(value: str, logger: Logger) -> str:
    """Validate a YYYY-MM-DD day and return its canonical key."""

    try:
        return date_to_key(key_to_date(value))
    except ValueError as exc:
        logger.warning("Invalid date supplied", extra={"date": value})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The supplied date {value} is not a valid YYYY-MM-DD day.",
        ) from exc


def _raise_http(exc: StayError, action: str) -> NoReturn:
    """
    Translate a booking engine error into an HTTPException.

    Args:
        exc: Error raised by the engine.
        action: Verb phrase used in the 500 message, e.g. "approve booking".

    Raises:
        HTTPException: 400 validation, 404 missing, 409 conflict or invalid
        transition, 500 persistence failures.
    """

    if isinstance(exc, ValidationError):
        code, detail = status.HTTP_400_BAD_REQUEST, str(exc)
    elif isinstance(exc, NotFoundError):
        code, detail = status.HTTP_404_NOT_FOUND, str(exc)
    elif isinstance(exc, (ConflictError, InvalidTransitionError)):
        code, detail = status.HTTP_409_CONFLICT, str(exc)
    elif isinstance(exc, PersistenceError):
        code, detail = status.HTTP_500_INTERNAL_SERVER_ERROR, f"Unable to {action} due to an internal error."
    else:
        code, detail = status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc)
    raise HTTPException(status_code=code, detail=detail) from exc


def is_admin_password(candidate: Optional[str]) -> bool:
    if not candidate:
        return False
    return secrets.compare_digest(candidate.encode(), Config.ADMIN_PASSWORD.encode())


async def require_admin(x_admin_password: Optional[str] = Header(default=None)) -> None:
    """Gate owner-only routes behind the X-Admin-Password header."""

    if x_admin_password is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Owner access required.",
        )
    if not is_admin_password(x_admin_password):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Incorrect password",
        )


async def admin_flag(x_admin_password: Optional[str] = Header(default=None)) -> bool:
    """Whether the X-Admin-Password header matches; never refuses the request."""

    return is_admin_password(x_admin_password)
