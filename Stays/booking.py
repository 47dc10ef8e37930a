from uuid import UUID
from typing import Any, Literal, Optional
from datetime import date, datetime
from pydantic import BaseModel, Field, model_validator

from Stays.errors import InvalidTransitionError
from utils import date_to_key

BookingStatus = Literal['pending', 'approved', 'rejected']

# rejected is terminal, it covers both declined requests and revoked approvals
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    'pending': {'approved', 'rejected'},
    'approved': {'rejected'},
    'rejected': set(),
}


def validate_transition(current: str, target: str) -> None:
    '''Raise InvalidTransitionError unless current -> target is allowed.'''
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(current=current, target=target)


class Booking(BaseModel):

    id : Optional[UUID] = Field(default=None, frozen=True)
    guest_name : str = Field(frozen=True)
    guest_email : str = Field(frozen=True)
    guest_count : int = Field(default=1, ge=1, frozen=True)
    notes : Optional[str] = Field(default=None, frozen=True)
    start_date : date = Field(frozen=True)
    end_date : date = Field(frozen=True)
    status : BookingStatus = 'pending'
    created_at : Optional[datetime] = Field(default=None, frozen=True)

    @model_validator(mode="after")
    def validate_dates(self):
        # a one-night stay has start_date == end_date
        if self.end_date < self.start_date:
            raise ValueError("end_date must be greater than or equal to start_date")
        return self

    @property
    def start_key(self) -> str:
        return date_to_key(self.start_date)

    @property
    def end_key(self) -> str:
        return date_to_key(self.end_date)

    def with_status(self, new_status: BookingStatus) -> "Booking":
        ''' Return a copy of the booking moved to new_status. '''
        validate_transition(self.status, new_status)
        return self.model_copy(update={"status": new_status})

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize the booking into a row for the bookings table.

        Returns:
            dict[str, Any]: Mapping with ISO dates; id and created_at are
            omitted until the database has assigned them.
        """
        row: dict[str, Any] = {
            "guest_name": self.guest_name,
            "guest_email": self.guest_email,
            "guest_count": self.guest_count,
            "notes": self.notes,
            "start_date": self.start_key,
            "end_date": self.end_key,
            "status": self.status,
        }
        if self.id is not None:
            row["id"] = str(self.id)
        if self.created_at is not None:
            row["created_at"] = self.created_at.isoformat()
        return row


class BookingRequest(BaseModel):
    """Stay request submitted by a guest for a selected range."""

    guest_name : str = ""
    guest_email : str = ""
    guest_count : int = Field(default=1, ge=1, le=20)
    notes : str = ""
    start_date : date
    end_date : Optional[date] = None
