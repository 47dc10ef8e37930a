"""Shared API request and response models for the Stay Calendar service."""

from typing import Optional
from datetime import date

from pydantic import BaseModel, Field

from Stays.booking import Booking
from Stays.selection import SelectionState


class MessageResponse(BaseModel):
    """Envelope for simple string responses."""

    status: int
    message: str


class BookingResponse(BaseModel):
    """Envelope for responses that include a booking resource."""

    status: int
    message: Optional[str] = None
    booking: Booking


class BookingListResponse(BaseModel):
    """Envelope for responses that include a list of bookings."""

    status: int
    bookings: list[Booking]


class PendingCountResponse(BaseModel):

    status: int
    pending: int


class OccupiedDay(BaseModel):
    """Approved stay covering a calendar day."""

    booking_id: Optional[str]
    guest_name: str


class CalendarResponse(BaseModel):
    """Calendar view: season window, booked days and requested days."""

    status: int
    season_start: date
    season_end: date
    occupied: dict[str, OccupiedDay]
    pending_dates: list[str]


class AvailabilityResponse(BaseModel):

    status: int
    start: str
    end: str
    available: bool
    unavailable_days: list[str]


class DateClick(BaseModel):
    """A click or hover on a calendar day (YYYY-MM-DD)."""

    day: Optional[str] = None


class SelectionResponse(BaseModel):
    """Envelope describing a session's date range selection."""

    status: int
    state: SelectionState
    start: Optional[str] = None
    end: Optional[str] = None
    hovered: Optional[str] = None
    preview: list[str] = []
    open_form: bool = False
    notice: Optional[str] = None


class GuestDetails(BaseModel):
    """Guest fields submitted together with a confirmed selection."""

    guest_name: str = ""
    guest_email: str = ""
    guest_count: int = Field(default=1, ge=1, le=20)
    notes: str = ""


class AdminLogin(BaseModel):

    password: str
