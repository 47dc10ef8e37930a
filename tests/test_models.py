"""Testing guidance for every Pydantic model.

Each test below exercises both the happy-path construction and the validation
errors for a specific model. When introducing a new Pydantic model, add a new
test that instantiates it with valid data and asserts the validators by feeding
invalid payloads as well.
"""

from datetime import date
from pathlib import Path
import sys
from uuid import uuid4

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from Stays.booking import Booking, BookingRequest, validate_transition  # noqa: E402
from Stays.errors import InvalidTransitionError  # noqa: E402


def _booking(**overrides) -> Booking:
    payload = {
        "guest_name": "Ada",
        "guest_email": "ada@example.com",
        "start_date": date(2025, 12, 20),
        "end_date": date(2025, 12, 23),
    }
    payload.update(overrides)
    return Booking(**payload)


def test_booking_defaults_to_pending_single_guest() -> None:
    """Ensure a new Booking starts pending with one guest and no id."""
    booking = _booking()

    assert booking.status == "pending"
    assert booking.guest_count == 1
    assert booking.id is None
    assert booking.start_key == "2025-12-20"
    assert booking.end_key == "2025-12-23"


def test_booking_accepts_single_day_stay() -> None:
    """Ensure start_date == end_date is a valid stay."""
    booking = _booking(end_date=date(2025, 12, 20))

    assert booking.start_date == booking.end_date


def test_booking_rejects_end_before_start() -> None:
    """Ensure Booking enforces start_date <= end_date."""
    with pytest.raises(ValueError, match="end_date must be greater than or equal"):
        _booking(start_date=date(2025, 12, 23), end_date=date(2025, 12, 20))


def test_booking_parses_database_rows() -> None:
    """Ensure rows returned by Supabase (strings everywhere) load cleanly."""
    booking_id = uuid4()
    booking = Booking(
        id=str(booking_id),
        guest_name="Ada",
        guest_email="ada@example.com",
        guest_count=3,
        notes=None,
        start_date="2026-01-02",
        end_date="2026-01-05",
        status="approved",
        created_at="2025-11-01T10:00:00+00:00",
    )

    assert booking.id == booking_id
    assert booking.start_date == date(2026, 1, 2)
    assert booking.status == "approved"


def test_booking_rejects_unknown_status() -> None:
    with pytest.raises(ValueError):
        _booking(status="cancelled")


def test_booking_guest_fields_are_immutable() -> None:
    """Only the status may change once a booking exists."""
    booking = _booking()

    with pytest.raises(ValueError):
        booking.start_date = date(2025, 12, 1)  # type: ignore[misc]


def test_booking_to_dict_omits_unassigned_id() -> None:
    row = _booking(notes="Late arrival").to_dict()

    assert "id" not in row
    assert row["start_date"] == "2025-12-20"
    assert row["notes"] == "Late arrival"
    assert row["status"] == "pending"


def test_with_status_follows_allowed_transitions() -> None:
    """Ensure pending -> approved -> rejected works and rejected is terminal."""
    booking = _booking()

    approved = booking.with_status("approved")
    revoked = approved.with_status("rejected")

    assert booking.status == "pending"
    assert approved.status == "approved"
    assert revoked.status == "rejected"
    with pytest.raises(InvalidTransitionError, match="rejected -> approved"):
        revoked.with_status("approved")


def test_validate_transition_refuses_self_transitions() -> None:
    with pytest.raises(InvalidTransitionError):
        validate_transition("approved", "approved")
    with pytest.raises(InvalidTransitionError):
        validate_transition("pending", "pending")


def test_booking_request_caps_guest_count() -> None:
    """Ensure the request form limits the party to 1..20 guests."""
    request = BookingRequest(guest_name="Ada", guest_email="ada@example.com", start_date=date(2025, 12, 20))

    assert request.guest_count == 1
    assert request.end_date is None
    with pytest.raises(ValueError):
        BookingRequest(guest_count=21, start_date=date(2025, 12, 20))
    with pytest.raises(ValueError):
        BookingRequest(guest_count=0, start_date=date(2025, 12, 20))
