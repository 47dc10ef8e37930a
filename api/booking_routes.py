"""Booking-related FastAPI routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool

from config import Config
from Database.deps import get_availability, get_controller
from Stays.availability import AvailabilityEngine
from Stays.booking import BookingRequest
from Stays.errors import StayError
from Stays.lifecycle import BookingLifecycleController
from utils import normalize_range

from .models import (
    AvailabilityResponse,
    BookingListResponse,
    BookingResponse,
    CalendarResponse,
    MessageResponse,
    OccupiedDay,
    PendingCountResponse,
)
from .utils import _parse_date_key, _parse_id, _raise_http, admin_flag, require_admin

logger = logging.getLogger(__name__)

# mount api router
booking_router = APIRouter()


@booking_router.get("/health", response_model=MessageResponse)
async def health_check() -> MessageResponse:
    """Quick liveness check for the booking service."""

    return MessageResponse(status=status.HTTP_200_OK, message="Booking service is healthy")


@booking_router.get(
    "/calendar",
    response_model=CalendarResponse,
    status_code=status.HTTP_200_OK,
)
async def get_calendar(
    controller: BookingLifecycleController = Depends(get_controller),
    is_owner: bool = Depends(admin_flag),
) -> CalendarResponse:
    """
    Calendar view shared by guests and the owner.

    Returns:
        CalendarResponse with the season window and the approved stay covering
        each booked day. Days with pending requests are only listed for the
        owner; guests get an empty list.
    """

    snapshot = controller.store.snapshot
    occupied = {
        day: OccupiedDay(booking_id=str(booking.id) if booking.id else None, guest_name=booking.guest_name)
        for day, booking in snapshot.occupied.items()
    }
    return CalendarResponse(
        status=status.HTTP_200_OK,
        season_start=Config.SEASON_START,
        season_end=Config.SEASON_END,
        occupied=occupied,
        pending_dates=sorted(snapshot.pending_dates) if is_owner else [],
    )


@booking_router.get(
    "/upcoming",
    response_model=BookingListResponse,
    status_code=status.HTTP_200_OK,
)
async def get_upcoming(controller: BookingLifecycleController = Depends(get_controller)) -> BookingListResponse:
    """Approved stays ordered by arrival date."""

    return BookingListResponse(status=status.HTTP_200_OK, bookings=controller.store.upcoming_approved())


@booking_router.get(
    "/availability",
    response_model=AvailabilityResponse,
    status_code=status.HTTP_200_OK,
)
async def get_availability_for_range(
    start: str = Query(...),
    end: str = Query(...),
    availability: AvailabilityEngine = Depends(get_availability),
) -> AvailabilityResponse:
    """
    Check whether a range of days is free of approved stays.

    Args:
        start: First day (YYYY-MM-DD).
        end: Last day (YYYY-MM-DD); the two ends may come in any order.
        availability: Availability engine injected via dependency.

    Returns:
        AvailabilityResponse listing the blocking days, if any.
    """

    low, high = normalize_range(_parse_date_key(start, logger), _parse_date_key(end, logger))
    blocked = availability.unavailable_days(low, high)
    return AvailabilityResponse(
        status=status.HTTP_200_OK,
        start=low,
        end=high,
        available=not blocked,
        unavailable_days=blocked,
    )


@booking_router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_booking(
    request: BookingRequest,
    controller: BookingLifecycleController = Depends(get_controller),
) -> BookingResponse:
    """
    Record a stay request as pending and notify the owner.

    Args:
        request: Guest details and requested range.
        controller: Lifecycle controller injected via dependency.

    Returns:
        BookingResponse wrapping the stored request.
    """

    try:
        booking = await run_in_threadpool(controller.submit, request)
    except StayError as exc:
        logger.info("Stay request refused", extra={"reason": str(exc)})
        _raise_http(exc, "submit the request")

    return BookingResponse(
        status=status.HTTP_201_CREATED,
        message="Request submitted! The owner will review it shortly.",
        booking=booking,
    )


@booking_router.post(
    "/refresh",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
async def refresh_bookings(controller: BookingLifecycleController = Depends(get_controller)) -> MessageResponse:
    """Reload the booking set from the database."""

    try:
        await run_in_threadpool(controller.refresh)
    except StayError as exc:
        _raise_http(exc, "refresh bookings")

    count = len(controller.store.all_bookings())
    return MessageResponse(status=status.HTTP_200_OK, message=f"Loaded {count} bookings")


@booking_router.get(
    "",
    response_model=BookingListResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def list_bookings(controller: BookingLifecycleController = Depends(get_controller)) -> BookingListResponse:
    """Every booking, whatever its status (owner only)."""

    return BookingListResponse(status=status.HTTP_200_OK, bookings=controller.store.all_bookings())


@booking_router.get(
    "/pending/count",
    response_model=PendingCountResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def get_pending_count(controller: BookingLifecycleController = Depends(get_controller)) -> PendingCountResponse:
    return PendingCountResponse(status=status.HTTP_200_OK, pending=controller.store.pending_count())


@booking_router.post(
    "/{booking_id}/approve",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def approve_booking(
    booking_id: str,
    controller: BookingLifecycleController = Depends(get_controller),
) -> BookingResponse:
    """
    Approve a pending request unless it overlaps an approved stay.

    Args:
        booking_id: UUID4 of the booking to approve.
        controller: Lifecycle controller injected via dependency.

    Returns:
        BookingResponse wrapping the approved booking.
    """

    guid = _parse_id(booking_id, logger)
    try:
        booking = await run_in_threadpool(controller.approve, guid)
    except StayError as exc:
        logger.info("Approval refused", extra={"booking_id": booking_id, "reason": str(exc)})
        _raise_http(exc, "approve booking")

    return BookingResponse(
        status=status.HTTP_200_OK,
        message=f"Approved {booking.guest_name}'s stay!",
        booking=booking,
    )


@booking_router.post(
    "/{booking_id}/reject",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def reject_booking(
    booking_id: str,
    controller: BookingLifecycleController = Depends(get_controller),
) -> BookingResponse:
    """Decline a stay request; its dates stay open."""

    guid = _parse_id(booking_id, logger)
    try:
        booking = await run_in_threadpool(controller.reject, guid)
    except StayError as exc:
        _raise_http(exc, "reject booking")

    return BookingResponse(
        status=status.HTTP_200_OK,
        message=f"Rejected {booking.guest_name}'s request. Dates are now open.",
        booking=booking,
    )


@booking_router.post(
    "/{booking_id}/revoke",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def revoke_booking(
    booking_id: str,
    controller: BookingLifecycleController = Depends(get_controller),
) -> BookingResponse:
    """Withdraw an approval; the booking ends up rejected like a declined request."""

    guid = _parse_id(booking_id, logger)
    current = controller.store.get(guid)
    if current is not None and current.status != "approved":
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Booking {booking_id} is not approved.",
        )

    try:
        booking = await run_in_threadpool(controller.reject, guid)
    except StayError as exc:
        _raise_http(exc, "revoke booking")

    return BookingResponse(
        status=status.HTTP_200_OK,
        message=f"Revoked {booking.guest_name}'s approval. Dates are now open.",
        booking=booking,
    )


@booking_router.delete(
    "/{booking_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def delete_booking(
    booking_id: str,
    controller: BookingLifecycleController = Depends(get_controller),
) -> MessageResponse:
    """
    Delete a booking outright, whatever its status.

    Args:
        booking_id: UUID4 of the booking to delete.
        controller: Lifecycle controller injected via dependency.

    Returns:
        MessageResponse confirming deletion.
    """

    guid = _parse_id(booking_id, logger)
    try:
        await run_in_threadpool(controller.remove, guid)
    except StayError as exc:
        _raise_http(exc, "remove booking")

    return MessageResponse(status=status.HTTP_200_OK, message=f"Booking {booking_id} removed.")
