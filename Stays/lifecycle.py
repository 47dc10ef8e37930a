"""
Booking lifecycle: submit, approve, reject/revoke and remove.

Status changes follow pending -> approved/rejected and approved -> rejected.
Approval checks the in-memory snapshot for overlaps with other approved
stays; the database exclusion constraint catches approvals racing in from
other clients.
"""

import logging
from typing import Protocol
from uuid import UUID

from Stays.availability import ranges_overlap
from Stays.booking import Booking, BookingRequest, BookingStatus
from Stays.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from Stays.notifications import Notifier, NullNotifier
from Stays.selection import SelectionStateMachine
from Stays.store import BookingStore
from utils import SEASON_END, SEASON_START, date_to_key, format_date_range, is_within_season, key_to_date

logger = logging.getLogger(__name__)

SEASON_LABEL = format_date_range(date_to_key(SEASON_START), date_to_key(SEASON_END))
OUT_OF_SEASON_MESSAGE = f"Requested dates must fall within the season ({SEASON_LABEL})"


class BookingRepository(Protocol):
    def list(self) -> list[Booking]:
        ...

    def insert(self, booking: Booking) -> Booking:
        ...

    def update_status(self, booking_id: UUID, status: BookingStatus) -> None:
        ...

    def delete(self, booking_id: UUID) -> None:
        ...


class BookingLifecycleController:

    def __init__(
        self,
        repository: BookingRepository,
        store: BookingStore,
        notifier: Notifier | None = None,
    ) -> None:
        self._repository = repository
        self._store = store
        self._notifier = notifier or NullNotifier()

    @property
    def store(self) -> BookingStore:
        return self._store

    def refresh(self) -> None:
        '''Replace the store with the current contents of the bookings table.'''
        self._store.replace(self._repository.list())

    def _refresh_after_write(self) -> None:
        # the write already succeeded; the live-update channel will catch up
        try:
            self.refresh()
        except PersistenceError:
            logger.warning("Refresh after write failed; store may be stale until the next change event")

    def _require(self, booking_id: UUID) -> Booking:
        booking = self._store.get(booking_id)
        if booking is None:
            raise NotFoundError(f"No booking found with id {booking_id}")
        return booking

    def submit(self, request: BookingRequest) -> Booking:
        """
        Persist a new pending stay request and notify the owner.

        Args:
            request: Guest details and the selected range.

        Returns:
            The stored booking.

        Raises:
            ValidationError: Name or email is blank, or a requested day falls
                outside the season window. Nothing is persisted.
            PersistenceError: The insert failed.
        """

        guest_name = request.guest_name.strip()
        guest_email = request.guest_email.strip()
        if not guest_name or not guest_email:
            raise ValidationError("Please fill in your name and email")

        end_date = request.end_date or request.start_date
        if not (is_within_season(request.start_date) and is_within_season(end_date)):
            logger.info(
                "Stay request outside the season refused",
                extra={"start": str(request.start_date), "end": str(end_date)},
            )
            raise ValidationError(OUT_OF_SEASON_MESSAGE)

        candidate = Booking(
            guest_name=guest_name,
            guest_email=guest_email,
            guest_count=request.guest_count,
            notes=request.notes.strip(),
            start_date=request.start_date,
            end_date=end_date,
            status="pending",
        )
        booking = self._repository.insert(candidate)
        logger.info(
            "Stay request submitted",
            extra={"booking_id": str(booking.id), "start": booking.start_key, "end": booking.end_key},
        )

        try:
            self._notifier.notify(booking)
        except Exception:
            logger.exception("Owner notification failed", extra={"booking_id": str(booking.id)})

        self._refresh_after_write()
        return booking

    def submit_selection(self, machine: SelectionStateMachine, request: BookingRequest) -> Booking:
        '''Submit a request for the machine's confirmed range, then clear the selection.'''
        confirmed = machine.confirmed_range()
        if confirmed is None:
            raise ConflictError("Pick a start and an end date before submitting")

        start_key, end_key = confirmed
        booking = self.submit(
            request.model_copy(
                update={"start_date": key_to_date(start_key), "end_date": key_to_date(end_key)}
            )
        )
        machine.reset()
        return booking

    def approve(self, booking_id: UUID) -> Booking:
        """
        Approve a booking unless it overlaps another approved stay.

        Raises:
            NotFoundError: Unknown booking.
            InvalidTransitionError: The booking was already rejected.
            ConflictError: Its range overlaps another approved booking.
            PersistenceError: The update failed.
        """

        booking = self._require(booking_id)
        approved = booking.with_status("approved")

        # other pending requests for the same dates are expected; only approved stays block
        for other in self._store.all_bookings():
            if other.id == booking.id or other.status != "approved":
                continue
            if ranges_overlap(booking.start_key, booking.end_key, other.start_key, other.end_key):
                logger.info(
                    "Approval conflicts with an approved stay",
                    extra={"booking_id": str(booking_id), "other_id": str(other.id)},
                )
                raise ConflictError(
                    "Conflict: dates overlap with an existing approved booking",
                    conflicting_id=str(other.id),
                )

        self._repository.update_status(booking_id, "approved")
        logger.info("Booking approved", extra={"booking_id": str(booking_id)})
        self._refresh_after_write()
        return approved

    def reject(self, booking_id: UUID) -> Booking:
        '''Decline a pending request or revoke an approval.'''
        booking = self._require(booking_id)
        rejected = booking.with_status("rejected")
        self._repository.update_status(booking_id, "rejected")
        logger.info("Booking rejected", extra={"booking_id": str(booking_id), "previous_status": booking.status})
        self._refresh_after_write()
        return rejected

    def remove(self, booking_id: UUID) -> None:
        self._require(booking_id)
        self._repository.delete(booking_id)
        logger.info("Booking removed", extra={"booking_id": str(booking_id)})
        self._refresh_after_write()
