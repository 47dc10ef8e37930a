"""Supabase-backed access to the bookings table."""

import logging
from typing import Any
from uuid import UUID

from postgrest.exceptions import APIError

from config import Config
from Stays.booking import Booking, BookingStatus
from Stays.errors import ConflictError, NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

# raised by the approved-range exclusion constraint (see migrations/)
EXCLUSION_VIOLATION = "23P01"


def _is_exclusion_violation(exc: APIError) -> bool:
    return getattr(exc, "code", None) == EXCLUSION_VIOLATION


class SupabaseBookingRepository:
    """Bookings table accessed through a Supabase (PostgREST) client."""

    def __init__(self, client: Any, table_name: str = Config.BOOKINGS_TABLE) -> None:
        self._client = client
        self._table_name = table_name

    def _table(self) -> Any:
        return self._client.table(self._table_name)

    def list(self) -> list[Booking]:
        """
        Fetch every booking ordered by start date.

        Returns:
            The full booking set as Booking models.

        Raises:
            PersistenceError: When the query fails.
        """

        try:
            result = self._table().select("*").order("start_date").execute()
        except Exception as exc:
            logger.exception("Failed to fetch bookings")
            raise PersistenceError("Unable to load bookings.") from exc

        return [Booking(**row) for row in result.data or []]

    def insert(self, booking: Booking) -> Booking:
        """
        Insert a new booking row and return it as stored.

        Args:
            booking: Booking to persist, without an id.

        Returns:
            The stored booking, including the id assigned by the database.

        Raises:
            PersistenceError: When the insert fails.
        """

        try:
            result = self._table().insert(booking.to_dict()).execute()
        except Exception as exc:
            logger.exception("Failed to insert booking", extra={"guest_email": booking.guest_email})
            raise PersistenceError("Unable to submit the request.") from exc

        if not result.data:
            raise PersistenceError("The database did not return the stored booking.")
        return Booking(**result.data[0])

    def update_status(self, booking_id: UUID, status: BookingStatus) -> None:
        """
        Set the status of an existing booking.

        Raises:
            ConflictError: The database rejected an approval that overlaps
                another approved stay.
            NotFoundError: No row matched the identifier.
            PersistenceError: Any other failure.
        """

        try:
            result = (
                self._table()
                .update({"status": status})
                .eq("id", str(booking_id))
                .execute()
            )
        except APIError as exc:
            if _is_exclusion_violation(exc):
                logger.info(
                    "Approval blocked by the approved-range constraint",
                    extra={"booking_id": str(booking_id), "error_code": exc.code},
                )
                raise ConflictError("Dates overlap with an existing approved booking") from exc
            logger.exception(
                "Failed to update booking status",
                extra={"booking_id": str(booking_id), "status": status, "error_code": exc.code},
            )
            raise PersistenceError("Unable to update the booking.") from exc
        except Exception as exc:
            logger.exception("Failed to update booking status", extra={"booking_id": str(booking_id)})
            raise PersistenceError("Unable to update the booking.") from exc

        if not result.data:
            raise NotFoundError(f"No booking found with id {booking_id}")

    def delete(self, booking_id: UUID) -> None:
        try:
            self._table().delete().eq("id", str(booking_id)).execute()
        except Exception as exc:
            logger.exception("Unable to delete booking", extra={"booking_id": str(booking_id)})
            raise PersistenceError("Unable to remove the booking.") from exc
