"""In-memory booking snapshot and the views derived from it."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional
from uuid import UUID

from Stays.booking import Booking
from utils import enumerate_days

logger = logging.getLogger(__name__)


def build_occupied_index(bookings: Iterable[Booking]) -> dict[str, Booking]:
    """
    Map every day covered by an approved booking to that booking.

    Args:
        bookings: Current booking set.

    Returns:
        Date key -> approved booking. When two approved bookings share a
        day the later one in the input wins.
    """
    index: dict[str, Booking] = {}
    for booking in bookings:
        if booking.status != "approved":
            continue
        for day in enumerate_days(booking.start_key, booking.end_key):
            previous = index.get(day)
            if previous is not None and previous.id != booking.id:
                logger.warning(
                    "Approved bookings overlap",
                    extra={"date": day, "booking_id": str(booking.id), "other_id": str(previous.id)},
                )
            index[day] = booking
    return index


def build_pending_dates(bookings: Iterable[Booking]) -> frozenset[str]:
    '''Every day covered by at least one pending request.'''
    days: set[str] = set()
    for booking in bookings:
        if booking.status == "pending":
            days.update(enumerate_days(booking.start_key, booking.end_key))
    return frozenset(days)


def sort_upcoming(bookings: Iterable[Booking]) -> tuple[Booking, ...]:
    '''Approved bookings ordered by start date.'''
    approved = [booking for booking in bookings if booking.status == "approved"]
    return tuple(sorted(approved, key=lambda booking: booking.start_date))


@dataclass(frozen=True)
class BookingSnapshot:
    bookings: tuple[Booking, ...] = ()
    occupied: dict[str, Booking] = field(default_factory=dict)
    pending_dates: frozenset[str] = frozenset()
    upcoming: tuple[Booking, ...] = ()

    @classmethod
    def build(cls, bookings: Iterable[Booking]) -> "BookingSnapshot":
        items = tuple(bookings)
        return cls(
            bookings=items,
            occupied=build_occupied_index(items),
            pending_dates=build_pending_dates(items),
            upcoming=sort_upcoming(items),
        )


class BookingStore:
    """
    Authoritative booking set for the process.

    Every refresh swaps in a new snapshot, so readers always see one
    consistent booking set and the derived views built from it.
    """

    def __init__(self, bookings: Iterable[Booking] = ()) -> None:
        self._snapshot = BookingSnapshot.build(bookings)

    @property
    def snapshot(self) -> BookingSnapshot:
        return self._snapshot

    def replace(self, bookings: Iterable[Booking]) -> None:
        '''Replace the whole booking set (last write wins).'''
        snapshot = BookingSnapshot.build(bookings)
        self._snapshot = snapshot
        logger.debug("Booking store replaced", extra={"bookings": len(snapshot.bookings)})

    def all_bookings(self) -> list[Booking]:
        return list(self._snapshot.bookings)

    def occupied_index(self) -> dict[str, Booking]:
        return dict(self._snapshot.occupied)

    def pending_date_set(self) -> frozenset[str]:
        return self._snapshot.pending_dates

    def upcoming_approved(self) -> list[Booking]:
        return list(self._snapshot.upcoming)

    def pending_count(self) -> int:
        return sum(1 for booking in self._snapshot.bookings if booking.status == "pending")

    def get(self, booking_id: UUID) -> Optional[Booking]:
        for booking in self._snapshot.bookings:
            if booking.id == booking_id:
                return booking
        return None
