"""Date and range availability against the approved stays."""

from Stays.store import BookingStore
from utils import enumerate_days, key_to_date


def ranges_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    '''Check if two inclusive date ranges share at least one day.'''
    return not set(enumerate_days(a_start, a_end)).isdisjoint(enumerate_days(b_start, b_end))


class AvailabilityEngine:
    """Answers availability questions from the store's occupied index."""

    def __init__(self, store: BookingStore) -> None:
        self._store = store

    def is_date_available(self, date_key: str) -> bool:
        key_to_date(date_key)  # raises on non-canonical keys, which would never match the index
        # pending requests never block a new selection
        return date_key not in self._store.snapshot.occupied

    def is_range_available(self, start_key: str, end_key: str) -> bool:
        occupied = self._store.snapshot.occupied
        return all(day not in occupied for day in enumerate_days(start_key, end_key))

    def unavailable_days(self, start_key: str, end_key: str) -> list[str]:
        '''Days of the range already taken by an approved stay.'''
        occupied = self._store.snapshot.occupied
        return [day for day in enumerate_days(start_key, end_key) if day in occupied]
