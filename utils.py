from datetime import date, timedelta
from typing import Optional

from config import Config

SEASON_START: date = Config.SEASON_START
SEASON_END: date = Config.SEASON_END

MONTHS_SHORT = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def date_to_key(day: date) -> str:
    '''Canonical YYYY-MM-DD key for a calendar day.'''
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def key_to_date(key: str) -> date:
    '''Parse a canonical YYYY-MM-DD key back into a date.'''
    try:
        year, month, day = (int(part) for part in key.split("-"))
        result = date(year, month, day)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid date key {key!r}, expected YYYY-MM-DD") from exc
    # keys are compared as strings, so only the zero-padded form is accepted
    if len(key) != 10 or date_to_key(result) != key:
        raise ValueError(f"Invalid date key {key!r}, expected YYYY-MM-DD")
    return result


def enumerate_days(start_key: str, end_key: str) -> list[str]:
    """
    List every day between two keys, both ends included.

    Args:
        start_key: First day of the range.
        end_key: Last day of the range.

    Returns:
        Ascending list of date keys, one per calendar day. Empty when
        start_key comes after end_key.
    """
    current = key_to_date(start_key)
    last = key_to_date(end_key)
    days: list[str] = []
    while current <= last:
        days.append(date_to_key(current))
        current += timedelta(days=1)
    return days


def is_within_season(
    day: date,
    season_start: Optional[date] = None,
    season_end: Optional[date] = None,
) -> bool:
    '''Check if a day falls inside the (inclusive) season window.'''
    start = season_start or SEASON_START
    end = season_end or SEASON_END
    return start <= day <= end


def normalize_range(first_key: str, second_key: str) -> tuple[str, str]:
    '''Order two date keys so that the earlier one comes first.'''
    if second_key < first_key:
        return second_key, first_key
    return first_key, second_key


def format_date_range(start_key: str, end_key: str) -> str:
    '''Human readable range, e.g. "Dec 20 – Dec 23, 2025".'''
    start = key_to_date(start_key)
    end = key_to_date(end_key)
    return (
        f"{MONTHS_SHORT[start.month - 1]} {start.day} – "
        f"{MONTHS_SHORT[end.month - 1]} {end.day}, {end.year}"
    )
