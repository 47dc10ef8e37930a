"""
Two-click date range selection.

A guest clicks a start day, then an end day (in any order). Hovering between
the clicks only changes the preview. If the resulting range runs into an
approved stay, the guest is told so and the selection starts over at the day
just clicked.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from Stays.availability import AvailabilityEngine
from utils import enumerate_days, is_within_season, key_to_date, normalize_range

logger = logging.getLogger(__name__)

RANGE_CONFLICT_NOTICE = "Some dates in that range are already booked"


class SelectionState(str, Enum):
    IDLE = "idle"
    START_PICKED = "start_picked"
    RANGE_CONFIRMED = "range_confirmed"


@dataclass(frozen=True)
class SelectionOutcome:
    """Result of a click: the new state plus what the UI should do next."""

    state: SelectionState
    start: Optional[str] = None
    end: Optional[str] = None
    open_form: bool = False
    notice: Optional[str] = None


class SelectionStateMachine:

    def __init__(self, availability: AvailabilityEngine) -> None:
        self._availability = availability
        self.state = SelectionState.IDLE
        self.start: Optional[str] = None
        self.end: Optional[str] = None
        self.hovered: Optional[str] = None

    def _outcome(self, open_form: bool = False, notice: Optional[str] = None) -> SelectionOutcome:
        return SelectionOutcome(
            state=self.state, start=self.start, end=self.end, open_form=open_form, notice=notice
        )

    def _pick_start(self, date_key: str) -> None:
        self.state = SelectionState.START_PICKED
        self.start = date_key
        self.end = None
        self.hovered = None

    def click(self, date_key: str) -> SelectionOutcome:
        """
        Handle a click on a calendar day.

        Args:
            date_key: Clicked day as YYYY-MM-DD.

        Returns:
            SelectionOutcome describing the resulting state. open_form is set
            when a full range was confirmed; notice carries the message to
            show when the range ran into an approved stay.
        """
        if not is_within_season(key_to_date(date_key)):
            return self._outcome()

        if self.state is not SelectionState.START_PICKED or self.start is None:
            if not self._availability.is_date_available(date_key):
                return self._outcome()
            self._pick_start(date_key)
            return self._outcome()

        low, high = normalize_range(self.start, date_key)
        if self._availability.is_range_available(low, high):
            self.state = SelectionState.RANGE_CONFIRMED
            self.start, self.end = low, high
            self.hovered = None
            logger.info("Selection confirmed", extra={"start": low, "end": high})
            return self._outcome(open_form=True)

        logger.info("Selection ran into a booked stay", extra={"start": low, "end": high})
        self._pick_start(date_key)
        return self._outcome(notice=RANGE_CONFLICT_NOTICE)

    def hover(self, date_key: Optional[str]) -> None:
        '''Preview a candidate end day; ignored unless a start is picked.'''
        if date_key is None:
            self.hovered = None
        elif self.state is SelectionState.START_PICKED:
            self.hovered = date_key

    def cancel(self) -> SelectionOutcome:
        self.state = SelectionState.IDLE
        self.start = None
        self.end = None
        self.hovered = None
        return self._outcome()

    # submission clears the selection the same way cancelling the form does
    reset = cancel

    def confirmed_range(self) -> Optional[tuple[str, str]]:
        if self.state is SelectionState.RANGE_CONFIRMED and self.start and self.end:
            return self.start, self.end
        return None

    def preview_range(self) -> list[str]:
        '''Days highlighted on the calendar for the current selection.'''
        if self.start is None:
            return []
        end = self.end or self.hovered or self.start
        return enumerate_days(*normalize_range(self.start, end))


class SelectionRegistry:
    """
    One selection state machine per client session.

    Only a click creates a session. Cancelling or submitting drops it, and
    once max_sessions are held the least recently clicked one is evicted.
    """

    def __init__(self, availability: AvailabilityEngine, max_sessions: int = 1000) -> None:
        self._availability = availability
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, SelectionStateMachine] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def find(self, session_id: str) -> Optional[SelectionStateMachine]:
        return self._sessions.get(session_id)

    def get(self, session_id: str) -> SelectionStateMachine:
        '''Return the session's machine, creating it if needed.'''
        machine = self._sessions.get(session_id)
        if machine is None:
            machine = SelectionStateMachine(self._availability)
            self._sessions[session_id] = machine
        self._sessions.move_to_end(session_id)
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug("Selection session evicted", extra={"session_id": evicted})
        return machine

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
