"""Date range selection routes, one selection per client session."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from Database.deps import get_controller, get_selections
from Stays.booking import BookingRequest
from Stays.errors import StayError
from Stays.lifecycle import BookingLifecycleController
from Stays.selection import SelectionOutcome, SelectionRegistry, SelectionState, SelectionStateMachine

from .models import BookingResponse, DateClick, GuestDetails, SelectionResponse
from .utils import _parse_date_key, _raise_http

logger = logging.getLogger(__name__)

# mount api router
selection_router = APIRouter()


def _selection_response(
    machine: Optional[SelectionStateMachine], outcome: SelectionOutcome | None = None
) -> SelectionResponse:
    # sessions without a machine have nothing picked yet
    if machine is None:
        return SelectionResponse(status=status.HTTP_200_OK, state=SelectionState.IDLE)
    return SelectionResponse(
        status=status.HTTP_200_OK,
        state=machine.state,
        start=machine.start,
        end=machine.end,
        hovered=machine.hovered,
        preview=machine.preview_range(),
        open_form=outcome.open_form if outcome else False,
        notice=outcome.notice if outcome else None,
    )


@selection_router.get("/{session_id}", response_model=SelectionResponse)
async def get_selection(
    session_id: str,
    selections: SelectionRegistry = Depends(get_selections),
) -> SelectionResponse:
    return _selection_response(selections.find(session_id))


@selection_router.post("/{session_id}/click", response_model=SelectionResponse)
async def click_date(
    session_id: str,
    click: DateClick,
    selections: SelectionRegistry = Depends(get_selections),
) -> SelectionResponse:
    """
    Feed a calendar click into the session's selection.

    Args:
        session_id: Client session identifier.
        click: Clicked day.
        selections: Selection registry injected via dependency.

    Returns:
        SelectionResponse; open_form tells the client to show the request
        form, notice carries the conflict message when the range was refused.
    """

    day = _parse_date_key(click.day or "", logger)
    machine = selections.get(session_id)
    outcome = machine.click(day)
    return _selection_response(machine, outcome)


@selection_router.post("/{session_id}/hover", response_model=SelectionResponse)
async def hover_date(
    session_id: str,
    hover: DateClick,
    selections: SelectionRegistry = Depends(get_selections),
) -> SelectionResponse:
    """Update the preview range; an empty day clears the hover."""

    day = _parse_date_key(hover.day, logger) if hover.day else None
    machine = selections.find(session_id)
    if machine is not None:
        machine.hover(day)
    return _selection_response(machine)


@selection_router.post("/{session_id}/cancel", response_model=SelectionResponse)
async def cancel_selection(
    session_id: str,
    selections: SelectionRegistry = Depends(get_selections),
) -> SelectionResponse:
    selections.discard(session_id)
    return _selection_response(None)


@selection_router.post(
    "/{session_id}/submit",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_selection(
    session_id: str,
    guest: GuestDetails,
    selections: SelectionRegistry = Depends(get_selections),
    controller: BookingLifecycleController = Depends(get_controller),
) -> BookingResponse:
    """
    Submit a stay request for the session's confirmed range.

    Args:
        session_id: Client session identifier.
        guest: Guest details from the request form.
        selections: Selection registry injected via dependency.
        controller: Lifecycle controller injected via dependency.

    Returns:
        BookingResponse wrapping the stored request. The session is dropped
        on success and left untouched on failure.
    """

    machine = selections.find(session_id)
    confirmed = machine.confirmed_range() if machine is not None else None
    if machine is None or confirmed is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Pick a start and an end date before submitting",
        )

    request = BookingRequest(**guest.model_dump(), start_date=confirmed[0], end_date=confirmed[1])
    try:
        booking = await run_in_threadpool(controller.submit_selection, machine, request)
    except StayError as exc:
        logger.info("Selection submit refused", extra={"session_id": session_id, "reason": str(exc)})
        _raise_http(exc, "submit the request")

    selections.discard(session_id)
    return BookingResponse(
        status=status.HTTP_201_CREATED,
        message="Request submitted! The owner will review it shortly.",
        booking=booking,
    )
