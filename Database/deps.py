'''
FastAPI dependencies exposing the shared booking engine.

Everything is created once by ``install_engine`` (called from the application
lifespan, or directly by tests with a fake Supabase client) and kept on
``app.state``.
'''
from typing import Any, Optional

from fastapi import FastAPI, Request

from config import Config
from Database.repository import SupabaseBookingRepository
from Stays.availability import AvailabilityEngine
from Stays.lifecycle import BookingLifecycleController
from Stays.notifications import Notifier
from Stays.selection import SelectionRegistry
from Stays.store import BookingStore


def install_engine(app: FastAPI, db: Any, notifier: Optional[Notifier] = None) -> BookingLifecycleController:
    """
    Build the store, availability engine, controller and selection registry.

    Args:
        app: Application whose state receives the engine.
        db: Supabase client (or any object exposing ``table(name)``).
        notifier: Owner notification channel; defaults to no notification.

    Returns:
        The lifecycle controller, already attached to ``app.state``.
    """

    store = BookingStore()
    availability = AvailabilityEngine(store)
    controller = BookingLifecycleController(SupabaseBookingRepository(db), store, notifier)

    app.state.db = db
    app.state.store = store
    app.state.availability = availability
    app.state.controller = controller
    app.state.selections = SelectionRegistry(availability, Config.SELECTION_SESSION_LIMIT)
    return controller


def get_controller(request: Request) -> BookingLifecycleController:
    return request.app.state.controller


def get_availability(request: Request) -> AvailabilityEngine:
    return request.app.state.availability


def get_selections(request: Request) -> SelectionRegistry:
    return request.app.state.selections
