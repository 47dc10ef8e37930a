'''
FastAPI application for the Stay Calendar service.

Guests request stays for a single vacation property; the owner approves or
rejects them without double-booking.

Available endpoints:
- /bookings: Calendar, availability, stay requests and owner actions.
- /selections: Two-click date range selection per client session.
- /admin: Owner login.
'''

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool

from config import Config
from Database.db import StayDB
from Database.deps import install_engine
from Database.realtime import connect_realtime, schedule_refresh, subscribe_to_changes, unsubscribe
from Stays.errors import PersistenceError
from Stays.notifications import EmailJSNotifier

# routers
from api.booking_routes import booking_router
from api.selection_routes import selection_router
from api.admin_routes import admin_router

logging.basicConfig(level=Config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    db = StayDB()   # create ONCE
    controller = install_engine(app, db.client, EmailJSNotifier())
    try:
        await run_in_threadpool(controller.refresh)
    except PersistenceError:
        logger.warning("Initial booking load failed; starting with an empty calendar")

    realtime_client = None
    channel = None
    if Config.REALTIME_ENABLED:
        try:
            realtime_client = await connect_realtime(db.url, db.key)
            channel = await subscribe_to_changes(realtime_client, schedule_refresh(controller.refresh))
        except Exception:
            # writes still refresh the store; only other clients' changes arrive late
            logger.exception("Live booking updates unavailable; continuing without them")
            channel = None

    yield

    # --- Shutdown ---
    if realtime_client is not None and channel is not None:
        await unsubscribe(realtime_client, channel)

# Initialize FastAPI app
app = FastAPI(title="Stay Calendar API", version="1.0.0", lifespan=lifespan)

app.include_router(booking_router, prefix="/bookings", tags=["Bookings"])
app.include_router(selection_router, prefix="/selections", tags=["Selections"])
app.include_router(admin_router, prefix="/admin", tags=["Admin"])

@app.get("/")
async def root():
    return {"message": "Welcome to the Stay Calendar API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="localhost", port=8000, reload=True)
