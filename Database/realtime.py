"""Live-update channel: refresh the booking store on any remote change."""

import asyncio
import logging
from typing import Any, Callable

from fastapi.concurrency import run_in_threadpool
from supabase import AsyncClient, acreate_client

from config import Config
from Stays.errors import PersistenceError

logger = logging.getLogger(__name__)

CHANNEL_NAME = "bookings-changes"


async def subscribe_to_changes(
    client: AsyncClient,
    callback: Callable[[], Any],
    table_name: str = Config.BOOKINGS_TABLE,
) -> Any:
    """
    Call ``callback`` whenever a row of the bookings table changes.

    Args:
        client: Async Supabase client (realtime needs the async flavour).
        callback: Invoked with no arguments on insert, update or delete.
        table_name: Table to watch in the public schema.

    Returns:
        The subscribed realtime channel, to pass to ``unsubscribe``.
    """

    def _on_change(payload: Any) -> None:
        logger.debug("Booking change received", extra={"table": table_name})
        callback()

    channel = client.channel(CHANNEL_NAME)
    channel.on_postgres_changes("*", schema="public", table=table_name, callback=_on_change)
    await channel.subscribe()
    logger.info("Subscribed to booking changes", extra={"channel": CHANNEL_NAME})
    return channel


async def unsubscribe(client: AsyncClient, channel: Any) -> None:
    await client.remove_channel(channel)
    logger.info("Unsubscribed from booking changes", extra={"channel": CHANNEL_NAME})


def schedule_refresh(refresh: Callable[[], None]) -> Callable[[], None]:
    """
    Wrap a blocking refresh so change events run it off the event loop.

    Refreshes are full replaces, so overlapping runs are harmless and the
    last one to finish wins.
    """

    async def _run() -> None:
        try:
            await run_in_threadpool(refresh)
        except PersistenceError:
            logger.warning("Refresh triggered by a change event failed")

    tasks: set[asyncio.Task[None]] = set()

    def _trigger() -> None:
        task = asyncio.get_running_loop().create_task(_run())
        tasks.add(task)
        task.add_done_callback(tasks.discard)

    return _trigger


async def connect_realtime(url: str, key: str) -> AsyncClient:
    return await acreate_client(url, key)
