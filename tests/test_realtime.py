"""Tests for the live-update subscription with a fake async Supabase client."""

from __future__ import annotations

import asyncio
from pathlib import Path
import sys
from typing import Any, Callable

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fake_supabase import FakeDB  # noqa: E402

from Database.realtime import schedule_refresh, subscribe_to_changes, unsubscribe  # noqa: E402
from Database.repository import SupabaseBookingRepository  # noqa: E402
from Stays.lifecycle import BookingLifecycleController  # noqa: E402
from Stays.store import BookingStore  # noqa: E402


class FakeChannel:
    def __init__(self, name: str) -> None:
        self.name = name
        self.listeners: list[tuple[str, dict[str, Any], Callable[[Any], None]]] = []
        self.subscribed = False

    def on_postgres_changes(self, event: str, callback: Callable[[Any], None], **filters: Any) -> "FakeChannel":
        self.listeners.append((event, filters, callback))
        return self

    async def subscribe(self) -> "FakeChannel":
        self.subscribed = True
        return self

    def emit(self, payload: dict[str, Any]) -> None:
        for _, _, callback in self.listeners:
            callback(payload)


class FakeAsyncClient:
    def __init__(self) -> None:
        self.channels: list[FakeChannel] = []
        self.removed: list[FakeChannel] = []

    def channel(self, name: str) -> FakeChannel:
        channel = FakeChannel(name)
        self.channels.append(channel)
        return channel

    async def remove_channel(self, channel: FakeChannel) -> None:
        self.removed.append(channel)


def test_subscribe_listens_to_every_booking_change() -> None:
    client = FakeAsyncClient()
    calls: list[str] = []

    async def scenario() -> FakeChannel:
        channel = await subscribe_to_changes(client, lambda: calls.append("refresh"))  # type: ignore[arg-type]
        channel.emit({"eventType": "INSERT"})
        channel.emit({"eventType": "DELETE"})
        await unsubscribe(client, channel)  # type: ignore[arg-type]
        return channel

    channel = asyncio.run(scenario())

    assert channel.name == "bookings-changes"
    assert channel.subscribed
    assert channel.listeners[0][0] == "*"
    assert channel.listeners[0][1] == {"schema": "public", "table": "bookings"}
    assert calls == ["refresh", "refresh"]
    assert client.removed == [channel]


def test_change_event_replaces_the_store() -> None:
    fake_db = FakeDB()
    controller = BookingLifecycleController(SupabaseBookingRepository(fake_db), BookingStore())
    client = FakeAsyncClient()

    async def scenario() -> None:
        channel = await subscribe_to_changes(client, schedule_refresh(controller.refresh))  # type: ignore[arg-type]
        fake_db.add_booking("2025-12-24", "2025-12-26", "approved")
        channel.emit({"eventType": "INSERT"})
        for _ in range(50):
            if controller.store.all_bookings():
                break
            await asyncio.sleep(0.01)

    asyncio.run(scenario())

    assert "2025-12-25" in controller.store.occupied_index()


def test_failed_refresh_from_change_event_is_not_fatal() -> None:
    fake_db = FakeDB()
    fake_db.fail_on = "select"
    controller = BookingLifecycleController(SupabaseBookingRepository(fake_db), BookingStore())

    async def scenario() -> None:
        trigger = schedule_refresh(controller.refresh)
        trigger()
        for _ in range(50):
            if "select" in fake_db.calls:
                break
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.01)

    asyncio.run(scenario())

    assert controller.store.all_bookings() == []
