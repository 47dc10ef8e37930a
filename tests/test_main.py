"""Startup tests for the application lifespan with a fake Supabase backend."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fake_supabase import FakeDB  # noqa: E402

import main  # noqa: E402
from config import Config  # noqa: E402


@pytest.fixture()
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeDB:
    """Point the lifespan at an in-memory booking table instead of Supabase."""

    db = FakeDB()

    class FakeStayDB:
        def __init__(self) -> None:
            self.url = "https://stay.example.supabase.co"
            self.key = "anon-key"
            self.client = db

    monkeypatch.setattr(main, "StayDB", FakeStayDB)
    monkeypatch.setattr(Config, "REALTIME_ENABLED", True)
    return db


def test_startup_survives_unreachable_realtime(monkeypatch: pytest.MonkeyPatch, fake_db: FakeDB) -> None:
    async def unreachable(url: str, key: str) -> None:
        raise ConnectionError("realtime unreachable")

    monkeypatch.setattr(main, "connect_realtime", unreachable)
    fake_db.add_booking("2025-12-24", "2025-12-26", "approved")

    with TestClient(main.app) as client:
        root = client.get("/")
        calendar = client.get("/bookings/calendar")
        submitted = client.post(
            "/bookings",
            json={
                "guest_name": "Ada",
                "guest_email": "ada@example.com",
                "start_date": "2025-12-10",
                "end_date": "2025-12-12",
            },
        )

    assert root.status_code == 200
    assert "2025-12-25" in calendar.json()["occupied"]
    assert submitted.status_code == 201
    assert len(fake_db.bookings) == 2


def test_startup_survives_failed_initial_load(monkeypatch: pytest.MonkeyPatch, fake_db: FakeDB) -> None:
    monkeypatch.setattr(Config, "REALTIME_ENABLED", False)
    fake_db.fail_on = "select"

    with TestClient(main.app) as client:
        calendar = client.get("/bookings/calendar")

    assert calendar.status_code == 200
    assert calendar.json()["occupied"] == {}
