"""In-memory stand-in for the Supabase client used by the tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any
from uuid import uuid4

from postgrest.exceptions import APIError


class FakeSupabaseResponse:
    """Minimal Supabase-like response wrapper."""

    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


def _overlaps(row: dict[str, Any], other: dict[str, Any]) -> bool:
    start, end = date.fromisoformat(row["start_date"]), date.fromisoformat(row["end_date"])
    other_start, other_end = date.fromisoformat(other["start_date"]), date.fromisoformat(other["end_date"])
    return start <= other_end and other_start <= end


class FakeTable:
    """In-memory table with a Supabase-like interface."""

    def __init__(self, db: "FakeDB") -> None:
        self._db = db
        self._store = db.bookings
        self._action: str | None = None
        self._filter: tuple[str, str] | None = None
        self._order: str | None = None
        self._payload: dict[str, Any] | list[dict[str, Any]] | None = None

    def select(self, *_: str) -> "FakeTable":
        self._action = "select"
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self._order = column
        return self

    def insert(self, payload: dict[str, Any] | list[dict[str, Any]]) -> "FakeTable":
        self._action = "insert"
        self._payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> "FakeTable":
        self._action = "update"
        self._payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value: str) -> "FakeTable":
        self._filter = (column, value)
        return self

    def _filter_rows(self) -> list[dict[str, Any]]:
        if not self._filter:
            return list(self._store)
        column, value = self._filter
        return [row for row in self._store if str(row.get(column)) == str(value)]

    def execute(self) -> FakeSupabaseResponse:
        self._db.calls.append(self._action or "")
        if self._db.fail_on == self._action:
            raise APIError({"message": "connection reset", "code": "08006", "hint": None, "details": None})

        if self._action == "select":
            data = [dict(row) for row in self._filter_rows()]
            if self._order:
                data.sort(key=lambda row: row[self._order])
        elif self._action == "insert":
            rows = self._payload if isinstance(self._payload, list) else [self._payload]  # type: ignore[list-item]
            stored = []
            for row in rows:
                record = dict(row)  # type: ignore[arg-type]
                record.setdefault("id", str(uuid4()))
                record.setdefault("created_at", datetime.now(timezone.utc).isoformat())
                self._store.append(record)
                stored.append(dict(record))
            data = stored
        elif self._action == "update":
            data = self._filter_rows()
            updates = self._payload or {}
            if updates.get("status") == "approved" and self._db.enforce_exclusion:  # type: ignore[union-attr]
                for row in data:
                    if any(
                        other is not row and other["status"] == "approved" and _overlaps(row, other)
                        for other in self._store
                    ):
                        raise APIError(
                            {
                                "message": "conflicting key value violates exclusion constraint",
                                "code": "23P01",
                                "hint": None,
                                "details": None,
                            }
                        )
            for row in data:
                row.update(updates)  # type: ignore[arg-type]
            data = [dict(row) for row in data]
        elif self._action == "delete":
            data = self._filter_rows()
            for row in data:
                self._store.remove(row)
        else:
            raise ValueError("Unsupported action for FakeTable.")

        # reset state for the next call
        self._action = None
        self._filter = None
        self._order = None
        self._payload = None
        return FakeSupabaseResponse(data)


class FakeDB:
    """Simplified Supabase client exposing the minimal table(...) API."""

    def __init__(self, enforce_exclusion: bool = True) -> None:
        self.bookings: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self.fail_on: str | None = None
        self.enforce_exclusion = enforce_exclusion

    def table(self, name: str) -> FakeTable:
        if name != "bookings":
            raise ValueError(f"Unknown table {name}")
        return FakeTable(self)

    def add_booking(self, start: str, end: str, status: str = "pending", **overrides: Any) -> str:
        """Seed a row directly, as another client would."""
        row = {
            "id": str(uuid4()),
            "guest_name": "Guest",
            "guest_email": "guest@example.com",
            "guest_count": 2,
            "notes": None,
            "start_date": start,
            "end_date": end,
            "status": status,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        row.update(overrides)
        self.bookings.append(row)
        return row["id"]

    def status_of(self, booking_id: str) -> str | None:
        for row in self.bookings:
            if row["id"] == booking_id:
                return row["status"]
        return None
