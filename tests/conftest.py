"""
Shared fixtures: test settings and an in-memory stand-in for the Supabase
table API (table().select().eq()...execute()).
"""

import os
import uuid
from datetime import datetime

import pytest

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("TIMEZONE", "UTC")


class FakeResult:
    def __init__(self, data):
        self.data = data


def _comparable(value):
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


class FakeQuery:
    def __init__(self, rows: list[dict]):
        self.rows = rows
        self.action = "select"
        self.payload = None
        self.filters = []
        self.order_by = None

    def select(self, *columns):
        self.action = "select"
        return self

    def insert(self, data):
        self.action, self.payload = "insert", data
        return self

    def update(self, data):
        self.action, self.payload = "update", data
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: _comparable(row.get(column)) >= _comparable(value))
        return self

    def lt(self, column, value):
        self.filters.append(lambda row: _comparable(row.get(column)) < _comparable(value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def _matches(self, row):
        return all(check(row) for check in self.filters)

    def execute(self):
        if self.action == "insert":
            row = {"id": str(uuid.uuid4()), **self.payload}
            self.rows.append(row)
            return FakeResult([dict(row)])

        matched = [row for row in self.rows if self._matches(row)]
        if self.action == "update":
            for row in matched:
                row.update(self.payload)
        elif self.action == "delete":
            for row in matched:
                self.rows.remove(row)

        if self.order_by:
            column, desc = self.order_by
            matched.sort(key=lambda row: _comparable(row.get(column)), reverse=desc)
        return FakeResult([dict(row) for row in matched])


class FakeSupabase:
    def __init__(self):
        self.tables: dict[str, list[dict]] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, []))


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def event_row():
    """Build a `calendar_events` row."""
    def _row(title, start, end, student_id="student-1", **extra):
        return {
            "id": extra.pop("id", str(uuid.uuid4())),
            "student_id": student_id,
            "title": title,
            "start_time": start,
            "end_time": end,
            "all_day": extra.pop("all_day", False),
            "tutor_name": extra.pop("tutor_name", ""),
            "cost": extra.pop("cost", 0),
            **extra,
        }
    return _row
