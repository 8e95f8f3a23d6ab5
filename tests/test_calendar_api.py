"""API tests for the calendar and dashboard routes (Supabase replaced by an in-memory table)."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from eotis_hub.core.dependencies import get_db
from eotis_hub.features.calendar.service import TABLE
from eotis_hub.main import app


def parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@pytest.fixture
def client(fake_db, event_row):
    fake_db.tables[TABLE] = [
        event_row("A", "2025-01-13T09:00:00+00:00", "2025-01-13T10:00:00+00:00", id="a"),
        event_row("B", "2025-01-13T09:30:00+00:00", "2025-01-13T09:45:00+00:00", id="b"),
        event_row("Trip", "2025-01-15T00:00:00+00:00", "2025-01-15T00:00:00+00:00", id="trip", all_day=True),
    ]
    app.dependency_overrides[get_db] = lambda: fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestLayoutRoute:
    def test_week_layout(self, client):
        res = client.get("/api/calendar/layout", params={
            "date": "2025-01-15", "view": "week", "student_id": "student-1",
        })
        assert res.status_code == 200
        data = res.json()["data"]

        assert data["window"]["days"][0] == "2025-01-13"
        assert len(data["window"]["days"]) == 7
        assert data["window"]["title"] == "Jan 13 - 19, 2025"
        assert data["hour_height"] == 60

        timed = {g["event_id"]: g for g in data["timed"]}
        assert (timed["a"]["day_index"], timed["a"]["top_offset"], timed["a"]["height"]) == (0, 540, 60)
        assert (timed["b"]["day_index"], timed["b"]["top_offset"], timed["b"]["height"]) == (0, 570, 15)

        (trip,) = data["all_day"]
        assert trip["day_index"] == 2
        assert trip["top_offset"] is None and trip["height"] is None
        assert data["now"] is None

    def test_custom_hour_height(self, client):
        res = client.get("/api/calendar/layout", params={
            "date": "2025-01-13", "view": "day", "hour_height": 30, "student_id": "student-1",
        })
        timed = {g["event_id"]: g for g in res.json()["data"]["timed"]}
        assert timed["a"]["top_offset"] == 270
        assert timed["a"]["height"] == 30

    def test_invalid_view(self, client):
        res = client.get("/api/calendar/layout", params={
            "date": "2025-01-13", "view": "year", "student_id": "student-1",
        })
        assert res.status_code == 422
        assert res.json()["detail"]["type"] == "InvalidGranularityError"

    def test_non_positive_hour_height(self, client):
        res = client.get("/api/calendar/layout", params={
            "date": "2025-01-13", "hour_height": -5, "student_id": "student-1",
        })
        assert res.status_code == 422

    def test_zero_hour_height_rejected(self, client):
        res = client.get("/api/calendar/layout", params={
            "date": "2025-01-13", "hour_height": 0, "student_id": "student-1",
        })
        assert res.status_code == 422

    def test_student_required(self, client):
        res = client.get("/api/calendar/layout", params={"date": "2025-01-13"})
        assert res.status_code == 400
        assert res.json()["detail"]["error"] == "A student must be selected."


class TestEventRoutes:
    def test_list_events(self, client):
        res = client.get("/api/calendar/events", params={
            "date": "2025-01-13", "view": "day", "student_id": "student-1",
        })
        assert [e["id"] for e in res.json()["data"]] == ["a", "b"]

    def test_create_event_defaults_end(self, client):
        res = client.post("/api/calendar/events", json={
            "student_id": "student-1",
            "title": "Speech therapy",
            "start": "2025-01-14T11:00:00Z",
            "tutor_name": "Mr Lee",
        })
        assert res.status_code == 201
        event = res.json()["data"]
        assert parse(event["end"]) - parse(event["start"]) == timedelta(hours=1)
        assert event["tutor_name"] == "Mr Lee"

    def test_create_rejects_end_before_start(self, client):
        res = client.post("/api/calendar/events", json={
            "student_id": "student-1",
            "title": "Backwards",
            "start": "2025-01-14T11:00:00Z",
            "end": "2025-01-14T10:00:00Z",
        })
        assert res.status_code == 422

    def test_create_naive_end_read_in_display_timezone(self, client):
        res = client.post("/api/calendar/events", json={
            "student_id": "student-1",
            "title": "Mixed offsets",
            "start": "2025-01-13T09:00:00+00:00",
            "end": "2025-01-13T10:00:00",
        })
        assert res.status_code == 201
        event = res.json()["data"]
        assert parse(event["end"]) - parse(event["start"]) == timedelta(hours=1)

    def test_create_naive_end_before_aware_start(self, client):
        res = client.post("/api/calendar/events", json={
            "student_id": "student-1",
            "title": "Mixed offsets",
            "start": "2025-01-13T09:00:00+00:00",
            "end": "2025-01-13T08:00:00",
        })
        assert res.status_code == 422

    def test_update_mixed_offsets(self, client):
        res = client.put("/api/calendar/events/a", params={"student_id": "student-1"}, json={
            "start": "2025-01-13T11:00:00+00:00",
            "end": "2025-01-13T10:00:00",
        })
        assert res.status_code == 422

        res = client.put("/api/calendar/events/a", params={"student_id": "student-1"}, json={
            "start": "2025-01-13T08:00:00",
        })
        assert res.status_code == 200
        assert parse(res.json()["data"]["start"]) == datetime(2025, 1, 13, 8, 0, tzinfo=timezone.utc)

    def test_create_requires_student(self, client):
        res = client.post("/api/calendar/events", json={
            "student_id": "",
            "title": "Orphan",
            "start": "2025-01-14T11:00:00Z",
        })
        assert res.status_code == 400

    def test_update_event(self, client):
        res = client.put("/api/calendar/events/a", params={"student_id": "student-1"}, json={
            "title": "Maths",
            "end": "2025-01-13T11:00:00Z",
        })
        assert res.status_code == 200
        event = res.json()["data"]
        assert event["title"] == "Maths"
        assert parse(event["end"]) == datetime(2025, 1, 13, 11, 0, tzinfo=timezone.utc)

    def test_update_inverting_interval(self, client):
        res = client.put("/api/calendar/events/a", params={"student_id": "student-1"}, json={
            "start": "2025-01-13T12:00:00Z",
        })
        assert res.status_code == 422

    def test_update_missing_event(self, client):
        res = client.put("/api/calendar/events/zzz", params={"student_id": "student-1"}, json={"title": "x"})
        assert res.status_code == 404
        assert res.json()["detail"]["type"] == "EventNotFoundError"

    def test_delete_event(self, client):
        res = client.delete("/api/calendar/events/b", params={"student_id": "student-1"})
        assert res.status_code == 200
        assert res.json()["message"] == 'Event "B" has been deleted.'

        res = client.delete("/api/calendar/events/b", params={"student_id": "student-1"})
        assert res.status_code == 404

    def test_day_list_sorted(self, client):
        res = client.get("/api/calendar/day", params={"date": "2025-01-13", "student_id": "student-1"})
        assert [e["title"] for e in res.json()["data"]] == ["A", "B"]


class TestNavigateRoute:
    def test_next_month(self, client):
        res = client.get("/api/calendar/navigate", params={
            "direction": "next", "date": "2025-01-31", "view": "month",
        })
        data = res.json()["data"]
        assert data == {"reference": "2025-02-28", "view": "month", "title": "February 2025"}

    def test_prev_week(self, client):
        res = client.get("/api/calendar/navigate", params={
            "direction": "prev", "date": "2025-01-15", "view": "week",
        })
        assert res.json()["data"]["title"] == "Jan 6 - 12, 2025"

    def test_unknown_direction(self, client):
        res = client.get("/api/calendar/navigate", params={"direction": "up", "date": "2025-01-15"})
        assert res.status_code == 422


class TestDashboardRoute:
    def test_summary_splits_lessons_and_meetings(self, client, fake_db, event_row):
        tomorrow = datetime.now(timezone.utc).replace(hour=10, minute=0, second=0, microsecond=0) + timedelta(days=1)
        fake_db.tables[TABLE].extend([
            event_row("Phonics", tomorrow.isoformat(), (tomorrow + timedelta(hours=1)).isoformat(),
                      tutor_name="Ms Reed"),
            event_row("EHCP review", tomorrow.isoformat(), (tomorrow + timedelta(hours=1)).isoformat()),
        ])
        res = client.get("/api/dashboard/summary", params={"student_id": "student-1"})
        assert res.status_code == 200
        data = res.json()["data"]
        assert [lesson["subject"] for lesson in data["lessons"]] == ["Phonics"]
        assert data["lessons"][0]["time"] == "10:00 AM - 11:00 AM"
        assert [meeting["title"] for meeting in data["meetings"]] == ["EHCP review"]

    def test_zero_days_ahead_is_not_replaced_by_default(self, client, fake_db, event_row):
        tomorrow = datetime.now(timezone.utc) + timedelta(days=1)
        fake_db.tables[TABLE].append(
            event_row("EHCP review", tomorrow.isoformat(), (tomorrow + timedelta(hours=1)).isoformat()),
        )
        res = client.get("/api/dashboard/summary", params={"student_id": "student-1", "days_ahead": 0})
        assert res.status_code == 200
        assert res.json()["data"] == {"lessons": [], "meetings": []}

    def test_negative_days_ahead_rejected(self, client):
        res = client.get("/api/dashboard/summary", params={"student_id": "student-1", "days_ahead": -1})
        assert res.status_code == 422


class TestLifespan:
    def test_now_indicator_runs_with_app(self, fake_db):
        app.dependency_overrides[get_db] = lambda: fake_db
        try:
            with TestClient(app) as client:
                indicator = app.state.now_indicator
                assert indicator.running

                res = client.get("/api/calendar/layout", params={"view": "week", "student_id": "student-1"})
                assert res.status_code == 200
                assert res.json()["data"]["now"] is not None

                assert client.get("/health").json()["status"] == "healthy"
            assert not indicator.running
        finally:
            app.dependency_overrides.clear()
