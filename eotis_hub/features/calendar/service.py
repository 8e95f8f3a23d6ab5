"""
Calendar feature: Service layer for calendar event management.

Thin passthrough to the Supabase `calendar_events` table. Rows are
converted to `CalendarEvent` values in the display timezone before they
reach the layout engine.
"""

import logging
from datetime import date, datetime, time, timedelta, tzinfo

from supabase import Client

from eotis_hub.core.exceptions import EventNotFoundError, StudentNotSelectedError
from eotis_hub.features.calendar.models import CalendarEvent, ViewWindow

logger = logging.getLogger(__name__)

TABLE = "calendar_events"
DEFAULT_EVENT_DURATION = timedelta(hours=1)

# API field name -> table column
_COLUMNS = {
    "title": "title",
    "start": "start_time",
    "end": "end_time",
    "all_day": "all_day",
    "tutor_name": "tutor_name",
    "cost": "cost",
    "meeting_link": "meeting_link",
    "description": "description",
    "color": "color",
}


def parse_timestamp(value: str | datetime, tz: tzinfo) -> datetime:
    """Parse an ISO timestamp and express it in `tz`. Naive values are taken as `tz` local time."""
    dt = value if isinstance(value, datetime) else datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def to_calendar_event(row: dict, tz: tzinfo) -> CalendarEvent:
    """Convert a `calendar_events` row to a CalendarEvent."""
    start = parse_timestamp(row["start_time"], tz)
    end = parse_timestamp(row["end_time"], tz) if row.get("end_time") else start
    return CalendarEvent(
        id=str(row["id"]),
        title=row.get("title") or "",
        start=start,
        end=end,
        all_day=bool(row.get("all_day")),
        tutor_name=row.get("tutor_name") or "",
        cost=float(row.get("cost") or 0),
        meeting_link=row.get("meeting_link"),
        description=row.get("description"),
        color=row.get("color"),
        student_id=row.get("student_id"),
    )


def _to_column_values(data: dict) -> dict:
    values = {}
    for field, column in _COLUMNS.items():
        if field not in data:
            continue
        value = data[field]
        values[column] = value.isoformat() if isinstance(value, datetime) else value
    return values


def _require_student(student_id: str | None) -> str:
    if not student_id or not student_id.strip():
        raise StudentNotSelectedError()
    return student_id.strip()


class CalendarService:
    """CRUD operations for a student's calendar events with date range queries."""

    def __init__(self, db: Client, tz: tzinfo):
        self.db = db
        self.tz = tz

    def _day_start(self, day: date) -> str:
        return datetime.combine(day, time.min, tzinfo=self.tz).isoformat()

    def get_events(self, student_id: str, start_day: date, end_day: date) -> list[dict]:
        """Rows for a student whose start falls on any day in [start_day, end_day]."""
        student_id = _require_student(student_id)
        result = (
            self.db.table(TABLE)
            .select("*")
            .eq("student_id", student_id)
            .gte("start_time", self._day_start(start_day))
            .lt("start_time", self._day_start(end_day + timedelta(days=1)))
            .order("start_time", desc=False)
            .execute()
        )
        return result.data or []

    def get_window_events(self, student_id: str, window: ViewWindow) -> list[CalendarEvent]:
        """Events starting inside the window, as layout input."""
        rows = self.get_events(student_id, window.start, window.end)
        return [to_calendar_event(row, self.tz) for row in rows]

    def get_upcoming_events(self, student_id: str, now: datetime, days_ahead: int) -> list[CalendarEvent]:
        """Events starting from today through `days_ahead` days later."""
        today = now.astimezone(self.tz).date()
        rows = self.get_events(student_id, today, today + timedelta(days=days_ahead))
        return [to_calendar_event(row, self.tz) for row in rows]

    def get_event_by_id(self, student_id: str, event_id: str) -> dict | None:
        """Get a single event by ID."""
        student_id = _require_student(student_id)
        result = (
            self.db.table(TABLE)
            .select("*")
            .eq("id", event_id)
            .eq("student_id", student_id)
            .execute()
        )
        return result.data[0] if result.data else None

    def create_event(
        self,
        student_id: str,
        title: str,
        start: datetime,
        end: datetime | None = None,
        all_day: bool = False,
        tutor_name: str = "",
        cost: float = 0.0,
        meeting_link: str | None = None,
        description: str | None = None,
        color: str | None = None,
    ) -> dict:
        """Create a new event. Without `end` the event lasts one hour."""
        student_id = _require_student(student_id)
        insert_data = _to_column_values({
            "title": title,
            "start": start,
            "end": end or start + DEFAULT_EVENT_DURATION,
            "all_day": all_day,
            "tutor_name": tutor_name,
            "cost": cost,
            "meeting_link": meeting_link,
            "description": description,
            "color": color,
        })
        insert_data["student_id"] = student_id
        result = self.db.table(TABLE).insert(insert_data).execute()
        logger.info(f"Created calendar event '{title}' for student {student_id}")
        return result.data[0]

    def update_event(self, student_id: str, event_id: str, update_data: dict) -> dict:
        """Update an existing event. None values are left unchanged.

        Raises:
            EventNotFoundError: If the event does not exist for this student.
            ValueError: If the change would put the end before the start.
        """
        student_id = _require_student(student_id)
        changes = {k: v for k, v in update_data.items() if v is not None}
        if ("start" in changes) != ("end" in changes):
            existing = self.get_event_by_id(student_id, event_id)
            if existing is None:
                raise EventNotFoundError(event_id)
            current = to_calendar_event(existing, self.tz)
            start = parse_timestamp(changes.get("start", current.start), self.tz)
            end = parse_timestamp(changes.get("end", current.end), self.tz)
            if end < start:
                raise ValueError("end must not be before start")

        clean_data = _to_column_values(changes)
        if not clean_data:
            existing = self.get_event_by_id(student_id, event_id)
            if existing is None:
                raise EventNotFoundError(event_id)
            return existing

        result = (
            self.db.table(TABLE)
            .update(clean_data)
            .eq("id", event_id)
            .eq("student_id", student_id)
            .execute()
        )
        if not result.data:
            raise EventNotFoundError(event_id)
        return result.data[0]

    def delete_event(self, student_id: str, event_id: str) -> dict:
        """Hard delete an event and return the deleted row.

        Raises:
            EventNotFoundError: If the event does not exist for this student.
        """
        event = self.get_event_by_id(student_id, event_id)
        if event is None:
            raise EventNotFoundError(event_id)

        (
            self.db.table(TABLE)
            .delete()
            .eq("id", event_id)
            .eq("student_id", student_id.strip())
            .execute()
        )
        logger.info(f"Deleted calendar event '{event.get('title')}' ({event_id})")
        return event
