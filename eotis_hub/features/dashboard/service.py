"""
Dashboard feature: Upcoming lessons and meetings derived from calendar events.

An event with a tutor is a lesson; anything else is a meeting.
"""

from datetime import datetime, timedelta
from typing import Iterable

from pydantic import BaseModel

from eotis_hub.features.calendar.models import CalendarEvent


class UpcomingLesson(BaseModel):
    id: str
    subject: str
    tutor: str
    time: str  # e.g. "10:00 AM - 11:00 AM"
    date: str  # e.g. "2024-07-28"
    meeting_link: str | None = None


class ScheduledMeeting(BaseModel):
    id: str
    title: str
    time: str  # e.g. "2:00 PM"
    date: str
    meeting_link: str | None = None


class DashboardSummary(BaseModel):
    lessons: list[UpcomingLesson]
    meetings: list[ScheduledMeeting]


def classify_event(event: CalendarEvent) -> str:
    """'lesson' when the event has a tutor, otherwise 'meeting'."""
    return "lesson" if event.tutor_name.strip() else "meeting"


def format_clock(dt: datetime) -> str:
    """12-hour clock without a leading zero, e.g. '9:05 AM'."""
    return f"{dt:%I:%M %p}".lstrip("0")


def upcoming_summary(
    events: Iterable[CalendarEvent],
    now: datetime,
    days_ahead: int = 7,
) -> DashboardSummary:
    """Split events starting in [now, now + days_ahead) into lessons and meetings."""
    horizon = now + timedelta(days=days_ahead)
    lessons: list[UpcomingLesson] = []
    meetings: list[ScheduledMeeting] = []

    for event in sorted(events, key=lambda e: e.start):
        if not now <= event.start < horizon:
            continue
        day = event.start.date().isoformat()
        if classify_event(event) == "lesson":
            lessons.append(UpcomingLesson(
                id=event.id,
                subject=event.title,
                tutor=event.tutor_name.strip(),
                time=f"{format_clock(event.start)} - {format_clock(event.end)}",
                date=day,
                meeting_link=event.meeting_link,
            ))
        else:
            meetings.append(ScheduledMeeting(
                id=event.id,
                title=event.title,
                time=format_clock(event.start),
                date=day,
                meeting_link=event.meeting_link,
            ))

    return DashboardSummary(lessons=lessons, meetings=meetings)
