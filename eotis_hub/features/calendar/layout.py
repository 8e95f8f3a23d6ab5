"""
Calendar feature: Time-grid layout engine.

Places events into the columns of a ViewWindow:
  - every event is anchored to the day of its `start` (never its `end`),
  - timed events get a vertical offset/height on the 24-hour grid,
  - all-day events go to a separate lane with a column span.

Overlapping timed events are allowed to overlap; no collision
resolution is done here.
"""

from datetime import date, datetime, tzinfo
from typing import Iterable

from eotis_hub.features.calendar.models import (
    CalendarEvent,
    EventGeometry,
    Granularity,
    Layout,
    NowPosition,
    ViewWindow,
)
from eotis_hub.features.calendar.timegrid import HOUR_HEIGHT, map_interval, top_offset


def is_same_day(dt: datetime, day: date) -> bool:
    return dt.date() == day


def day_index_for(event: CalendarEvent, window: ViewWindow) -> int | None:
    """Column of the event's start day, or None when it starts outside the window."""
    return window.index_of(event.start.date())


def _all_day_span(event: CalendarEvent, window: ViewWindow, day_index: int) -> int:
    last = min(event.end.date(), window.end)
    last_index = window.index_of(last)
    if last_index is None or last_index < day_index:
        return 1
    return last_index - day_index + 1


def compute_layout(
    events: Iterable[CalendarEvent],
    window: ViewWindow,
    hour_height: float = HOUR_HEIGHT,
) -> Layout:
    """Compute geometry for every event visible in `window`.

    Events starting outside the window are left out. Output keeps the
    input order. Day windows clip heights at midnight; week and month
    windows do not.
    """
    clip_to_day = window.granularity is Granularity.DAY

    timed: list[EventGeometry] = []
    all_day: list[EventGeometry] = []
    ordered: list[EventGeometry] = []

    for event in events:
        day_index = day_index_for(event, window)
        if day_index is None:
            continue

        if event.all_day:
            geometry = EventGeometry(
                event_id=event.id,
                day_index=day_index,
                all_day=True,
                span=_all_day_span(event, window, day_index),
                lane=len(all_day),
            )
            all_day.append(geometry)
        else:
            top, height = map_interval(event.start, event.end, hour_height, clip_to_day=clip_to_day)
            geometry = EventGeometry(
                event_id=event.id,
                day_index=day_index,
                top_offset=top,
                height=height,
            )
            timed.append(geometry)
        ordered.append(geometry)

    return Layout(
        window=window,
        timed=tuple(timed),
        all_day=tuple(all_day),
        geometries=tuple(ordered),
    )


def current_time_position(
    window: ViewWindow,
    hour_height: float = HOUR_HEIGHT,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> NowPosition | None:
    """Position of the "now" line, or None when today is not in the window.

    `now` must be expressed in the same timezone the events were bucketed
    in. When omitted it is read from the clock in `tz`; with no `tz` that is
    the host's local wall-clock time.
    """
    now = now or datetime.now(tz)
    day_index = window.index_of(now.date())
    if day_index is None:
        return None
    return NowPosition(day_index=day_index, top_offset=top_offset(now, hour_height))


def events_for_day(events: Iterable[CalendarEvent], day: date) -> list[CalendarEvent]:
    """Events starting on `day`, earliest first (month view's daily list)."""
    return sorted(
        (event for event in events if is_same_day(event.start, day)),
        key=lambda event: event.start,
    )
