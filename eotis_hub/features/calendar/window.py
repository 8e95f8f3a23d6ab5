"""
Calendar feature: View window construction and navigation.

Weeks start on Monday. Every function here is a pure function of its
arguments; "today" is only read when the caller does not supply it.
"""

import calendar
from datetime import date, datetime, timedelta

from eotis_hub.features.calendar.models import Granularity, ViewWindow

DAYS_PER_WEEK = 7


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def start_of_week(day: date | datetime) -> date:
    """Monday on or before `day`."""
    d = _as_date(day)
    return d - timedelta(days=d.weekday())


def end_of_week(day: date | datetime) -> date:
    """Sunday on or after `day`."""
    return start_of_week(day) + timedelta(days=DAYS_PER_WEEK - 1)


def _days_between(first: date, last: date) -> tuple[date, ...]:
    return tuple(first + timedelta(days=i) for i in range((last - first).days + 1))


def month_grid(day: date | datetime) -> tuple[date, ...]:
    """All days of the month grid containing `day`, padded to whole weeks."""
    d = _as_date(day)
    first = d.replace(day=1)
    last = d.replace(day=calendar.monthrange(d.year, d.month)[1])
    return _days_between(start_of_week(first), end_of_week(last))


def build_view_window(reference: date | datetime, granularity: Granularity | str) -> ViewWindow:
    """Visible days for `granularity` around `reference`.

    Raises:
        InvalidGranularityError: If granularity is not day, week or month.
    """
    g = Granularity.parse(granularity)
    ref = _as_date(reference)

    if g is Granularity.DAY:
        days = (ref,)
    elif g is Granularity.WEEK:
        monday = start_of_week(ref)
        days = tuple(monday + timedelta(days=i) for i in range(DAYS_PER_WEEK))
    else:
        days = month_grid(ref)

    return ViewWindow(reference=ref, granularity=g, days=days)


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def shift_reference(
    reference: date | datetime,
    granularity: Granularity | str,
    direction: str,
    today: date | None = None,
) -> date:
    """Reference date after pressing prev / next / today in the toolbar."""
    g = Granularity.parse(granularity)
    ref = _as_date(reference)

    match direction:
        case "today":
            return today or date.today()
        case "prev" | "next":
            step = -1 if direction == "prev" else 1
        case _:
            raise ValueError(f"Unknown direction '{direction}'. Supported: prev, next, today")

    if g is Granularity.DAY:
        return ref + timedelta(days=step)
    if g is Granularity.WEEK:
        return ref + timedelta(weeks=step)
    return add_months(ref, step)


def view_title(reference: date | datetime, granularity: Granularity | str) -> str:
    """Toolbar heading, e.g. "Oct 12 - 18, 2026" for a week."""
    g = Granularity.parse(granularity)
    ref = _as_date(reference)

    if g is Granularity.MONTH:
        return f"{ref:%B} {ref.year}"
    if g is Granularity.WEEK:
        start = start_of_week(ref)
        end = start + timedelta(days=DAYS_PER_WEEK - 1)
        return f"{start:%b} {start.day} - {end.day}, {end.year}"
    return f"{ref:%A}, {ref:%B} {ref.day}, {ref.year}"
