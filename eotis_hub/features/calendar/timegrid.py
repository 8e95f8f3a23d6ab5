"""
Calendar feature: Interval-to-pixel mapping for the 24-hour time grid.

A column is `24 * hour_height` pixels tall. With the default
`hour_height = 60` one pixel is one minute.
"""

import logging
from datetime import datetime

logger = logging.getLogger(__name__)

HOUR_HEIGHT = 60
MINUTES_PER_DAY = 24 * 60

# Height given to an event whose end is not after its start.
MIN_EVENT_HEIGHT = 20.0


def _check_hour_height(hour_height: float) -> None:
    if hour_height <= 0:
        raise ValueError(f"hour_height must be positive, got {hour_height!r}")


def minutes_since_midnight(dt: datetime) -> float:
    """Wall-clock minutes since 00:00 of `dt`'s own day, seconds included."""
    return dt.hour * 60 + dt.minute + (dt.second + dt.microsecond / 1_000_000) / 60


def duration_minutes(start: datetime, end: datetime) -> float:
    """Exact minutes from start to end. Negative if end < start."""
    return (end - start).total_seconds() / 60


def is_degenerate(start: datetime, end: datetime) -> bool:
    """True when the interval is empty or reversed."""
    return end <= start


def grid_height(hour_height: float = HOUR_HEIGHT) -> float:
    """Total pixel height of one day column."""
    return 24 * hour_height


def top_offset(start: datetime, hour_height: float = HOUR_HEIGHT) -> float:
    """Vertical offset of a point in time within its day column."""
    _check_hour_height(hour_height)
    return minutes_since_midnight(start) * hour_height / 60


def event_height(
    start: datetime,
    end: datetime,
    hour_height: float = HOUR_HEIGHT,
    clip_to_day: bool = False,
) -> float:
    """Pixel height of the block for [start, end).

    Degenerate intervals (end <= start) always get MIN_EVENT_HEIGHT so the
    event stays visible; `map_interval` moves their top up instead of
    cutting them at midnight. With `clip_to_day` a positive block is cut at
    the bottom of the grid instead of running past midnight.
    """
    _check_hour_height(hour_height)
    if is_degenerate(start, end):
        logger.debug(f"Degenerate interval {start.isoformat()} -> {end.isoformat()}, clamping height")
        return MIN_EVENT_HEIGHT

    height = duration_minutes(start, end) * hour_height / 60
    if clip_to_day:
        room = grid_height(hour_height) - top_offset(start, hour_height)
        height = min(height, room)
    return height


def map_interval(
    start: datetime,
    end: datetime,
    hour_height: float = HOUR_HEIGHT,
    clip_to_day: bool = False,
) -> tuple[float, float]:
    """Return (top_offset, height) for an event interval.

    A degenerate event too close to midnight for its minimum height is
    pinned so that it ends at the bottom of the grid.
    """
    top = top_offset(start, hour_height)
    height = event_height(start, end, hour_height, clip_to_day=clip_to_day)
    if is_degenerate(start, end):
        top = max(0.0, min(top, grid_height(hour_height) - height))
    return top, height
