"""
Calendar feature: Core value types for the time-grid layout engine.

These are plain frozen dataclasses so the layout code stays pure and
independent of the HTTP schemas in `schemas.py`.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from eotis_hub.core.exceptions import InvalidGranularityError


class Granularity(str, Enum):
    """Calendar zoom level."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"

    @classmethod
    def parse(cls, value: "Granularity | str") -> "Granularity":
        """Accept an enum member or a case-insensitive name ("Week", "day", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidGranularityError(str(value)) from None


@dataclass(frozen=True)
class CalendarEvent:
    """An event as supplied by the event store. Treated as immutable input."""

    id: str
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    tutor_name: str = ""
    cost: float = 0.0
    meeting_link: str | None = None
    description: str | None = None
    color: str | None = None
    student_id: str | None = None


@dataclass(frozen=True)
class ViewWindow:
    """The ordered calendar days visible for one granularity."""

    reference: date
    granularity: Granularity
    days: tuple[date, ...]

    def __len__(self) -> int:
        return len(self.days)

    @property
    def start(self) -> date:
        return self.days[0]

    @property
    def end(self) -> date:
        return self.days[-1]

    def index_of(self, day: date) -> int | None:
        """Column of `day` in this window, or None when it is not visible."""
        if not self.days or day < self.start or day > self.end:
            return None
        return (day - self.start).days


@dataclass(frozen=True)
class EventGeometry:
    """Pixel-space placement of one event.

    Timed events carry `top_offset`/`height`; all-day events carry `span`
    and `lane` instead and leave the vertical fields as None.
    """

    event_id: str
    day_index: int
    all_day: bool = False
    top_offset: float | None = None
    height: float | None = None
    span: int = 1
    lane: int | None = None


@dataclass(frozen=True)
class NowPosition:
    """Where the current-time line is drawn."""

    day_index: int
    top_offset: float


@dataclass(frozen=True)
class Layout:
    """Result of one layout pass over a window."""

    window: ViewWindow
    timed: tuple[EventGeometry, ...] = ()
    all_day: tuple[EventGeometry, ...] = ()
    geometries: tuple[EventGeometry, ...] = field(default=(), repr=False)
