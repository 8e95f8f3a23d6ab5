"""
Calendar feature: Schemas for request/response models.

Naive `start`/`end` values in requests are read as local times in the
configured display timezone, so stored timestamps are always offset-aware.
"""

from datetime import date, datetime

from pydantic import BaseModel, field_validator, model_validator

from eotis_hub.config import get_settings


def _localize(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=get_settings().tz)
    return value


class EventCreate(BaseModel):
    """Request to create a new calendar event."""
    student_id: str
    title: str
    start: datetime
    end: datetime | None = None  # defaults to start + 1 hour
    all_day: bool = False
    tutor_name: str = ""  # non-empty = lesson, empty = meeting
    cost: float = 0.0
    meeting_link: str | None = None
    description: str | None = None
    color: str | None = None

    @field_validator("start", "end")
    @classmethod
    def localize_times(cls, value: datetime | None) -> datetime | None:
        return _localize(value)

    @model_validator(mode="after")
    def check_interval(self):
        if self.end is not None and self.end < self.start:
            raise ValueError("end must not be before start")
        return self


class EventUpdate(BaseModel):
    """Request to update an existing event."""
    title: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    all_day: bool | None = None
    tutor_name: str | None = None
    cost: float | None = None
    meeting_link: str | None = None
    description: str | None = None
    color: str | None = None

    @field_validator("start", "end")
    @classmethod
    def localize_times(cls, value: datetime | None) -> datetime | None:
        return _localize(value)

    @model_validator(mode="after")
    def check_interval(self):
        if self.start is not None and self.end is not None and self.end < self.start:
            raise ValueError("end must not be before start")
        return self


class EventResponse(BaseModel):
    """Response model for a calendar event."""
    id: str
    student_id: str | None = None
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    tutor_name: str = ""
    cost: float = 0.0
    meeting_link: str | None = None
    description: str | None = None
    color: str | None = None


class ViewWindowResponse(BaseModel):
    """Visible days for the requested view."""
    reference: date
    view: str
    days: list[date]
    title: str


class GeometryResponse(BaseModel):
    """Placement of one event on the grid."""
    event_id: str
    day_index: int
    all_day: bool = False
    top_offset: float | None = None  # timed events only
    height: float | None = None  # timed events only
    span: int = 1  # all-day events only
    lane: int | None = None  # all-day events only


class NowPositionResponse(BaseModel):
    day_index: int
    top_offset: float


class LayoutResponse(BaseModel):
    """Everything a client needs to draw one calendar view."""
    window: ViewWindowResponse
    hour_height: int
    events: list[EventResponse]
    timed: list[GeometryResponse]
    all_day: list[GeometryResponse]
    now: NowPositionResponse | None = None


class NavigationResponse(BaseModel):
    """New reference date after prev / next / today."""
    reference: date
    view: str
    title: str
