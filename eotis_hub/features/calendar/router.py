"""
Calendar feature: API routes for event management and grid layout.

AppBaseError subclasses raised here (unknown view, missing event) are
rendered by the application-wide handler in main.py.
"""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from eotis_hub.background.now_indicator import NowIndicator
from eotis_hub.config import Settings, get_settings
from eotis_hub.core.dependencies import get_db, get_now_indicator, get_student_id
from eotis_hub.features.calendar.layout import compute_layout, current_time_position, events_for_day
from eotis_hub.features.calendar.models import CalendarEvent, EventGeometry, ViewWindow
from eotis_hub.features.calendar.schemas import (
    EventCreate,
    EventResponse,
    EventUpdate,
    GeometryResponse,
    LayoutResponse,
    NavigationResponse,
    NowPositionResponse,
    ViewWindowResponse,
)
from eotis_hub.features.calendar.service import CalendarService, to_calendar_event
from eotis_hub.features.calendar.window import build_view_window, shift_reference, view_title

router = APIRouter()


def _today(settings: Settings) -> date:
    return datetime.now(settings.tz).date()


def _window(day: date | None, view: str | None, settings: Settings) -> ViewWindow:
    return build_view_window(day or _today(settings), view or settings.CALENDAR_DEFAULT_VIEW)


def _window_response(window: ViewWindow) -> ViewWindowResponse:
    return ViewWindowResponse(
        reference=window.reference,
        view=window.granularity.value,
        days=list(window.days),
        title=view_title(window.reference, window.granularity),
    )


def _event_response(event: CalendarEvent) -> EventResponse:
    return EventResponse(
        id=event.id,
        student_id=event.student_id,
        title=event.title,
        start=event.start,
        end=event.end,
        all_day=event.all_day,
        tutor_name=event.tutor_name,
        cost=event.cost,
        meeting_link=event.meeting_link,
        description=event.description,
        color=event.color,
    )


def _geometry_response(geometry: EventGeometry) -> GeometryResponse:
    return GeometryResponse(
        event_id=geometry.event_id,
        day_index=geometry.day_index,
        all_day=geometry.all_day,
        top_offset=geometry.top_offset,
        height=geometry.height,
        span=geometry.span,
        lane=geometry.lane,
    )


@router.get("/events")
async def list_events(
    date: date | None = None,
    view: str | None = None,
    student_id: str = Depends(get_student_id),
    db: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """List a student's events starting within the visible window."""
    window = _window(date, view, settings)
    service = CalendarService(db, settings.tz)
    events = service.get_window_events(student_id, window)
    return {"data": [_event_response(e).model_dump(mode="json") for e in events]}


@router.post("/events", status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    db: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create a new calendar event."""
    student_id = get_student_id(data.student_id)
    service = CalendarService(db, settings.tz)
    row = service.create_event(
        student_id=student_id,
        title=data.title,
        start=data.start,
        end=data.end,
        all_day=data.all_day,
        tutor_name=data.tutor_name,
        cost=data.cost,
        meeting_link=data.meeting_link,
        description=data.description,
        color=data.color,
    )
    event = to_calendar_event(row, settings.tz)
    return {"data": _event_response(event).model_dump(mode="json")}


@router.put("/events/{event_id}")
async def update_event(
    event_id: str,
    data: EventUpdate,
    student_id: str = Depends(get_student_id),
    db: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Update an existing event. Unknown ids are answered with 404."""
    service = CalendarService(db, settings.tz)
    try:
        row = service.update_event(student_id, event_id, data.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    event = to_calendar_event(row, settings.tz)
    return {"data": _event_response(event).model_dump(mode="json")}


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    student_id: str = Depends(get_student_id),
    db: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Delete an event."""
    service = CalendarService(db, settings.tz)
    event = service.delete_event(student_id, event_id)
    return {"message": f"Event \"{event.get('title') or 'event'}\" has been deleted."}


@router.get("/layout")
async def get_layout(
    date: date | None = None,
    view: str | None = None,
    hour_height: int | None = None,
    student_id: str = Depends(get_student_id),
    db: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
    now_indicator: NowIndicator | None = Depends(get_now_indicator),
):
    """Window, per-event geometry and current-time line for one view."""
    if hour_height is None:
        hour_height = settings.CALENDAR_HOUR_HEIGHT
    if hour_height <= 0:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="hour_height must be positive",
        )

    window = _window(date, view, settings)
    service = CalendarService(db, settings.tz)
    events = service.get_window_events(student_id, window)
    layout = compute_layout(events, window, hour_height)

    if now_indicator is not None and now_indicator.running:
        now = now_indicator.position(window, hour_height)
    else:
        now = current_time_position(window, hour_height, tz=settings.tz)

    response = LayoutResponse(
        window=_window_response(window),
        hour_height=hour_height,
        events=[_event_response(e) for e in events],
        timed=[_geometry_response(g) for g in layout.timed],
        all_day=[_geometry_response(g) for g in layout.all_day],
        now=NowPositionResponse(day_index=now.day_index, top_offset=now.top_offset) if now else None,
    )
    return {"data": response.model_dump(mode="json")}


@router.get("/navigate")
async def navigate(
    direction: str,
    date: date | None = None,
    view: str | None = None,
    settings: Settings = Depends(get_settings),
):
    """Reference date and title after prev / next / today."""
    window = _window(date, view, settings)
    try:
        target = shift_reference(window.reference, window.granularity, direction, today=_today(settings))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    response = NavigationResponse(
        reference=target,
        view=window.granularity.value,
        title=view_title(target, window.granularity),
    )
    return {"data": response.model_dump(mode="json")}


@router.get("/day")
async def list_day_events(
    date: date | None = None,
    student_id: str = Depends(get_student_id),
    db: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Events for one day, earliest first (month view's side list)."""
    window = _window(date, "day", settings)
    service = CalendarService(db, settings.tz)
    events = events_for_day(service.get_window_events(student_id, window), window.reference)
    return {"data": [_event_response(e).model_dump(mode="json") for e in events]}
