"""
Dashboard feature: API routes.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from eotis_hub.config import Settings, get_settings
from eotis_hub.core.dependencies import get_db, get_student_id
from eotis_hub.features.calendar.service import CalendarService
from eotis_hub.features.dashboard.service import upcoming_summary

router = APIRouter()


@router.get("/summary")
async def get_summary(
    days_ahead: int | None = None,
    student_id: str = Depends(get_student_id),
    db: Client = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Upcoming lessons and meetings for the selected student."""
    if days_ahead is None:
        days_ahead = settings.DASHBOARD_DAYS_AHEAD
    if days_ahead < 0:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="days_ahead must not be negative",
        )
    now = datetime.now(settings.tz)
    events = CalendarService(db, settings.tz).get_upcoming_events(student_id, now, days_ahead)
    summary = upcoming_summary(events, now, days_ahead)
    return {"data": summary.model_dump()}
