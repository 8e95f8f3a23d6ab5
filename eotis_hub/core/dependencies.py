"""
FastAPI dependency injection functions.
"""

from fastapi import Query, Request
from supabase import Client

from eotis_hub.background.now_indicator import NowIndicator
from eotis_hub.core.database import get_supabase_client
from eotis_hub.core.exceptions import StudentNotSelectedError, app_error_to_http


def get_db() -> Client:
    """Dependency: get Supabase client."""
    return get_supabase_client()


def get_student_id(student_id: str = Query("", description="Selected student's id")) -> str:
    """Dependency: the selected student, required by every calendar route.

    Raises:
        HTTPException 400: If no student is selected.
    """
    if not student_id.strip():
        raise app_error_to_http(StudentNotSelectedError())
    return student_id.strip()


def get_now_indicator(request: Request) -> NowIndicator | None:
    """Dependency: the app-wide current-time indicator (None before startup)."""
    return getattr(request.app.state, "now_indicator", None)
