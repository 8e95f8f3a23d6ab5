"""
Database connection: the Supabase client behind the calendar event store.
"""

import logging
from functools import lru_cache

from supabase import Client, create_client

from eotis_hub.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client() -> Client:
    """Shared Supabase client for the `calendar_events` table (created once).

    Uses the anon key; rows are always filtered by `student_id` in queries.
    """
    settings = get_settings()
    logger.info(f"🔗 Connecting to Supabase at {settings.SUPABASE_URL[:40]}")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
