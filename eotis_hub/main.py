"""
EOTIS Hub - FastAPI Application Entry Point.

Feature-based modular architecture:
  Each feature in eotis_hub/features/ has its own router and service.
  The calendar layout engine itself lives in pure modules
  (timegrid, window, layout) with no I/O.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eotis_hub.background.scheduler import init_scheduler, shutdown_scheduler
from eotis_hub.config import get_settings
from eotis_hub.core.exceptions import AppBaseError

# ── Feature Routers ──────────────────────────────────────
from eotis_hub.features.calendar.router import router as calendar_router
from eotis_hub.features.dashboard.router import router as dashboard_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup & shutdown."""
    settings = get_settings()
    print(f"🚀 {settings.APP_NAME} v{settings.APP_VERSION} starting...")
    print(f"🔗 Supabase: {settings.SUPABASE_URL[:40]}...")
    print(f"🕒 Display timezone: {settings.TIMEZONE}")
    app.state.now_indicator = init_scheduler()
    yield
    shutdown_scheduler(app.state.now_indicator)
    print("👋 Shutting down...")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="EOTIS Hub - special-education support calendar",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error Handling ───────────────────────────────────
    @app.exception_handler(AppBaseError)
    async def app_error_handler(request: Request, exc: AppBaseError):
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})

    # ── Register Feature Routers ─────────────────────────
    app.include_router(calendar_router, prefix="/api/calendar", tags=["Calendar"])
    app.include_router(dashboard_router, prefix="/api/dashboard", tags=["Dashboard"])

    # ── Health Check ─────────────────────────────────────
    @app.get("/health", tags=["System"])
    async def health_check():
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    return app


app = create_app()
