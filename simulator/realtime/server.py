"""
Standalone lightweight FastAPI server for real-time market streaming.

Creates a minimal FastAPI app with ONLY the realtime endpoints
(WebSocket, SSE, scheduler control, stream status) plus a health check,
mounted at the root instead of under ``/api/v1``. No rate limiting or
security middleware; meant for local dashboards:

    python -m simulator stream --port 8000

It shares the application lifespan, so the facade, stream manager and
refresh scheduler are built exactly as in the full app.
"""

from datetime import datetime
from typing import Callable

from fastapi import FastAPI

from app.application.market.query_facade import utc_now
from app.core.config import settings
from app.interfaces.health import router as health_router
from app.interfaces.realtime import router as realtime_router
from app.main import lifespan
from app.shared.errors.handlers import register_error_handlers


def create_standalone_app(clock: Callable[[], datetime] = utc_now) -> FastAPI:
    """Create a lightweight FastAPI app for real-time streaming only.

    Returns:
        A FastAPI app with WebSocket, SSE, control and health endpoints.
    """
    app = FastAPI(
        title=f"{settings.project_name} (stream)",
        version=settings.version,
        description="WebSocket & SSE server for live market updates",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.clock = clock
    register_error_handlers(app)
    app.include_router(realtime_router)
    app.include_router(health_router)
    return app
