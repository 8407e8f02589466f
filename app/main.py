"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (health, market, realtime)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- Real-time pipeline (query facade, stream manager, refresh scheduler)

No business logic belongs here.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from app.application.market.query_facade import utc_now
from app.core.config import settings
from app.interfaces.health import router as health_router
from app.interfaces.market.dependencies import build_market_facade
from app.interfaces.market.router import router as market_router
from app.interfaces.realtime import router as realtime_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.logging import configure_logging
from app.shared.security.headers import SecurityHeadersMiddleware
from app.shared.security.rate_limiting import limiter, rate_limit_exceeded_handler
from simulator.realtime.scheduler import RefreshScheduler
from simulator.realtime.stream import MarketStreamManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the market runtime on startup and stop the scheduler on shutdown.

    Everything lives on ``app.state``: ``market_facade``,
    ``stream_manager`` and ``scheduler``. The scheduler is always built
    (so on-demand runs work) but only started when realtime is enabled.
    Conditions are sampled with the clock stored on ``app.state.clock``.
    """
    facade = build_market_facade(settings, clock=app.state.clock)
    stream_manager = MarketStreamManager(
        facade,
        send_timeout=settings.subscriber_send_timeout_seconds,
        max_history=settings.stream_max_history,
        max_queue_size=settings.stream_max_queue_size,
    )
    scheduler = RefreshScheduler(
        facade,
        stream_manager=stream_manager,
        loop=asyncio.get_running_loop(),
        refresh_seconds=settings.condition_refresh_seconds,
        broadcast_seconds=settings.broadcast_interval_seconds,
    )

    app.state.market_facade = facade
    app.state.stream_manager = stream_manager
    app.state.scheduler = scheduler

    if settings.realtime_enabled:
        scheduler.start()
    else:
        logger.info("Realtime scheduler disabled; conditions refresh on demand only.")

    yield

    scheduler.stop()


def create_app(clock: Callable[[], datetime] = utc_now) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Args:
        clock: Source of the timestamps market conditions are sampled at.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.clock = clock

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(market_router, prefix="/api/v1")
    app.include_router(realtime_router, prefix="/api/v1")

    return app


app = create_app()
