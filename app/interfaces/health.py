"""
Health check router.

Liveness/readiness probe. Reports the version, the timestamp of the
condition snapshot currently in use and whether the refresh scheduler
is running, so a stalled refresh loop shows up in monitoring.
"""

from fastapi import APIRouter, Request

from app.core.config import settings
from app.interfaces.market.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Application status, version and refresh-loop state.",
)
def health_check(request: Request) -> HealthResponse:
    """Return current application health status."""
    state = request.app.state
    facade = getattr(state, "market_facade", None)
    scheduler = getattr(state, "scheduler", None)
    return HealthResponse(
        status="ok" if facade is not None else "starting",
        version=settings.version,
        conditions_at=facade.conditions.timestamp if facade is not None else None,
        scheduler_running=scheduler.is_running if scheduler is not None else False,
    )
