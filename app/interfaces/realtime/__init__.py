"""
FastAPI router for real-time market streaming.

Provides:
- WebSocket endpoint for live market updates and on-demand requests
- SSE (Server-Sent Events) endpoint for HTTP-only clients
- Scheduler status / control endpoints
- Stream status endpoint

The stream manager, scheduler and facade are built by the application
lifespan and read from ``app.state``.
"""

import logging

from fastapi import APIRouter, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import StreamingResponse

from app.interfaces.market.schemas import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/realtime", tags=["realtime"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


# ------------------------------------------------------------------
# WebSocket endpoint
# ------------------------------------------------------------------


@router.websocket("/ws/market")
async def ws_market(websocket: WebSocket) -> None:
    """WebSocket endpoint for live market streaming.

    Protocol (JSON):
        ← {"event": "connection-status", "data": {"status": "connected", ...}}
        ← {"event": "real-time-update", "data": {"type": "market-update", ...}}

        → {"action": "request-tariff-data", "product": "Electronics",
           "fromCountry": "Germany", "toCountry": "France"}
        ← {"event": "tariff-data-update", "data": {...}}

        → {"action": "ping"}
        ← {"event": "pong", ...}
    """
    manager = websocket.app.state.stream_manager
    await manager.connect(websocket)

    try:
        while True:
            raw = await websocket.receive_text()
            await manager.handle_client_message(websocket, raw)
    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception:
        logger.warning("WebSocket session ended with an error.", exc_info=True)
        manager.disconnect(websocket)


# ------------------------------------------------------------------
# SSE endpoint
# ------------------------------------------------------------------


@router.get(
    "/stream/market",
    summary="Server-Sent Events market stream",
    description="HTTP streaming endpoint for clients that can't use WebSocket.",
)
async def sse_market(request: Request) -> StreamingResponse:
    """SSE endpoint: streams market updates as text/event-stream."""
    manager = request.app.state.stream_manager
    return StreamingResponse(
        manager.sse_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


# ------------------------------------------------------------------
# Scheduler control endpoints
# ------------------------------------------------------------------


@router.get(
    "/scheduler/status",
    summary="Get scheduler status",
    description="Return the refresh scheduler state, jobs and recent task history.",
)
def scheduler_status(request: Request) -> dict:
    """Return scheduler status and recent task history."""
    return request.app.state.scheduler.get_status()


@router.post(
    "/scheduler/run/{task_name}",
    responses={404: {"model": ErrorResponse}},
    summary="Trigger a scheduler task",
    description="Run a named task immediately: refresh_conditions, broadcast_market_update.",
)
def scheduler_run_task(task_name: str, request: Request) -> dict:
    """Trigger a scheduler task on demand.

    Raises:
        UnknownTaskError: mapped to 404 by the error handlers.
    """
    result = request.app.state.scheduler.run_now(task_name)
    if result.error:
        logger.warning("On-demand task %s failed: %s", task_name, result.error)
    return result.to_dict()


# ------------------------------------------------------------------
# Stream status
# ------------------------------------------------------------------


@router.get(
    "/stream/status",
    summary="Get stream status",
    description="Return subscriber stats, recent broadcasts and cache counters.",
)
def stream_status(request: Request) -> dict:
    """Return streaming stats."""
    state = request.app.state
    manager = state.stream_manager
    facade = state.market_facade
    return {
        **manager.stats,
        "recent_events": manager.get_recent_events(limit=20),
        "conditions_generation": facade.generation,
        "cache": facade.cache.stats,
    }

