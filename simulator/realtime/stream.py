"""
WebSocket & SSE market stream manager.

Keeps the registry of broadcast subscribers and pushes the aggregate
market update (full market data set + economic indicators) to them.

Architecture:
    RefreshScheduler (thread)  ──▶  build_market_update(facade)
                                          │ run_coroutine_threadsafe
                                          ▼
                                   MarketStreamManager.broadcast()
                                          │
                               ┌──────────┴──────────┐
                               │ WebSocket clients   │  send_text, per-client timeout
                               │ SSE queues          │  put_nowait, bounded
                               └─────────────────────┘

A subscriber that is slow (send exceeds the timeout, or its queue is
full) or dead (send raises) is dropped; the others still receive the
event.

WebSocket clients may also ask for data on demand:
    → {"action": "request-risk-data", "country": "Turkey", "product": "Energy"}
    ← {"event": "risk-data-update", "data": {...}, "timestamp": "..."}
"""

import asyncio
import json
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Awaitable, Callable

from pydantic import ValidationError

from app.application.market.query_facade import MarketQueryFacade
from app.interfaces.market.schemas import (
    EconomicIndicatorsResponse,
    MarketSnapshotItem,
    RiskAssessmentResponse,
    RiskRequest,
    TariffAssessmentResponse,
    TariffRequest,
    dump,
)

logger = logging.getLogger(__name__)

MARKET_UPDATE_EVENT = "real-time-update"
DEFAULT_SEND_TIMEOUT_SECONDS = 5.0
DEFAULT_MAX_HISTORY = 200
DEFAULT_MAX_QUEUE_SIZE = 100
SSE_KEEPALIVE_SECONDS = 15.0
DROP_CLOSE_TIMEOUT_SECONDS = 1.0
DROP_CLOSE_CODE = 1011


def _utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class StreamEvent:
    """A single event pushed to subscribers."""

    event_type: str          # "real-time-update", "market-data-update", "pong", "error", ...
    data: dict
    timestamp: str = field(default_factory=_utc_iso)

    def to_json(self) -> str:
        return json.dumps({
            "event": self.event_type,
            "data": self.data,
            "timestamp": self.timestamp,
        }, default=str)

    def to_sse(self) -> str:
        """Format as Server-Sent Event."""
        return f"event: {self.event_type}\ndata: {self.to_json()}\n\n"


def build_market_update(facade: MarketQueryFacade) -> dict:
    """Aggregate payload broadcast to every subscriber.

    Synchronous on purpose: the scheduler builds it in its worker thread
    and only hands the send to the event loop.
    """
    markets = facade.get_all_market_data()
    indicators = facade.get_economic_indicators()
    return {
        "type": "market-update",
        "data": {
            "marketData": [dump(MarketSnapshotItem.from_entity(s)) for s in markets],
            "economicData": dump(EconomicIndicatorsResponse.from_entity(indicators)),
            "timestamp": _utc_iso(),
        },
    }


class MarketStreamManager:
    """Subscriber registry and broadcaster for live market updates.

    Usage in FastAPI:
        manager = MarketStreamManager(facade)

        @app.websocket("/ws/market")
        async def ws_endpoint(ws: WebSocket):
            await manager.connect(ws)
            try:
                while True:
                    msg = await ws.receive_text()
                    await manager.handle_client_message(ws, msg)
            except WebSocketDisconnect:
                manager.disconnect(ws)
    """

    def __init__(
        self,
        facade: MarketQueryFacade,
        send_timeout: float = DEFAULT_SEND_TIMEOUT_SECONDS,
        max_history: int = DEFAULT_MAX_HISTORY,
        max_queue_size: int = DEFAULT_MAX_QUEUE_SIZE,
    ) -> None:
        self._facade = facade
        self._send_timeout = send_timeout
        self._max_queue_size = max_queue_size
        self._clients: dict[Any, str] = {}
        self._queues: set[asyncio.Queue] = set()
        self._event_history: deque[StreamEvent] = deque(maxlen=max_history)
        self._stats = {
            "total_connections": 0,
            "total_events_broadcast": 0,
            "total_messages_sent": 0,
            "total_subscribers_dropped": 0,
        }
        self._actions: dict[str, Callable[[dict], Awaitable[StreamEvent]]] = {
            "ping": self._on_ping,
            "request-market-data": self._on_market_data,
            "request-economic-data": self._on_economic_data,
            "request-risk-data": self._on_risk_data,
            "request-tariff-data": self._on_tariff_data,
        }

    @property
    def active_connections(self) -> int:
        return len(self._clients) + len(self._queues)

    @property
    def stats(self) -> dict:
        return {
            **self._stats,
            "active_connections": self.active_connections,
            "websocket_clients": len(self._clients),
            "sse_clients": len(self._queues),
        }

    # ------------------------------------------------------------------
    # WebSocket lifecycle
    # ------------------------------------------------------------------

    async def connect(self, websocket: Any) -> None:
        """Accept a new WebSocket connection and confirm it."""
        await websocket.accept()
        self._clients[websocket] = _utc_iso()
        self._stats["total_connections"] += 1
        logger.info("WebSocket client connected. Active: %d", self.active_connections)

        welcome = StreamEvent(
            event_type="connection-status",
            data={"status": "connected", "activeClients": self.active_connections},
        )
        await websocket.send_text(welcome.to_json())

    def disconnect(self, websocket: Any) -> None:
        """Remove a WebSocket client. Unknown clients are ignored."""
        if self._clients.pop(websocket, None) is not None:
            logger.info("WebSocket client disconnected. Active: %d", self.active_connections)

    async def handle_client_message(self, websocket: Any, raw: str) -> None:
        """Answer one on-demand request from a WebSocket client.

        Supported actions:
            {"action": "ping"}
            {"action": "request-market-data"}
            {"action": "request-economic-data"}
            {"action": "request-risk-data", "country": "...", "product": "..."}
            {"action": "request-tariff-data", "product": "...",
             "fromCountry": "...", "toCountry": "..."}
        """
        try:
            msg = json.loads(raw)
        except json.JSONDecodeError:
            await websocket.send_text(json.dumps({"error": "Invalid JSON"}))
            return
        if not isinstance(msg, dict):
            await websocket.send_text(json.dumps({"error": "Expected a JSON object"}))
            return

        action = msg.get("action", "")
        handler = self._actions.get(action)
        if handler is None:
            reply = StreamEvent(
                event_type="error",
                data={"message": f"Unknown action: {action}", "supported": sorted(self._actions)},
            )
        else:
            reply = await self._dispatch(action, handler, msg)
        await websocket.send_text(reply.to_json())
        self._stats["total_messages_sent"] += 1

    async def _dispatch(
        self,
        action: str,
        handler: Callable[[dict], Awaitable[StreamEvent]],
        msg: dict,
    ) -> StreamEvent:
        try:
            return await handler(msg)
        except ValidationError as exc:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
            return StreamEvent(
                event_type="error",
                data={"message": f"Invalid {action} request", "fields": fields},
            )
        except Exception:
            logger.exception("On-demand %s failed.", action)
            return StreamEvent(event_type="error", data={"message": f"Failed to handle {action}"})

    async def _on_ping(self, _msg: dict) -> StreamEvent:
        return StreamEvent(event_type="pong", data={})

    async def _on_market_data(self, _msg: dict) -> StreamEvent:
        markets = self._facade.get_all_market_data()
        return StreamEvent(
            event_type="market-data-update",
            data={"markets": [dump(MarketSnapshotItem.from_entity(s)) for s in markets]},
        )

    async def _on_economic_data(self, _msg: dict) -> StreamEvent:
        indicators = self._facade.get_economic_indicators()
        return StreamEvent(
            event_type="economic-data-update",
            data=dump(EconomicIndicatorsResponse.from_entity(indicators)),
        )

    async def _on_risk_data(self, msg: dict) -> StreamEvent:
        request = RiskRequest.model_validate(msg)
        risk = self._facade.get_risk(request.country, request.product)
        return StreamEvent(
            event_type="risk-data-update",
            data=dump(RiskAssessmentResponse.from_entity(risk)),
        )

    async def _on_tariff_data(self, msg: dict) -> StreamEvent:
        request = TariffRequest.model_validate(msg)
        tariff = self._facade.get_tariff(request.product, request.from_country, request.to_country)
        return StreamEvent(
            event_type="tariff-data-update",
            data=dump(TariffAssessmentResponse.from_entity(tariff)),
        )

    # ------------------------------------------------------------------
    # Broadcasting
    # ------------------------------------------------------------------

    async def broadcast(self, event: StreamEvent) -> int:
        """Send an event to every subscriber concurrently.

        Returns the number of subscribers that received it.
        """
        self._event_history.append(event)
        self._stats["total_events_broadcast"] += 1

        clients = list(self._clients)
        payload = event.to_json()
        results = await asyncio.gather(*(self._send(ws, payload) for ws in clients))

        sent = 0
        for ws, delivered in zip(clients, results):
            if delivered:
                sent += 1
            else:
                await self._drop(ws)

        for queue in list(self._queues):
            try:
                queue.put_nowait(event)
                sent += 1
            except asyncio.QueueFull:
                logger.warning("SSE subscriber queue full; dropping subscriber.")
                self._close_queue(queue)
                self._stats["total_subscribers_dropped"] += 1

        self._stats["total_messages_sent"] += sent
        return sent

    async def broadcast_event(self, event_type: str, data: dict) -> int:
        """Wrap a payload in a StreamEvent and broadcast it."""
        return await self.broadcast(StreamEvent(event_type=event_type, data=data))

    async def broadcast_market_update(self) -> int:
        """Build the aggregate market update and broadcast it."""
        return await self.broadcast_event(MARKET_UPDATE_EVENT, build_market_update(self._facade))

    async def _send(self, websocket: Any, payload: str) -> bool:
        try:
            await asyncio.wait_for(websocket.send_text(payload), timeout=self._send_timeout)
        except asyncio.TimeoutError:
            logger.warning("WebSocket send exceeded %.1fs; dropping subscriber.", self._send_timeout)
            return False
        except Exception:
            logger.warning("WebSocket send failed; dropping subscriber.", exc_info=True)
            return False
        return True

    async def _drop(self, websocket: Any) -> None:
        """Unregister a failed subscriber and close its socket so it sees the drop."""
        self._stats["total_subscribers_dropped"] += 1
        self.disconnect(websocket)
        try:
            await asyncio.wait_for(
                websocket.close(code=DROP_CLOSE_CODE), timeout=DROP_CLOSE_TIMEOUT_SECONDS
            )
        except asyncio.TimeoutError:
            logger.debug("Close of dropped subscriber timed out.")
        except Exception:
            logger.debug("Close of dropped subscriber failed.", exc_info=True)

    # ------------------------------------------------------------------
    # SSE subscribers
    # ------------------------------------------------------------------

    def subscribe_queue(self) -> asyncio.Queue:
        """Register an in-process subscriber fed through a bounded queue."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._queues.add(queue)
        self._stats["total_connections"] += 1
        return queue

    def unsubscribe_queue(self, queue: asyncio.Queue) -> None:
        self._queues.discard(queue)

    def _close_queue(self, queue: asyncio.Queue) -> None:
        """Unregister a queue and leave it holding only the end marker."""
        self._queues.discard(queue)
        while not queue.empty():
            queue.get_nowait()
        queue.put_nowait(None)

    async def sse_generator(
        self, keepalive: float = SSE_KEEPALIVE_SECONDS
    ) -> AsyncGenerator[str, None]:
        """Async generator yielding Server-Sent Events until dropped.

        Use with FastAPI StreamingResponse:

            @app.get("/stream/market")
            async def stream():
                return StreamingResponse(
                    manager.sse_generator(), media_type="text/event-stream"
                )
        """
        queue = self.subscribe_queue()
        try:
            yield ": connected\n\n"
            while True:
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=keepalive)
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
                    continue
                if event is None:
                    break
                yield event.to_sse()
        finally:
            self.unsubscribe_queue(queue)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def get_recent_events(self, limit: int = 50) -> list[dict]:
        """Return the most recent broadcast events, oldest first.

        Market-update payloads are summarised to their market count.
        """
        events = list(self._event_history)[-limit:] if limit > 0 else []
        return [self._summarize(e) for e in events]

    @staticmethod
    def _summarize(event: StreamEvent) -> dict:
        data = event.data.get("data", {})
        return {
            "event": event.event_type,
            "type": event.data.get("type"),
            "markets": len(data.get("marketData", [])) if isinstance(data, dict) else 0,
            "timestamp": event.timestamp,
        }
