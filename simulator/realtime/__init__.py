"""
Real-time market pipeline.

Provides:
- **RefreshScheduler**: APScheduler-based jobs that re-sample market
  conditions (60 s) and broadcast the aggregate update (30 s).
- **MarketStreamManager**: WebSocket/SSE subscriber registry and
  broadcaster, plus on-demand request handling.
"""

from simulator.realtime.scheduler import RefreshScheduler, TaskResult, TaskStatus
from simulator.realtime.stream import MarketStreamManager, StreamEvent, build_market_update

__all__ = [
    "RefreshScheduler",
    "TaskResult",
    "TaskStatus",
    "MarketStreamManager",
    "StreamEvent",
    "build_market_update",
]
