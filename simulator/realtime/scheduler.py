"""
Refresh scheduler for market conditions and subscriber broadcasts.

Uses APScheduler to run two independent interval jobs:
- **refresh_conditions (60 s)**: re-sample MarketConditions and clear
  the result cache.
- **broadcast_market_update (30 s)**: recompute the full market data set
  and economic indicators and push them to every subscriber.
- **On-demand**: trigger either job via CLI or API (`run_now`).

Jobs run in APScheduler's worker threads. The broadcast payload is built
in that thread; only the send is handed to the server event loop with
``asyncio.run_coroutine_threadsafe``.
"""

import asyncio
import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.application.market.query_facade import MarketQueryFacade
from app.domain.market.errors import UnknownTaskError
from simulator.realtime.stream import MARKET_UPDATE_EVENT, MarketStreamManager, build_market_update

logger = logging.getLogger(__name__)

REFRESH_TASK = "refresh_conditions"
BROADCAST_TASK = "broadcast_market_update"
DEFAULT_REFRESH_SECONDS = 60
DEFAULT_BROADCAST_SECONDS = 30
MAX_TASK_HISTORY = 200


class TaskStatus(Enum):
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TaskResult:
    """Result of a scheduled task execution."""

    task_name: str
    status: TaskStatus
    started_at: str
    finished_at: str | None = None
    duration_seconds: float = 0.0
    details: dict = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            "task": self.task_name,
            "status": self.status.value,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "duration_seconds": self.duration_seconds,
            "details": self.details,
            "error": self.error,
        }


def _utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RefreshScheduler:
    """Orchestrates the periodic refresh and broadcast jobs.

    Jobs are coalesced and never overlap themselves. If no stream
    manager or event loop is attached, the broadcast job still
    recomputes the aggregate data (warming the cache) but sends nothing.

    Usage:
        scheduler = RefreshScheduler(facade, stream, loop=asyncio.get_running_loop())
        scheduler.start()                      # begin both interval jobs
        scheduler.run_now("refresh_conditions")
        scheduler.stop()                       # waits for running jobs
    """

    def __init__(
        self,
        facade: MarketQueryFacade,
        stream_manager: Optional[MarketStreamManager] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        refresh_seconds: int = DEFAULT_REFRESH_SECONDS,
        broadcast_seconds: int = DEFAULT_BROADCAST_SECONDS,
    ) -> None:
        self._facade = facade
        self._stream = stream_manager
        self._loop = loop
        self._refresh_seconds = refresh_seconds
        self._broadcast_seconds = broadcast_seconds
        self._task_history: list[TaskResult] = []
        self._lock = threading.Lock()
        self._scheduler: Optional[BackgroundScheduler] = None
        self._task_map: dict[str, Callable[[], TaskResult]] = {
            REFRESH_TASK: self._task_refresh_conditions,
            BROADCAST_TASK: self._task_broadcast_market_update,
        }

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    @property
    def task_names(self) -> list[str]:
        return list(self._task_map)

    @property
    def task_history(self) -> list[TaskResult]:
        with self._lock:
            return list(self._task_history)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the scheduler with both interval jobs."""
        if self.is_running:
            logger.warning("Scheduler already running.")
            return

        self._scheduler = BackgroundScheduler(
            timezone="UTC",
            job_defaults={"coalesce": True, "max_instances": 1},
        )
        self._scheduler.add_job(
            self._task_refresh_conditions,
            IntervalTrigger(seconds=self._refresh_seconds),
            id=REFRESH_TASK,
            name="Market condition refresh",
        )
        self._scheduler.add_job(
            self._task_broadcast_market_update,
            IntervalTrigger(seconds=self._broadcast_seconds),
            id=BROADCAST_TASK,
            name="Market update broadcast",
        )
        self._scheduler.start()
        logger.info(
            "RefreshScheduler started (refresh every %ds, broadcast every %ds).",
            self._refresh_seconds,
            self._broadcast_seconds,
        )

    def stop(self) -> None:
        """Stop the scheduler, waiting for running jobs to finish."""
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=True)
        self._scheduler = None
        logger.info("RefreshScheduler stopped.")

    def run_now(self, task_name: str) -> TaskResult:
        """Execute a named task immediately (blocking).

        Args:
            task_name: ``refresh_conditions`` or ``broadcast_market_update``.

        Returns:
            TaskResult with execution details.

        Raises:
            UnknownTaskError: If the task name is not registered.
        """
        fn = self._task_map.get(task_name)
        if fn is None:
            raise UnknownTaskError(task_name, self.task_names)
        return fn()

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def _task_refresh_conditions(self) -> TaskResult:
        """Re-sample conditions and invalidate the cache."""
        return self._run(REFRESH_TASK, self._refresh)

    def _task_broadcast_market_update(self) -> TaskResult:
        """Recompute the aggregate update and hand it to subscribers."""
        return self._run(BROADCAST_TASK, self._broadcast)

    def _refresh(self) -> dict:
        conditions = self._facade.refresh_conditions()
        return {
            "generation": self._facade.generation,
            "conditions_at": conditions.timestamp.isoformat(),
        }

    def _broadcast(self) -> dict:
        payload = build_market_update(self._facade)
        details: dict[str, Any] = {
            "markets": len(payload["data"]["marketData"]),
            "dispatched": False,
            "subscribers": 0,
        }
        if self._stream is None or self._loop is None or not self._loop.is_running():
            return details

        future = asyncio.run_coroutine_threadsafe(
            self._stream.broadcast_event(MARKET_UPDATE_EVENT, payload), self._loop
        )
        future.add_done_callback(self._on_broadcast_done)
        details["dispatched"] = True
        details["subscribers"] = self._stream.active_connections
        return details

    @staticmethod
    def _on_broadcast_done(future: Future) -> None:
        if future.cancelled():
            logger.warning("Market update broadcast was cancelled.")
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Market update broadcast failed.", exc_info=exc)
            return
        logger.debug("Market update delivered to %d subscribers.", future.result())

    def _run(self, task_name: str, body: Callable[[], dict]) -> TaskResult:
        start = time.monotonic()
        started_at = _utc_iso()
        try:
            details = body()
            task_result = TaskResult(
                task_name=task_name,
                status=TaskStatus.COMPLETED,
                started_at=started_at,
                finished_at=_utc_iso(),
                duration_seconds=round(time.monotonic() - start, 3),
                details=details,
            )
        except Exception as exc:
            task_result = TaskResult(
                task_name=task_name,
                status=TaskStatus.FAILED,
                started_at=started_at,
                finished_at=_utc_iso(),
                duration_seconds=round(time.monotonic() - start, 3),
                error=str(exc),
            )
            logger.exception("Scheduled task %s failed.", task_name)

        self._record_result(task_result)
        return task_result

    def _record_result(self, result: TaskResult) -> None:
        with self._lock:
            self._task_history.append(result)
            if len(self._task_history) > MAX_TASK_HISTORY:
                self._task_history = self._task_history[-MAX_TASK_HISTORY:]

    # ------------------------------------------------------------------
    # Status & introspection
    # ------------------------------------------------------------------

    def get_scheduled_jobs(self) -> list[dict]:
        """Return info about all scheduled jobs."""
        if self._scheduler is None:
            return []
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": str(getattr(job, "next_run_time", None)),
                "trigger": str(job.trigger),
            }
            for job in self._scheduler.get_jobs()
        ]

    def get_status(self) -> dict:
        """Return the scheduler status summary."""
        recent = self.task_history[-10:]
        return {
            "running": self.is_running,
            "intervals": {
                REFRESH_TASK: self._refresh_seconds,
                BROADCAST_TASK: self._broadcast_seconds,
            },
            "jobs": self.get_scheduled_jobs(),
            "recent_tasks": [
                {
                    "task": r.task_name,
                    "status": r.status.value,
                    "duration": r.duration_seconds,
                    "started_at": r.started_at,
                }
                for r in recent
            ],
        }
