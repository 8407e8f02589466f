"""
CLI entry point for the market simulator.

Usage:
    # Sample market conditions (now, or at a given instant)
    python -m simulator conditions --at 2024-06-01T12:00:00+00:00

    # Risk assessment for a country, optionally per product
    python -m simulator risk --country Turkey --product Energy

    # Tariff quote for a product between two countries
    python -m simulator tariff --product Electronics --from Germany --to France

    # One market snapshot, or the full data set
    python -m simulator market --country Brazil --product Agriculture

    # Export the market data set (CSV, or Parquet by extension)
    python -m simulator export --output data/markets.parquet --region europe

    # Run the refresh/broadcast jobs in the foreground
    python -m simulator scheduler

    # Start the WebSocket/SSE stream server
    python -m simulator stream --port 8000
"""

import argparse
import json
import logging
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Sequence

from app.application.market.dtos import ExportMarketDataCommand
from app.application.market.export_market_data import ExportMarketDataUseCase
from app.core.config import settings
from app.domain.market.errors import UnknownTaskError
from app.domain.market.sampler import ConditionSampler
from app.interfaces.market.dependencies import build_market_facade
from app.interfaces.market.schemas import (
    MarketConditionsResponse,
    MarketDataResponse,
    MarketSnapshotItem,
    RiskAssessmentResponse,
    TariffAssessmentResponse,
    dump,
)
from app.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def _parse_timestamp(value: str) -> datetime:
    """argparse type for ISO-8601 instants; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def cmd_conditions(args: argparse.Namespace) -> None:
    """Print the condition snapshot for an instant."""
    at = args.at or datetime.now(timezone.utc)
    conditions = ConditionSampler().sample(at)
    _print_json(dump(MarketConditionsResponse.from_entity(conditions)))


def cmd_risk(args: argparse.Namespace) -> None:
    """Print a risk assessment."""
    facade = build_market_facade(settings)
    risk = facade.get_risk(args.country, args.product)
    _print_json(dump(RiskAssessmentResponse.from_entity(risk)))


def cmd_tariff(args: argparse.Namespace) -> None:
    """Print a tariff quote."""
    facade = build_market_facade(settings)
    tariff = facade.get_tariff(args.product, args.from_country, args.to_country)
    _print_json(dump(TariffAssessmentResponse.from_entity(tariff)))


def cmd_market(args: argparse.Namespace) -> None:
    """Print one market snapshot, or the full data set."""
    facade = build_market_facade(settings)
    if args.country and args.product:
        snapshot = facade.get_market_snapshot(args.country, args.product)
        _print_json(dump(MarketSnapshotItem.from_entity(snapshot)))
        return

    markets = facade.get_all_market_data()
    response = MarketDataResponse(
        total=len(markets),
        markets=[MarketSnapshotItem.from_entity(s) for s in markets],
    )
    _print_json(dump(response))


def cmd_export(args: argparse.Namespace) -> None:
    """Export the market data set to CSV or Parquet."""
    use_case = ExportMarketDataUseCase(build_market_facade(settings))
    result = use_case.execute(
        ExportMarketDataCommand(
            output_path=Path(args.output),
            region=args.region,
            product=args.product,
        )
    )
    logger.info("Wrote %d rows to %s (%s).", result.rows, result.path, result.file_format)


def cmd_scheduler(args: argparse.Namespace) -> None:
    """Run the refresh scheduler in the foreground (no subscribers)."""
    from simulator.realtime.scheduler import RefreshScheduler

    scheduler = RefreshScheduler(
        build_market_facade(settings),
        refresh_seconds=settings.condition_refresh_seconds,
        broadcast_seconds=settings.broadcast_interval_seconds,
    )

    if args.run:
        # Execute a single task immediately and exit
        try:
            result = scheduler.run_now(args.run)
        except UnknownTaskError as exc:
            logger.error(exc.message)
            sys.exit(2)
        logger.info(
            "Task '%s' %s (%.3fs) %s",
            result.task_name, result.status.value, result.duration_seconds, result.details,
        )
        if result.error:
            logger.error("Error: %s", result.error)
            sys.exit(1)
        return

    scheduler.start()
    logger.info("Scheduler running. Press Ctrl+C to stop.")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down scheduler...")
    finally:
        scheduler.stop()


def cmd_stream(args: argparse.Namespace) -> None:
    """Start the WebSocket/SSE market stream server.

    Two modes:
    - default: lightweight server with only the realtime endpoints at
      the root path.
    - ``--full``: the complete FastAPI application (market, health and
      realtime routers under ``/api/v1``).
    """
    import uvicorn

    if args.full:
        logger.info("Starting FULL application at http://%s:%d", args.host, args.port)
        uvicorn.run("app.main:app", host=args.host, port=args.port, reload=False)
        return

    from simulator.realtime.server import create_standalone_app

    logger.info("Starting standalone realtime server at http://%s:%d", args.host, args.port)
    logger.info("WebSocket: ws://%s:%d/realtime/ws/market", args.host, args.port)
    logger.info("SSE:       http://%s:%d/realtime/stream/market", args.host, args.port)
    uvicorn.run(create_standalone_app(), host=args.host, port=args.port, reload=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TradeGenie market simulator CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Conditions
    cond_parser = subparsers.add_parser("conditions", help="Sample market conditions")
    cond_parser.add_argument(
        "--at", type=_parse_timestamp, default=None,
        help="ISO-8601 instant to sample at (default: now, UTC)",
    )
    cond_parser.set_defaults(func=cmd_conditions)

    # Risk
    risk_parser = subparsers.add_parser("risk", help="Assess country risk")
    risk_parser.add_argument("--country", required=True)
    risk_parser.add_argument("--product", default=None)
    risk_parser.set_defaults(func=cmd_risk)

    # Tariff
    tariff_parser = subparsers.add_parser("tariff", help="Quote a tariff")
    tariff_parser.add_argument("--product", required=True)
    tariff_parser.add_argument("--from", dest="from_country", required=True)
    tariff_parser.add_argument("--to", dest="to_country", required=True)
    tariff_parser.set_defaults(func=cmd_tariff)

    # Market data
    market_parser = subparsers.add_parser(
        "market", help="Show one market snapshot, or all of them"
    )
    market_parser.add_argument("--country", default=None)
    market_parser.add_argument("--product", default=None)
    market_parser.set_defaults(func=cmd_market)

    # Export
    export_parser = subparsers.add_parser(
        "export", help="Export the market data set (CSV or Parquet)"
    )
    export_parser.add_argument(
        "--output", required=True,
        help="Destination file; a .parquet suffix writes Parquet, anything else CSV",
    )
    export_parser.add_argument("--region", default="global", help="Region or country filter")
    export_parser.add_argument("--product", default="all", help="Product filter")
    export_parser.set_defaults(func=cmd_export)

    # Scheduler
    sched_parser = subparsers.add_parser(
        "scheduler", help="Run the refresh/broadcast scheduler"
    )
    sched_parser.add_argument(
        "--run", type=str, default=None,
        help="Run a single task and exit: refresh_conditions, broadcast_market_update",
    )
    sched_parser.set_defaults(func=cmd_scheduler)

    # Stream server
    stream_parser = subparsers.add_parser(
        "stream", help="Start the WebSocket/SSE market stream server"
    )
    stream_parser.add_argument("--host", default="127.0.0.1")
    stream_parser.add_argument(
        "--port", type=int, default=8000,
        help="Port for the stream server (default 8000)",
    )
    stream_parser.add_argument(
        "--full", action="store_true",
        help="Start the full FastAPI app instead of the realtime-only server",
    )
    stream_parser.set_defaults(func=cmd_stream)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    configure_logging(level=settings.log_level, stream=sys.stderr)
    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
