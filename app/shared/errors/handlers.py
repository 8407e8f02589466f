"""
Centralized error handlers for FastAPI.

Maps market domain errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse shape: {"error", "detail"?}.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.market.errors import (
    EngineComputationError,
    MarketDomainError,
    UnknownTaskError,
)

logger = logging.getLogger(__name__)

HTTP_404 = 404
HTTP_422 = 422
HTTP_500 = 500


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed query parameters."""
        fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()})
        logger.warning("Request validation failed: %s", fields)
        return _error_response(HTTP_422, "Invalid request", ", ".join(fields) or None)

    @app.exception_handler(UnknownTaskError)
    async def handle_unknown_task(
        _request: Request, exc: UnknownTaskError
    ) -> JSONResponse:
        """Handle an on-demand run of an unregistered scheduler task."""
        logger.warning("Unknown scheduler task: %s", exc.task_name)
        return _error_response(
            HTTP_404, "Unknown task", f"Available: {', '.join(exc.available)}"
        )

    @app.exception_handler(EngineComputationError)
    async def handle_engine_computation(
        _request: Request, exc: EngineComputationError
    ) -> JSONResponse:
        """Handle engine faults that escaped the facade fallback."""
        logger.error("Engine computation error in %s (%s)", exc.engine, exc.field_name)
        return _error_response(HTTP_500, "Market computation failed")

    @app.exception_handler(MarketDomainError)
    async def handle_market_domain(
        _request: Request, exc: MarketDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled market domain errors."""
        logger.error("Unhandled market domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
