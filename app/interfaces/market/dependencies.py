"""
Dependency injection for the market bounded context.

``build_market_facade`` is the composition root: the app lifespan calls
it once and stores the facade on ``app.state``. The FastAPI dependency
functions below hand that single instance, or use cases wrapping it,
to the routes.
"""

from datetime import datetime
from typing import Callable

from fastapi import Request

from app.application.market.get_market_intelligence import GetMarketIntelligenceUseCase
from app.application.market.query_facade import MarketQueryFacade, utc_now
from app.core.config import Settings, settings
from app.infrastructure.market.reference_tables import StaticReferenceData
from app.infrastructure.market.ttl_cache import TTLCache


def build_market_facade(
    config: Settings = settings,
    clock: Callable[[], datetime] = utc_now,
) -> MarketQueryFacade:
    """Build the process-wide MarketQueryFacade from application settings.

    Args:
        config: Settings supplying the cache TTL.
        clock: Source of the timestamps conditions are sampled at.
    """
    return MarketQueryFacade(
        reference=StaticReferenceData(),
        cache=TTLCache(default_ttl=config.cache_ttl_seconds),
        clock=clock,
        cache_ttl=config.cache_ttl_seconds,
    )


def get_market_facade(request: Request) -> MarketQueryFacade:
    """Return the facade built by the application lifespan."""
    return request.app.state.market_facade


def get_market_intelligence_use_case(request: Request) -> GetMarketIntelligenceUseCase:
    """Build GetMarketIntelligenceUseCase around the shared facade."""
    return GetMarketIntelligenceUseCase(facade=get_market_facade(request))

