"""Shared fixtures for the market engine tests."""

from dataclasses import replace
from datetime import datetime, timezone

import pytest

from app.domain.market.entities import MarketConditions

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeMonotonic:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def calm_conditions(**overrides) -> MarketConditions:
    """Baseline conditions: no threshold crossed by any engine."""
    base = MarketConditions(
        timestamp=FIXED_NOW,
        global_inflation_pct=3.2,
        oil_price_usd=75.0,
        gold_price_usd=1950.0,
        usd_index=103.0,
        vix_index=18.0,
        global_gdp_growth_pct=2.8,
        trade_volume_index=100.0,
    )
    return replace(base, **overrides)


@pytest.fixture(scope="session")
def reference():
    from app.infrastructure.market.reference_tables import StaticReferenceData

    return StaticReferenceData()


@pytest.fixture
def monotonic() -> FakeMonotonic:
    return FakeMonotonic()


@pytest.fixture
def facade(reference, monotonic):
    """Facade pinned to FIXED_NOW with a manually driven cache clock."""
    from app.application.market.query_facade import MarketQueryFacade
    from app.infrastructure.market.ttl_cache import TTLCache

    return MarketQueryFacade(
        reference=reference,
        cache=TTLCache(default_ttl=120, clock=monotonic),
        clock=lambda: FIXED_NOW,
    )
