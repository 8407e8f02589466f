"""
Market query facade: the single entry point for every market metric.

HTTP handlers, the WebSocket stream and the broadcast job all read
through one facade instance. It owns:
- the current MarketConditions snapshot (replaced on refresh, never mutated)
- the result cache (TTL 120 s, cleared on refresh)

Input: country / product / pair names, any case. Listed names come back
in their canonical spelling; unlisted names come back trimmed, as given.
Output: immutable domain entities.
Failure cases: none visible to callers. Unknown names resolve to
defaults; an unexpected engine fault is logged and answered with a
fallback result tagged ``DataSource.FALLBACK`` that is not cached.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Hashable, Optional

from app.domain.market.entities import (
    GENERAL_PRODUCT,
    CountryRiskSummary,
    DataSource,
    EconomicIndicators,
    MarketConditions,
    MarketNewsItem,
    MarketSnapshot,
    RiskAssessment,
    TariffAssessment,
)
from app.domain.market.indicators import generate_headlines, summarize_conditions
from app.domain.market.market_data_engine import MarketDataEngine
from app.domain.market.ports import ReferenceDataPort, ResultCachePort
from app.domain.market.risk_engine import RiskEngine
from app.domain.market.sampler import ConditionSampler
from app.domain.market.tariff_engine import TariffEngine

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 120.0

# Headline economies shown on the risk overview.
OVERVIEW_COUNTRIES = (
    "United States", "China", "Germany", "Japan", "United Kingdom",
    "France", "India", "Italy", "Brazil", "Canada",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class _ConditionState:
    """Snapshot plus the refresh generation it belongs to."""

    conditions: MarketConditions
    generation: int


class MarketQueryFacade:
    """Cache-fronted access to the risk, tariff and market-data engines.

    Build one per process and inject it wherever metrics are needed.

    Usage:
        facade = MarketQueryFacade(StaticReferenceData(), TTLCache())
        facade.get_risk("Turkey", "Energy")
        facade.refresh_conditions()   # called by the scheduler every 60 s
    """

    def __init__(
        self,
        reference: ReferenceDataPort,
        cache: ResultCachePort,
        sampler: Optional[ConditionSampler] = None,
        clock: Callable[[], datetime] = utc_now,
        cache_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
    ) -> None:
        self._reference = reference
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._sampler = sampler or ConditionSampler()
        self._clock = clock
        self._risk_engine = RiskEngine(reference)
        self._tariff_engine = TariffEngine(reference)
        self._market_engine = MarketDataEngine(reference)
        self._state_lock = threading.Lock()
        self._state = _ConditionState(self._sampler.sample(self._clock()), generation=0)

    @property
    def reference(self) -> ReferenceDataPort:
        return self._reference

    @property
    def cache(self) -> ResultCachePort:
        return self._cache

    @property
    def conditions(self) -> MarketConditions:
        """The snapshot every computation currently uses."""
        with self._state_lock:
            return self._state.conditions

    @property
    def generation(self) -> int:
        with self._state_lock:
            return self._state.generation

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def refresh_conditions(self, now: Optional[datetime] = None) -> MarketConditions:
        """Re-sample conditions, swap the snapshot and clear the cache.

        Args:
            now: Timestamp to sample at. Defaults to the facade clock.

        Returns:
            The new snapshot.
        """
        conditions = self._sampler.sample(now or self._clock())
        with self._state_lock:
            self._state = _ConditionState(conditions, self._state.generation + 1)
            generation = self._state.generation
        self._cache.invalidate_all()
        logger.info(
            "Market conditions refreshed (generation=%d, inflation=%.2f, vix=%.2f).",
            generation,
            conditions.global_inflation_pct,
            conditions.vix_index,
        )
        return conditions

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_risk(self, country: str, product: Optional[str] = None) -> RiskAssessment:
        """Risk assessment for a country, optionally narrowed to a product."""
        product = product.strip() if product else ""
        product_name = self._reference.product_display(product) if product else GENERAL_PRODUCT
        return self._cached(
            ("risk", self._reference.country_display(country), product_name),
            lambda c: self._risk_engine.assess(country, product or None, c),
            lambda c: self._risk_engine.fallback(country, product or None, c),
        )

    def get_tariff(self, product: str, from_country: str, to_country: str) -> TariffAssessment:
        """Effective tariff for a product shipped from one country to another."""
        key = (
            "tariff",
            self._reference.product_display(product),
            self._reference.country_display(from_country),
            self._reference.country_display(to_country),
        )
        return self._cached(
            key,
            lambda c: self._tariff_engine.quote(product, from_country, to_country, c.timestamp),
            lambda c: self._tariff_engine.fallback(product, from_country, to_country, c.timestamp),
        )

    def get_market_snapshot(self, country: str, product: str) -> MarketSnapshot:
        """Market size, volume and growth for one country/product pair."""
        return self._cached(
            (
                "market",
                self._reference.country_display(country),
                self._reference.product_display(product),
            ),
            lambda c: self._market_engine.snapshot(country, product, c),
            lambda c: self._market_engine.fallback(country, product, c.timestamp),
        )

    def get_all_market_data(self) -> list[MarketSnapshot]:
        """Snapshots for the full country x product cross product."""
        snapshots = self._cached(
            ("market-data",),
            lambda c: tuple(self._market_engine.all_snapshots(c)),
            lambda c: tuple(
                self._market_engine.fallback(country, product, c.timestamp)
                for country in self._reference.country_names()
                for product in self._reference.product_names()
            ),
        )
        return list(snapshots)

    def get_economic_indicators(self) -> EconomicIndicators:
        """Indicator summary with coarse trend labels."""
        return self._cached(
            ("economic",),
            summarize_conditions,
            self._fallback_indicators,
        )

    def get_market_news(self) -> list[MarketNewsItem]:
        """Headlines for every condition currently past its threshold."""
        news = self._cached(
            ("news",),
            lambda c: tuple(generate_headlines(c)),
            lambda c: (),
        )
        return list(news)

    def get_risk_overview(self) -> list[CountryRiskSummary]:
        """Compact risk lines for the headline economies."""
        overview = self._cached(
            ("risk-overview",),
            lambda c: tuple(self._risk_engine.summarize(name, c) for name in OVERVIEW_COUNTRIES),
            self._fallback_overview,
        )
        return list(overview)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _cached(
        self,
        key: tuple,
        compute: Callable[[MarketConditions], Any],
        fallback: Callable[[MarketConditions], Any],
    ) -> Any:
        """Return a cached result or compute, store and return it.

        The key is scoped by refresh generation, so a computation that
        straddles a refresh cannot repopulate the cache with a result
        built from the superseded snapshot.
        """
        with self._state_lock:
            state = self._state
        scoped_key: Hashable = (state.generation, *key)

        cached = self._cache.get(scoped_key)
        if cached is not None:
            return cached

        try:
            value = compute(state.conditions)
        except Exception:
            logger.exception("Computation for %s failed; serving fallback data.", key[0])
            return fallback(state.conditions)

        self._cache.set(scoped_key, value, self._cache_ttl)
        return value

    def _fallback_indicators(self, conditions: MarketConditions) -> EconomicIndicators:
        baseline = self._sampler.baseline(conditions.timestamp)
        indicators = summarize_conditions(baseline)
        return EconomicIndicators(
            global_gdp=indicators.global_gdp,
            inflation=indicators.inflation,
            commodities=indicators.commodities,
            currencies=indicators.currencies,
            volatility=indicators.volatility,
            trade_volume=indicators.trade_volume,
            last_updated=conditions.timestamp,
            source=DataSource.FALLBACK,
        )

    def _fallback_overview(self, conditions: MarketConditions) -> tuple[CountryRiskSummary, ...]:
        summaries = []
        for name in OVERVIEW_COUNTRIES:
            degraded = self._risk_engine.fallback(name, None, conditions)
            summaries.append(
                CountryRiskSummary(
                    country=name,
                    political_risk=degraded.political_risk,
                    economic_risk=degraded.economic_risk,
                    currency_risk=degraded.currency_risk,
                    overall_risk=degraded.overall_risk,
                    computed_at=conditions.timestamp,
                    source=DataSource.FALLBACK,
                )
            )
        return tuple(summaries)
