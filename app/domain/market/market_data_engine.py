"""
Market data engine: baseline market size/growth + current conditions.

Produces per-country/per-product market size, traded volume and growth
rate, and the full cross product used for dashboard bulk loads.
"""

from datetime import datetime

from app.domain.market.entities import DataSource, MarketConditions, MarketSnapshot
from app.domain.market.numeric import ensure_finite, round_half_up, round_tenth
from app.domain.market.ports import ReferenceDataPort

ENGINE_NAME = "MarketDataEngine"

DEFAULT_MARKET_SIZE_USD = 1_000_000_000
DEFAULT_SIZE_MULTIPLIER = 1.0
DEFAULT_GROWTH_PCT = 3.0
DEFAULT_REGION = "Other"
VOLUME_RATIO = 1.2
MIN_GROWTH_PCT = 0.1

# Condition impact on market size; the two checks add up.
STRONG_GDP_ABOVE = 3.0
STRONG_GDP_IMPACT = 0.05
WEAK_GDP_BELOW = 2.0
WEAK_GDP_IMPACT = -0.08
HIGH_TRADE_ABOVE = 105.0
HIGH_TRADE_IMPACT = 0.03
LOW_TRADE_BELOW = 95.0
LOW_TRADE_IMPACT = -0.05

# Growth-rate sensitivity to conditions
GDP_REFERENCE = 2.8
GDP_SENSITIVITY = 0.5
TRADE_REFERENCE = 100.0
TRADE_SENSITIVITY = 0.02


class MarketDataEngine:
    """Computes market snapshots from reference baselines and conditions."""

    def __init__(self, reference: ReferenceDataPort) -> None:
        self._reference = reference

    def snapshot(
        self, country: str, product: str, conditions: MarketConditions
    ) -> MarketSnapshot:
        """Compute the market figures for one country/product pair.

        Raises:
            EngineComputationError: If a figure is not a finite number.
        """
        size = self.base_market_size(country, product) * (1 + self.condition_impact(conditions))
        ensure_finite(ENGINE_NAME, "market_size_usd", size)
        market_size = round_half_up(size)
        return MarketSnapshot(
            country=self._reference.country_display(country),
            product=self._reference.product_display(product),
            market_size_usd=market_size,
            volume_usd=round_half_up(market_size * VOLUME_RATIO),
            growth_rate_pct=self.growth_rate(country, product, conditions),
            region=self.region(country),
            computed_at=conditions.timestamp,
        )

    def all_snapshots(self, conditions: MarketConditions) -> list[MarketSnapshot]:
        """Snapshots for every known country x product, in reference order."""
        products = self._reference.product_names()
        return [
            self.snapshot(country, product, conditions)
            for country in self._reference.country_names()
            for product in products
        ]

    def fallback(self, country: str, product: str, computed_at: datetime) -> MarketSnapshot:
        """Baseline-only snapshot used when a computation fails."""
        size = round_half_up(self.base_market_size(country, product))
        profile = self._reference.country(country)
        growth = profile.growth_rate_pct if profile and profile.growth_rate_pct is not None else DEFAULT_GROWTH_PCT
        return MarketSnapshot(
            country=self._reference.country_display(country),
            product=self._reference.product_display(product),
            market_size_usd=size,
            volume_usd=round_half_up(size * VOLUME_RATIO),
            growth_rate_pct=growth,
            region=self.region(country),
            computed_at=computed_at,
            source=DataSource.FALLBACK,
        )

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def base_market_size(self, country: str, product: str) -> float:
        country_profile = self._reference.country(country)
        product_profile = self._reference.product(product)
        size = DEFAULT_MARKET_SIZE_USD
        if country_profile is not None and country_profile.market_size_usd is not None:
            size = country_profile.market_size_usd
        multiplier = DEFAULT_SIZE_MULTIPLIER
        if product_profile is not None and product_profile.market_size_multiplier is not None:
            multiplier = product_profile.market_size_multiplier
        return size * multiplier

    @staticmethod
    def condition_impact(conditions: MarketConditions) -> float:
        impact = 0.0
        if conditions.global_gdp_growth_pct > STRONG_GDP_ABOVE:
            impact += STRONG_GDP_IMPACT
        elif conditions.global_gdp_growth_pct < WEAK_GDP_BELOW:
            impact += WEAK_GDP_IMPACT
        if conditions.trade_volume_index > HIGH_TRADE_ABOVE:
            impact += HIGH_TRADE_IMPACT
        elif conditions.trade_volume_index < LOW_TRADE_BELOW:
            impact += LOW_TRADE_IMPACT
        return impact

    def growth_rate(
        self, country: str, product: str, conditions: MarketConditions
    ) -> float:
        """Annual growth in percent, one decimal, floored at 0.1."""
        country_profile = self._reference.country(country)
        product_profile = self._reference.product(product)
        country_growth = DEFAULT_GROWTH_PCT
        if country_profile is not None and country_profile.growth_rate_pct is not None:
            country_growth = country_profile.growth_rate_pct
        product_bonus = 0.0
        if product_profile is not None and product_profile.growth_rate_pct is not None:
            product_bonus = product_profile.growth_rate_pct - DEFAULT_GROWTH_PCT

        growth = (
            country_growth
            + product_bonus
            + (conditions.global_gdp_growth_pct - GDP_REFERENCE) * GDP_SENSITIVITY
            + (conditions.trade_volume_index - TRADE_REFERENCE) * TRADE_SENSITIVITY
        )
        ensure_finite(ENGINE_NAME, "growth_rate_pct", growth)
        return max(MIN_GROWTH_PCT, round_tenth(growth))

    def region(self, country: str) -> str:
        profile = self._reference.country(country)
        if profile is None or not profile.region:
            return DEFAULT_REGION
        return profile.region
