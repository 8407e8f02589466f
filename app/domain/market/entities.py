"""
Domain entities for the market bounded context.

Every entity is an immutable value: a stale result is replaced,
never edited. They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

GENERAL_PRODUCT = "General"


class RiskTrend(Enum):
    """Coarse direction of a country's risk outlook."""

    IMPROVING = "improving"
    STABLE = "stable"
    DETERIORATING = "deteriorating"


class DataSource(Enum):
    """Provenance marker attached to every computed result."""

    REAL_TIME = "Real-time Market Data"
    TARIFF_DATABASE = "Real-time Tariff Database"
    RISK_OVERVIEW = "Real-time Risk Assessment"
    FALLBACK = "Fallback Data"


@dataclass(frozen=True)
class MarketConditions:
    """Time-derived snapshot of the macro indicators all scoring depends on.

    A pure function of ``timestamp``; two snapshots sampled at the same
    instant compare equal.
    """

    timestamp: datetime
    global_inflation_pct: float
    oil_price_usd: float
    gold_price_usd: float
    usd_index: float
    vix_index: float
    global_gdp_growth_pct: float
    trade_volume_index: float


@dataclass(frozen=True)
class CountryProfile:
    """Reference baselines for one country.

    Sub-tables only cover part of the country list, so every baseline
    is optional and the engines apply their own defaults.
    """

    name: str
    region: Optional[str] = None
    base_risk: Optional[int] = None
    political_risk: Optional[int] = None
    economic_risk: Optional[int] = None
    currency_risk: Optional[int] = None
    trade_risk: Optional[int] = None
    growth_rate_pct: Optional[float] = None
    market_size_usd: Optional[float] = None
    risk_factors: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProductProfile:
    """Reference baselines for one product category.

    Attributes:
        base_tariffs: Import tariff (%) keyed by normalized destination.
    """

    name: str
    risk_modifier: Optional[int] = None
    growth_rate_pct: Optional[float] = None
    market_size_multiplier: Optional[float] = None
    hs_code: Optional[str] = None
    base_tariffs: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class RiskAssessment:
    """Risk scores for a country, optionally narrowed to a product.

    ``overall_risk`` lies in [10, 85]; each sub-score in [0, 95].
    """

    country: str
    product: str
    overall_risk: int
    political_risk: int
    economic_risk: int
    currency_risk: int
    trade_risk: int
    factors: tuple[str, ...]
    recommendations: tuple[str, ...]
    trend: RiskTrend
    computed_at: datetime
    source: DataSource = DataSource.REAL_TIME


@dataclass(frozen=True)
class CountryRiskSummary:
    """Compact risk line used by the headline-country overview."""

    country: str
    political_risk: int
    economic_risk: int
    currency_risk: int
    overall_risk: int
    computed_at: datetime
    source: DataSource = DataSource.RISK_OVERVIEW


@dataclass(frozen=True)
class TariffAssessment:
    """Effective import tariff for a product shipped between two countries."""

    product: str
    from_country: str
    to_country: str
    hs_code: str
    base_tariff_pct: float
    agreement_discount_pct: float
    final_tariff_pct: float
    computed_at: datetime
    source: DataSource = DataSource.TARIFF_DATABASE


@dataclass(frozen=True)
class MarketSnapshot:
    """Market size, volume and growth for one country/product pair."""

    country: str
    product: str
    market_size_usd: int
    volume_usd: int
    growth_rate_pct: float
    region: str
    computed_at: datetime
    source: DataSource = DataSource.REAL_TIME


@dataclass(frozen=True)
class GdpIndicator:
    current_usd: float
    growth_pct: float
    trend: str


@dataclass(frozen=True)
class InflationIndicator:
    global_pct: float
    trend: str


@dataclass(frozen=True)
class CommodityPrices:
    oil_usd: float
    gold_usd: float


@dataclass(frozen=True)
class CurrencyIndicator:
    usd_index: float
    trend: str


@dataclass(frozen=True)
class VolatilityIndicator:
    vix: float
    level: str


@dataclass(frozen=True)
class TradeVolumeIndicator:
    index: float
    trend: str


@dataclass(frozen=True)
class EconomicIndicators:
    """Summary of the current conditions with coarse trend labels."""

    global_gdp: GdpIndicator
    inflation: InflationIndicator
    commodities: CommodityPrices
    currencies: CurrencyIndicator
    volatility: VolatilityIndicator
    trade_volume: TradeVolumeIndicator
    last_updated: datetime
    source: DataSource = DataSource.REAL_TIME


@dataclass(frozen=True)
class MarketNewsItem:
    """A headline generated from a condition crossing its threshold."""

    title: str
    summary: str
    sentiment: float
    impact: str
    category: str
    countries: tuple[str, ...]
    published_at: datetime
