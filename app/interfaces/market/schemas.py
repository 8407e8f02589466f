"""
Pydantic schemas for market API request/response validation.

These schemas define the API contract. Field names are snake_case in
Python and camelCase on the wire. The ``from_*`` constructors map domain
entities and DTOs onto the wire shape; the WebSocket stream reuses them
so both transports emit identical payloads.
No business logic belongs here.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.application.market.dtos import MarketIntelligenceResult, MarketTrendItem
from app.domain.market.entities import (
    CountryRiskSummary,
    EconomicIndicators,
    MarketConditions,
    MarketNewsItem,
    MarketSnapshot,
    RiskAssessment,
    TariffAssessment,
)

NAME_MAX_LEN = 64
COUNTRY_DESCRIPTION = "Country name, case-insensitive"
PRODUCT_DESCRIPTION = "Product category name, case-insensitive"
TIMEFRAME_PATTERN = r"^(1M|3M|6M|1Y)$"


class CamelModel(BaseModel):
    """Base schema serialising field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def dump(model: BaseModel) -> dict[str, Any]:
    """JSON-ready dict of a schema, using wire (camelCase) names."""
    return model.model_dump(mode="json", by_alias=True)


# ------------------------------------------------------------------
# Requests
# ------------------------------------------------------------------


class RiskRequest(CamelModel):
    """Request schema for a risk assessment.

    Attributes:
        country: Country to assess.
        product: Optional product category narrowing the base risk.
    """

    country: str = Field(..., min_length=1, max_length=NAME_MAX_LEN, description=COUNTRY_DESCRIPTION)
    product: Optional[str] = Field(
        default=None, min_length=1, max_length=NAME_MAX_LEN, description=PRODUCT_DESCRIPTION
    )


class TariffRequest(CamelModel):
    """Request schema for a tariff quote."""

    product: str = Field(..., min_length=1, max_length=NAME_MAX_LEN, description=PRODUCT_DESCRIPTION)
    from_country: str = Field(..., min_length=1, max_length=NAME_MAX_LEN, description="Exporting country")
    to_country: str = Field(..., min_length=1, max_length=NAME_MAX_LEN, description="Destination country")


# ------------------------------------------------------------------
# Responses
# ------------------------------------------------------------------


class MarketConditionsResponse(CamelModel):
    """Response schema for the current condition snapshot."""

    timestamp: datetime
    global_inflation_pct: float
    oil_price_usd: float = Field(..., alias="oilPriceUSD")
    gold_price_usd: float = Field(..., alias="goldPriceUSD")
    usd_index: float
    vix_index: float
    global_gdp_growth_pct: float
    trade_volume_index: float

    @classmethod
    def from_entity(cls, conditions: MarketConditions) -> "MarketConditionsResponse":
        return cls(
            timestamp=conditions.timestamp,
            global_inflation_pct=conditions.global_inflation_pct,
            oil_price_usd=conditions.oil_price_usd,
            gold_price_usd=conditions.gold_price_usd,
            usd_index=conditions.usd_index,
            vix_index=conditions.vix_index,
            global_gdp_growth_pct=conditions.global_gdp_growth_pct,
            trade_volume_index=conditions.trade_volume_index,
        )


class RiskAssessmentResponse(CamelModel):
    """Response schema for a risk assessment."""

    country: str
    product: str
    overall_risk: int = Field(..., ge=10, le=85)
    political_risk: int = Field(..., ge=0, le=95)
    economic_risk: int = Field(..., ge=0, le=95)
    currency_risk: int = Field(..., ge=0, le=95)
    trade_risk: int = Field(..., ge=0, le=95)
    factors: list[str]
    recommendations: list[str]
    trend: str
    computed_at: datetime
    source: str

    @classmethod
    def from_entity(cls, risk: RiskAssessment) -> "RiskAssessmentResponse":
        return cls(
            country=risk.country,
            product=risk.product,
            overall_risk=risk.overall_risk,
            political_risk=risk.political_risk,
            economic_risk=risk.economic_risk,
            currency_risk=risk.currency_risk,
            trade_risk=risk.trade_risk,
            factors=list(risk.factors),
            recommendations=list(risk.recommendations),
            trend=risk.trend.value,
            computed_at=risk.computed_at,
            source=risk.source.value,
        )


class CountryRiskSummaryItem(CamelModel):
    country: str
    political_risk: int
    economic_risk: int
    currency_risk: int
    overall_risk: int
    computed_at: datetime
    source: str

    @classmethod
    def from_entity(cls, summary: CountryRiskSummary) -> "CountryRiskSummaryItem":
        return cls(
            country=summary.country,
            political_risk=summary.political_risk,
            economic_risk=summary.economic_risk,
            currency_risk=summary.currency_risk,
            overall_risk=summary.overall_risk,
            computed_at=summary.computed_at,
            source=summary.source.value,
        )


class RiskOverviewResponse(CamelModel):
    """Response schema for the headline-country risk overview."""

    countries: list[CountryRiskSummaryItem]


class TariffAssessmentResponse(CamelModel):
    """Response schema for a tariff quote."""

    product: str
    from_country: str
    to_country: str
    hs_code: str
    base_tariff_pct: float
    agreement_discount_pct: float
    final_tariff_pct: float = Field(..., ge=0)
    computed_at: datetime
    source: str

    @classmethod
    def from_entity(cls, tariff: TariffAssessment) -> "TariffAssessmentResponse":
        return cls(
            product=tariff.product,
            from_country=tariff.from_country,
            to_country=tariff.to_country,
            hs_code=tariff.hs_code,
            base_tariff_pct=tariff.base_tariff_pct,
            agreement_discount_pct=tariff.agreement_discount_pct,
            final_tariff_pct=tariff.final_tariff_pct,
            computed_at=tariff.computed_at,
            source=tariff.source.value,
        )


class MarketSnapshotItem(CamelModel):
    """A single market snapshot."""

    country: str
    product: str
    market_size_usd: int = Field(..., alias="marketSizeUSD")
    volume_usd: int = Field(..., alias="volumeUSD")
    growth_rate_pct: float
    region: str
    computed_at: datetime
    source: str

    @classmethod
    def from_entity(cls, snapshot: MarketSnapshot) -> "MarketSnapshotItem":
        return cls(
            country=snapshot.country,
            product=snapshot.product,
            market_size_usd=snapshot.market_size_usd,
            volume_usd=snapshot.volume_usd,
            growth_rate_pct=snapshot.growth_rate_pct,
            region=snapshot.region,
            computed_at=snapshot.computed_at,
            source=snapshot.source.value,
        )


class MarketDataResponse(CamelModel):
    """Response schema for the bulk market data set."""

    total: int
    markets: list[MarketSnapshotItem]


class GdpSchema(CamelModel):
    current: float
    growth: float
    trend: str


class InflationSchema(CamelModel):
    global_: float = Field(..., alias="global")
    trend: str


class CommoditiesSchema(CamelModel):
    oil: float
    gold: float


class CurrenciesSchema(CamelModel):
    usd_index: float
    trend: str


class VolatilitySchema(CamelModel):
    vix: float
    level: str


class TradeVolumeSchema(CamelModel):
    index: float
    trend: str


class EconomicIndicatorsResponse(CamelModel):
    """Response schema for the economic indicator summary."""

    global_gdp: GdpSchema = Field(..., alias="globalGDP")
    inflation: InflationSchema
    commodities: CommoditiesSchema
    currencies: CurrenciesSchema
    volatility: VolatilitySchema
    trade_volume: TradeVolumeSchema
    last_updated: datetime
    source: str

    @classmethod
    def from_entity(cls, indicators: EconomicIndicators) -> "EconomicIndicatorsResponse":
        return cls(
            global_gdp=GdpSchema(
                current=indicators.global_gdp.current_usd,
                growth=indicators.global_gdp.growth_pct,
                trend=indicators.global_gdp.trend,
            ),
            inflation=InflationSchema(
                global_=indicators.inflation.global_pct,
                trend=indicators.inflation.trend,
            ),
            commodities=CommoditiesSchema(
                oil=indicators.commodities.oil_usd,
                gold=indicators.commodities.gold_usd,
            ),
            currencies=CurrenciesSchema(
                usd_index=indicators.currencies.usd_index,
                trend=indicators.currencies.trend,
            ),
            volatility=VolatilitySchema(
                vix=indicators.volatility.vix,
                level=indicators.volatility.level,
            ),
            trade_volume=TradeVolumeSchema(
                index=indicators.trade_volume.index,
                trend=indicators.trade_volume.trend,
            ),
            last_updated=indicators.last_updated,
            source=indicators.source.value,
        )


class NewsItemSchema(CamelModel):
    title: str
    summary: str
    sentiment: float = Field(..., ge=-1, le=1)
    impact: str
    category: str
    countries: list[str]
    published_at: datetime

    @classmethod
    def from_entity(cls, item: MarketNewsItem) -> "NewsItemSchema":
        return cls(
            title=item.title,
            summary=item.summary,
            sentiment=item.sentiment,
            impact=item.impact,
            category=item.category,
            countries=list(item.countries),
            published_at=item.published_at,
        )


class MarketNewsResponse(CamelModel):
    """Response schema for condition-driven headlines."""

    items: list[NewsItemSchema]


class HistoricalPointSchema(CamelModel):
    volume: float
    growth_rate: float


class MarketTrendSchema(MarketSnapshotItem):
    """A market snapshot with simulated history per period label."""

    historical: dict[str, HistoricalPointSchema]

    @classmethod
    def from_item(cls, item: MarketTrendItem) -> "MarketTrendSchema":
        base = MarketSnapshotItem.from_entity(item.snapshot)
        return cls(
            **base.model_dump(),
            historical={
                label: HistoricalPointSchema(
                    volume=point.volume_usd,
                    growth_rate=point.growth_rate_pct,
                )
                for label, point in item.historical.items()
            },
        )


class PeriodSchema(CamelModel):
    total_volume: float
    avg_growth_rate: float


class MarketComparisonSchema(CamelModel):
    current: PeriodSchema
    previous: PeriodSchema


class IntelligenceSummarySchema(CamelModel):
    total_markets: int
    timeframe: str
    region: str
    product: str
    last_updated: datetime


class TrendCountsSchema(CamelModel):
    growing: int
    stable: int
    declining: int


class MarketIntelligenceResponse(CamelModel):
    """Response schema for the filtered market intelligence view."""

    summary: IntelligenceSummarySchema
    market_comparison: MarketComparisonSchema
    historical_data: list[MarketTrendSchema]
    economic_indicators: EconomicIndicatorsResponse
    trends: TrendCountsSchema

    @classmethod
    def from_result(cls, result: MarketIntelligenceResult) -> "MarketIntelligenceResponse":
        return cls(
            summary=IntelligenceSummarySchema(
                total_markets=result.total_markets,
                timeframe=result.timeframe,
                region=result.region,
                product=result.product,
                last_updated=result.generated_at,
            ),
            market_comparison=MarketComparisonSchema(
                current=PeriodSchema(
                    total_volume=result.current.total_volume_usd,
                    avg_growth_rate=result.current.avg_growth_rate_pct,
                ),
                previous=PeriodSchema(
                    total_volume=result.previous.total_volume_usd,
                    avg_growth_rate=result.previous.avg_growth_rate_pct,
                ),
            ),
            historical_data=[MarketTrendSchema.from_item(i) for i in result.historical_data],
            economic_indicators=EconomicIndicatorsResponse.from_entity(result.economic_indicators),
            trends=TrendCountsSchema(
                growing=result.trends.growing,
                stable=result.trends.stable,
                declining=result.trends.declining,
            ),
        )


class HealthResponse(CamelModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    conditions_at: Optional[datetime] = None
    scheduler_running: bool = False


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: str
    detail: str | None = None
