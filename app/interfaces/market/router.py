"""
FastAPI router for the market bounded context.

All routes delegate to the query facade or a use case. No business logic here.
Input validation is handled by FastAPI query constraints.
Error mapping is handled by centralized error handlers.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request

from app.application.market.dtos import MarketIntelligenceQuery
from app.application.market.get_market_intelligence import GetMarketIntelligenceUseCase
from app.application.market.query_facade import MarketQueryFacade
from app.core.config import settings
from app.interfaces.market.dependencies import (
    get_market_facade,
    get_market_intelligence_use_case,
)
from app.interfaces.market.schemas import (
    NAME_MAX_LEN,
    TIMEFRAME_PATTERN,
    CountryRiskSummaryItem,
    EconomicIndicatorsResponse,
    ErrorResponse,
    MarketConditionsResponse,
    MarketDataResponse,
    MarketIntelligenceResponse,
    MarketNewsResponse,
    MarketSnapshotItem,
    NewsItemSchema,
    RiskAssessmentResponse,
    RiskOverviewResponse,
    TariffAssessmentResponse,
)
from app.shared.security.rate_limiting import limiter

router = APIRouter(prefix="/market", tags=["market"])

Facade = Annotated[MarketQueryFacade, Depends(get_market_facade)]
CountryParam = Annotated[str, Query(min_length=1, max_length=NAME_MAX_LEN, description="Country name")]
ProductParam = Annotated[str, Query(min_length=1, max_length=NAME_MAX_LEN, description="Product category")]


@router.get(
    "/conditions",
    response_model=MarketConditionsResponse,
    summary="Current market conditions",
    description="The condition snapshot every metric is currently computed from.",
)
def get_conditions(facade: Facade) -> MarketConditionsResponse:
    """Return the current MarketConditions snapshot."""
    return MarketConditionsResponse.from_entity(facade.conditions)


@router.get(
    "/risk",
    response_model=RiskAssessmentResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Country risk assessment",
    description="Overall and sub-risk scores for a country, optionally narrowed to a product.",
)
def get_risk(
    facade: Facade,
    country: CountryParam,
    product: Annotated[
        Optional[str],
        Query(min_length=1, max_length=NAME_MAX_LEN, description="Product category"),
    ] = None,
) -> RiskAssessmentResponse:
    """Assess risk for a country and optional product."""
    return RiskAssessmentResponse.from_entity(facade.get_risk(country, product))


@router.get(
    "/risk/overview",
    response_model=RiskOverviewResponse,
    summary="Headline risk overview",
    description="Compact risk scores for the ten headline economies.",
)
def get_risk_overview(facade: Facade) -> RiskOverviewResponse:
    """Return compact risk lines for the headline economies."""
    return RiskOverviewResponse(
        countries=[CountryRiskSummaryItem.from_entity(s) for s in facade.get_risk_overview()]
    )


@router.get(
    "/tariff",
    response_model=TariffAssessmentResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Tariff quote",
    description="Effective import tariff for a product after trade-agreement discounts.",
)
def get_tariff(
    facade: Facade,
    product: ProductParam,
    from_country: Annotated[
        str, Query(alias="fromCountry", min_length=1, max_length=NAME_MAX_LEN)
    ],
    to_country: Annotated[
        str, Query(alias="toCountry", min_length=1, max_length=NAME_MAX_LEN)
    ],
) -> TariffAssessmentResponse:
    """Quote the tariff for a product shipped between two countries."""
    return TariffAssessmentResponse.from_entity(
        facade.get_tariff(product, from_country, to_country)
    )


@router.get(
    "/snapshot",
    response_model=MarketSnapshotItem,
    responses={422: {"model": ErrorResponse}},
    summary="Market snapshot",
    description="Market size, volume and growth for one country/product pair.",
)
def get_market_snapshot(
    facade: Facade, country: CountryParam, product: ProductParam
) -> MarketSnapshotItem:
    """Return the market snapshot for a country/product pair."""
    return MarketSnapshotItem.from_entity(facade.get_market_snapshot(country, product))


@router.get(
    "/data",
    response_model=MarketDataResponse,
    summary="Bulk market data",
    description="Snapshots for every known country and product.",
)
@limiter.limit(settings.rate_limit_heavy)
def get_all_market_data(request: Request, facade: Facade) -> MarketDataResponse:
    """Return the full country x product market data set."""
    markets = facade.get_all_market_data()
    return MarketDataResponse(
        total=len(markets),
        markets=[MarketSnapshotItem.from_entity(m) for m in markets],
    )


@router.get(
    "/economic-indicators",
    response_model=EconomicIndicatorsResponse,
    summary="Economic indicators",
    description="Global GDP, inflation, commodities, currencies, volatility and trade volume.",
)
def get_economic_indicators(facade: Facade) -> EconomicIndicatorsResponse:
    """Return the economic indicator summary."""
    return EconomicIndicatorsResponse.from_entity(facade.get_economic_indicators())


@router.get(
    "/news",
    response_model=MarketNewsResponse,
    summary="Market headlines",
    description="Headlines generated from conditions that crossed their thresholds.",
)
def get_market_news(facade: Facade) -> MarketNewsResponse:
    """Return the current condition-driven headlines."""
    return MarketNewsResponse(
        items=[NewsItemSchema.from_entity(n) for n in facade.get_market_news()]
    )


@router.get(
    "/intelligence",
    response_model=MarketIntelligenceResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Market intelligence",
    description="Region/product-filtered markets with simulated history and trend counts.",
)
@limiter.limit(settings.rate_limit_heavy)
def get_market_intelligence(
    request: Request,
    use_case: Annotated[
        GetMarketIntelligenceUseCase, Depends(get_market_intelligence_use_case)
    ],
    region: Annotated[str, Query(max_length=NAME_MAX_LEN)] = "global",
    product: Annotated[str, Query(max_length=NAME_MAX_LEN)] = "all",
    timeframe: Annotated[str, Query(pattern=TIMEFRAME_PATTERN)] = "1M",
) -> MarketIntelligenceResponse:
    """Return the filtered market intelligence view."""
    result = use_case.execute(
        MarketIntelligenceQuery(region=region, product=product, timeframe=timeframe)
    )
    return MarketIntelligenceResponse.from_result(result)
