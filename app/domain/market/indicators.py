"""
Economic indicator summary and condition-driven market headlines.

Both are derived straight from a MarketConditions snapshot; the only
extra input is the constant world-GDP level.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Callable

from app.domain.market.entities import (
    CommodityPrices,
    CurrencyIndicator,
    EconomicIndicators,
    GdpIndicator,
    InflationIndicator,
    MarketConditions,
    MarketNewsItem,
    TradeVolumeIndicator,
    VolatilityIndicator,
)

WORLD_GDP_USD = 105_000_000_000_000

GDP_TREND_PIVOT = 2.8
INFLATION_TREND_PIVOT = 3.5
USD_TREND_PIVOT = 103.0
VIX_HIGH_ABOVE = 25.0
VIX_MEDIUM_ABOVE = 15.0
TRADE_TREND_PIVOT = 100.0

GLOBAL = ("Global",)


def summarize_conditions(conditions: MarketConditions) -> EconomicIndicators:
    """Build the economic indicator summary for a snapshot."""
    vix = conditions.vix_index
    if vix > VIX_HIGH_ABOVE:
        level = "high"
    elif vix > VIX_MEDIUM_ABOVE:
        level = "medium"
    else:
        level = "low"

    return EconomicIndicators(
        global_gdp=GdpIndicator(
            current_usd=WORLD_GDP_USD,
            growth_pct=conditions.global_gdp_growth_pct,
            trend="up" if conditions.global_gdp_growth_pct > GDP_TREND_PIVOT else "down",
        ),
        inflation=InflationIndicator(
            global_pct=conditions.global_inflation_pct,
            trend="rising" if conditions.global_inflation_pct > INFLATION_TREND_PIVOT else "stable",
        ),
        commodities=CommodityPrices(
            oil_usd=conditions.oil_price_usd,
            gold_usd=conditions.gold_price_usd,
        ),
        currencies=CurrencyIndicator(
            usd_index=conditions.usd_index,
            trend="strengthening" if conditions.usd_index > USD_TREND_PIVOT else "weakening",
        ),
        volatility=VolatilityIndicator(vix=vix, level=level),
        trade_volume=TradeVolumeIndicator(
            index=conditions.trade_volume_index,
            trend="expanding" if conditions.trade_volume_index > TRADE_TREND_PIVOT else "contracting",
        ),
        last_updated=conditions.timestamp,
    )


@dataclass(frozen=True)
class HeadlineRule:
    """Emit a headline when ``triggered`` holds for the snapshot."""

    triggered: Callable[[MarketConditions], bool]
    title: str
    summary: Callable[[MarketConditions], str]
    sentiment: float
    impact: str
    category: str
    hours_ago: int


HEADLINE_RULES: tuple[HeadlineRule, ...] = (
    HeadlineRule(
        triggered=lambda c: c.global_inflation_pct > 4,
        title="Global Inflation Concerns Rise as Prices Surge",
        summary=lambda c: (
            f"Inflation reaches {c.global_inflation_pct:.1f}%, affecting global trade costs"
        ),
        sentiment=-0.6,
        impact="high",
        category="economic",
        hours_ago=2,
    ),
    HeadlineRule(
        triggered=lambda c: c.oil_price_usd > 85,
        title="Oil Prices Surge Amid Supply Concerns",
        summary=lambda c: (
            f"Crude oil reaches ${c.oil_price_usd:.0f}, impacting transportation costs"
        ),
        sentiment=-0.4,
        impact="medium",
        category="commodities",
        hours_ago=4,
    ),
    HeadlineRule(
        triggered=lambda c: c.vix_index > 25,
        title="Market Volatility Spikes as Uncertainty Grows",
        summary=lambda c: (
            f"VIX index reaches {c.vix_index:.1f}, indicating heightened market stress"
        ),
        sentiment=-0.7,
        impact="high",
        category="markets",
        hours_ago=1,
    ),
    HeadlineRule(
        triggered=lambda c: c.global_gdp_growth_pct > 3.5,
        title="Global Economic Growth Accelerates",
        summary=lambda c: (
            f"GDP growth reaches {c.global_gdp_growth_pct:.1f}%, boosting trade optimism"
        ),
        sentiment=0.8,
        impact="high",
        category="economic",
        hours_ago=6,
    ),
    HeadlineRule(
        triggered=lambda c: c.trade_volume_index > 108,
        title="Global Trade Volume Reaches New Highs",
        summary=lambda c: (
            f"Trade volume index at {c.trade_volume_index:.1f}, "
            "indicating robust international commerce"
        ),
        sentiment=0.7,
        impact="medium",
        category="trade",
        hours_ago=3,
    ),
)


def generate_headlines(conditions: MarketConditions) -> list[MarketNewsItem]:
    """Return one headline per rule the snapshot triggers, in rule order."""
    return [
        MarketNewsItem(
            title=rule.title,
            summary=rule.summary(conditions),
            sentiment=rule.sentiment,
            impact=rule.impact,
            category=rule.category,
            countries=GLOBAL,
            published_at=conditions.timestamp - timedelta(hours=rule.hours_ago),
        )
        for rule in HEADLINE_RULES
        if rule.triggered(conditions)
    ]
