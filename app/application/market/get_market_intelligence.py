"""
Use case: Filtered market intelligence with simulated history.

Input: MarketIntelligenceQuery (region, product, timeframe)
Output: MarketIntelligenceResult
Side effects: None (reads through the query facade cache).
Failure cases: None; an empty filter result yields zero totals.
"""

import logging

import pandas as pd

from app.application.market.dtos import (
    GrowthTrendCounts,
    HistoricalPoint,
    MarketIntelligenceQuery,
    MarketIntelligenceResult,
    MarketTrendItem,
    PeriodSummary,
)
from app.application.market.query_facade import MarketQueryFacade
from app.domain.market.entities import MarketSnapshot

logger = logging.getLogger(__name__)

ALL_REGIONS = "global"
ALL_PRODUCTS = "all"
MAX_HISTORICAL_ITEMS = 20

# period label -> (volume factor, growth offset in percentage points)
HISTORY_ADJUSTMENTS = {
    "1M": (0.95, 1.0),
    "3M": (0.85, 2.0),
    "6M": (0.75, 3.0),
    "1Y": (0.65, 5.0),
}
PREVIOUS_PERIOD_VOLUME_FACTOR = 0.95
PREVIOUS_PERIOD_GROWTH_OFFSET = 1.0

GROWING_ABOVE_PCT = 5.0


def snapshots_to_frame(snapshots: list[MarketSnapshot]) -> pd.DataFrame:
    """Tabulate snapshots, keeping their reference order in the index."""
    return pd.DataFrame(
        [
            {
                "country": s.country,
                "product": s.product,
                "region": s.region,
                "market_size_usd": s.market_size_usd,
                "volume_usd": s.volume_usd,
                "growth_rate_pct": s.growth_rate_pct,
                "computed_at": s.computed_at,
                "source": s.source.value,
            }
            for s in snapshots
        ],
        columns=[
            "country", "product", "region", "market_size_usd",
            "volume_usd", "growth_rate_pct", "computed_at", "source",
        ],
    )


def filter_markets(frame: pd.DataFrame, region: str, product: str) -> pd.DataFrame:
    """Apply case-insensitive substring filters on region/country and product."""
    region_term = region.strip().lower()
    if region_term and region_term != ALL_REGIONS:
        mask = frame["region"].str.lower().str.contains(region_term, regex=False) | frame[
            "country"
        ].str.lower().str.contains(region_term, regex=False)
        frame = frame[mask]

    product_term = product.strip().lower()
    if product_term and product_term != ALL_PRODUCTS:
        frame = frame[frame["product"].str.lower().str.contains(product_term, regex=False)]
    return frame


class GetMarketIntelligenceUseCase:
    """Builds the market intelligence view over the bulk market data set."""

    def __init__(self, facade: MarketQueryFacade) -> None:
        self._facade = facade

    def execute(self, query: MarketIntelligenceQuery) -> MarketIntelligenceResult:
        """Run the market intelligence use case.

        Args:
            query: Region/product filters and the timeframe label.

        Returns:
            Period comparison, growth-trend counts, up to 20 items with
            simulated history, and the current economic indicators.
        """
        snapshots = self._facade.get_all_market_data()
        frame = snapshots_to_frame(snapshots)
        selected = filter_markets(frame, query.region, query.product)

        logger.info(
            "Market intelligence: region=%s, product=%s, matched=%d/%d",
            query.region,
            query.product,
            len(selected),
            len(frame),
        )

        growth = selected["growth_rate_pct"]
        current = PeriodSummary(
            total_volume_usd=float(selected["market_size_usd"].sum()),
            avg_growth_rate_pct=float(growth.mean()) if len(selected) else 0.0,
        )
        previous = PeriodSummary(
            total_volume_usd=current.total_volume_usd * PREVIOUS_PERIOD_VOLUME_FACTOR,
            avg_growth_rate_pct=(
                current.avg_growth_rate_pct - PREVIOUS_PERIOD_GROWTH_OFFSET
                if len(selected)
                else 0.0
            ),
        )
        trends = GrowthTrendCounts(
            growing=int((growth > GROWING_ABOVE_PCT).sum()),
            stable=int(growth.between(0.0, GROWING_ABOVE_PCT).sum()),
            declining=int((growth < 0.0).sum()),
        )

        historical = [
            MarketTrendItem(
                snapshot=snapshots[position],
                historical=self._history(snapshots[position]),
            )
            for position in selected.index[:MAX_HISTORICAL_ITEMS]
        ]

        return MarketIntelligenceResult(
            region=query.region,
            product=query.product,
            timeframe=query.timeframe,
            total_markets=len(selected),
            generated_at=self._facade.conditions.timestamp,
            current=current,
            previous=previous,
            historical_data=historical,
            trends=trends,
            economic_indicators=self._facade.get_economic_indicators(),
        )

    @staticmethod
    def _history(snapshot: MarketSnapshot) -> dict[str, HistoricalPoint]:
        return {
            label: HistoricalPoint(
                volume_usd=snapshot.volume_usd * volume_factor,
                growth_rate_pct=snapshot.growth_rate_pct - growth_offset,
            )
            for label, (volume_factor, growth_offset) in HISTORY_ADJUSTMENTS.items()
        }
