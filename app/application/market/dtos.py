"""
Data Transfer Objects for the market application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from app.domain.market.entities import EconomicIndicators, MarketSnapshot


@dataclass(frozen=True)
class MarketIntelligenceQuery:
    """Input DTO for the filtered market intelligence view.

    Attributes:
        region: Region or country substring; "global" selects everything.
        product: Product substring; "all" selects everything.
        timeframe: Reporting window label (1M, 3M, 6M, 1Y), echoed back.
    """

    region: str = "global"
    product: str = "all"
    timeframe: str = "1M"


@dataclass(frozen=True)
class HistoricalPoint:
    """Simulated market volume and growth at an earlier period."""

    volume_usd: float
    growth_rate_pct: float


@dataclass(frozen=True)
class MarketTrendItem:
    """A current snapshot with its simulated history keyed by period label."""

    snapshot: MarketSnapshot
    historical: dict[str, HistoricalPoint]


@dataclass(frozen=True)
class PeriodSummary:
    total_volume_usd: float
    avg_growth_rate_pct: float


@dataclass(frozen=True)
class GrowthTrendCounts:
    """Number of markets growing (>5 %), stable (0-5 %) and declining (<0 %)."""

    growing: int
    stable: int
    declining: int


@dataclass(frozen=True)
class MarketIntelligenceResult:
    """Output DTO for the market intelligence view.

    Attributes:
        total_markets: Markets matching the filters (before truncation).
        historical_data: At most 20 items, in reference order.
    """

    region: str
    product: str
    timeframe: str
    total_markets: int
    generated_at: datetime
    current: PeriodSummary
    previous: PeriodSummary
    historical_data: list[MarketTrendItem]
    trends: GrowthTrendCounts
    economic_indicators: EconomicIndicators


@dataclass(frozen=True)
class ExportMarketDataCommand:
    """Input DTO for exporting the bulk market data set.

    Attributes:
        output_path: Destination file; ``.parquet`` selects Parquet, anything
            else is written as CSV.
        region: Optional region/country filter, as in the intelligence view.
        product: Optional product filter.
    """

    output_path: Path
    region: str = "global"
    product: str = "all"


@dataclass(frozen=True)
class ExportMarketDataResult:
    path: Path
    rows: int
    file_format: str
