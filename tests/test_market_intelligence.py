"""
Tests for the market intelligence and export use cases (pandas-backed).
"""

import pandas as pd
import pytest


class TestMarketIntelligence:
    """Tests for GetMarketIntelligenceUseCase."""

    def test_global_view(self, facade, reference) -> None:
        from app.application.market.dtos import MarketIntelligenceQuery
        from app.application.market.get_market_intelligence import GetMarketIntelligenceUseCase

        result = GetMarketIntelligenceUseCase(facade).execute(MarketIntelligenceQuery())

        total = len(reference.country_names()) * len(reference.product_names())
        assert result.total_markets == total
        assert len(result.historical_data) == 20
        assert result.trends.growing + result.trends.stable + result.trends.declining == total
        assert result.timeframe == "1M"
        assert result.economic_indicators == facade.get_economic_indicators()

    def test_single_market_figures(self, facade) -> None:
        from app.application.market.dtos import MarketIntelligenceQuery
        from app.application.market.get_market_intelligence import GetMarketIntelligenceUseCase

        snapshot = facade.get_market_snapshot("Germany", "Electronics")
        result = GetMarketIntelligenceUseCase(facade).execute(
            MarketIntelligenceQuery(region="GERMANY", product="electronics", timeframe="6M")
        )

        assert result.total_markets == 1
        assert result.timeframe == "6M"
        assert result.current.total_volume_usd == snapshot.market_size_usd
        assert result.previous.total_volume_usd == pytest.approx(snapshot.market_size_usd * 0.95)
        assert result.previous.avg_growth_rate_pct == pytest.approx(snapshot.growth_rate_pct - 1)

        (item,) = result.historical_data
        assert set(item.historical) == {"1M", "3M", "6M", "1Y"}
        assert item.historical["1Y"].volume_usd == pytest.approx(snapshot.volume_usd * 0.65)
        assert item.historical["3M"].growth_rate_pct == pytest.approx(snapshot.growth_rate_pct - 2)

    def test_region_filter_matches_region_name(self, facade, reference) -> None:
        from app.application.market.dtos import MarketIntelligenceQuery
        from app.application.market.get_market_intelligence import GetMarketIntelligenceUseCase

        result = GetMarketIntelligenceUseCase(facade).execute(
            MarketIntelligenceQuery(region="north america", product="all")
        )

        assert result.total_markets == 3 * len(reference.product_names())
        assert {item.snapshot.region for item in result.historical_data} == {"North America"}

    def test_no_match(self, facade) -> None:
        from app.application.market.dtos import MarketIntelligenceQuery
        from app.application.market.get_market_intelligence import GetMarketIntelligenceUseCase

        result = GetMarketIntelligenceUseCase(facade).execute(MarketIntelligenceQuery(region="atlantis"))

        assert result.total_markets == 0
        assert result.current.total_volume_usd == 0
        assert result.current.avg_growth_rate_pct == 0.0
        assert result.historical_data == []


class TestFilterMarkets:
    """Tests for the DataFrame filter helper."""

    def test_product_substring(self, facade) -> None:
        from app.application.market.get_market_intelligence import filter_markets, snapshots_to_frame

        frame = snapshots_to_frame(facade.get_all_market_data())
        selected = filter_markets(frame, "global", "food")
        assert set(selected["product"]) == {"Food & Beverages"}


class TestExportMarketData:
    """Tests for ExportMarketDataUseCase."""

    def test_csv_export(self, facade, tmp_path) -> None:
        from app.application.market.dtos import ExportMarketDataCommand
        from app.application.market.export_market_data import ExportMarketDataUseCase

        path = tmp_path / "out" / "markets.csv"
        result = ExportMarketDataUseCase(facade).execute(
            ExportMarketDataCommand(output_path=path, region="germany")
        )

        frame = pd.read_csv(path)
        assert result.file_format == "csv"
        assert result.rows == len(frame)
        assert set(frame["country"]) == {"Germany"}
        assert list(frame.columns[:3]) == ["country", "product", "region"]

    def test_parquet_export(self, facade, tmp_path) -> None:
        from app.application.market.dtos import ExportMarketDataCommand
        from app.application.market.export_market_data import ExportMarketDataUseCase

        path = tmp_path / "markets.parquet"
        result = ExportMarketDataUseCase(facade).execute(
            ExportMarketDataCommand(output_path=path, product="Energy")
        )

        frame = pd.read_parquet(path)
        assert result.file_format == "parquet"
        assert set(frame["product"]) == {"Energy"}
