"""
Tests for the economic indicator summary and market headlines.
"""

from datetime import timedelta

import pytest

from tests.conftest import FIXED_NOW, calm_conditions


class TestSummarizeConditions:
    """Tests for trend labels in the indicator summary."""

    def test_calm_snapshot_labels(self) -> None:
        from app.domain.market.indicators import WORLD_GDP_USD, summarize_conditions

        indicators = summarize_conditions(calm_conditions())

        assert indicators.global_gdp.current_usd == WORLD_GDP_USD
        assert indicators.global_gdp.trend == "down"
        assert indicators.inflation.trend == "stable"
        assert indicators.currencies.trend == "weakening"
        assert indicators.volatility.level == "medium"
        assert indicators.trade_volume.trend == "contracting"
        assert indicators.last_updated == FIXED_NOW

    def test_hot_snapshot_labels(self) -> None:
        from app.domain.market.indicators import summarize_conditions

        indicators = summarize_conditions(
            calm_conditions(
                global_gdp_growth_pct=3.1,
                global_inflation_pct=3.9,
                usd_index=104.0,
                vix_index=27.0,
                trade_volume_index=104.0,
            )
        )

        assert indicators.global_gdp.trend == "up"
        assert indicators.inflation.trend == "rising"
        assert indicators.currencies.trend == "strengthening"
        assert indicators.volatility.level == "high"
        assert indicators.trade_volume.trend == "expanding"

    @pytest.mark.parametrize(("vix", "level"), [(15.0, "low"), (15.1, "medium"), (25.0, "medium"), (25.1, "high")])
    def test_volatility_levels(self, vix, level) -> None:
        from app.domain.market.indicators import summarize_conditions

        assert summarize_conditions(calm_conditions(vix_index=vix)).volatility.level == level


class TestGenerateHeadlines:
    """Tests for condition-driven headlines."""

    def test_calm_snapshot_has_no_news(self) -> None:
        from app.domain.market.indicators import generate_headlines

        assert generate_headlines(calm_conditions()) == []

    def test_every_rule_triggered_in_order(self) -> None:
        from app.domain.market.indicators import generate_headlines

        news = generate_headlines(
            calm_conditions(
                global_inflation_pct=4.2,
                oil_price_usd=88.0,
                vix_index=28.0,
                global_gdp_growth_pct=3.6,
                trade_volume_index=109.0,
            )
        )

        assert [item.category for item in news] == ["economic", "commodities", "markets", "economic", "trade"]
        assert news[0].title == "Global Inflation Concerns Rise as Prices Surge"
        assert news[0].summary == "Inflation reaches 4.2%, affecting global trade costs"
        assert news[1].summary == "Crude oil reaches $88, impacting transportation costs"
        assert news[2].published_at == FIXED_NOW - timedelta(hours=1)
        assert news[3].sentiment == 0.8

    def test_headline_is_global(self) -> None:
        from app.domain.market.indicators import generate_headlines

        (item,) = generate_headlines(calm_conditions(vix_index=30.0))
        assert item.countries == ("Global",)
        assert item.impact == "high"
