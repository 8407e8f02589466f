"""
Tests for the market query facade.

Covers cache reuse within the TTL, refresh invalidation, the uncached
fallback path and the aggregate queries.
"""

from datetime import timedelta
from unittest.mock import patch

from tests.conftest import FIXED_NOW


class TestCaching:
    """Tests for cache behaviour around the engines."""

    def test_repeated_risk_within_ttl_is_identical(self, facade) -> None:
        first = facade.get_risk("Turkey", "Energy")
        second = facade.get_risk("turkey", "ENERGY")

        assert first is second
        assert facade.cache.stats["hits"] == 1

    def test_expired_entry_is_recomputed(self, facade, monotonic) -> None:
        first = facade.get_risk("Turkey", "Energy")
        monotonic.advance(121)
        second = facade.get_risk("Turkey", "Energy")

        assert first is not second
        assert first == second

    def test_refresh_swaps_conditions_and_invalidates(self, facade) -> None:
        before = facade.get_risk("Germany")
        old_conditions = facade.conditions

        new_conditions = facade.refresh_conditions(FIXED_NOW + timedelta(hours=6))

        assert facade.generation == 1
        assert facade.conditions is new_conditions
        assert old_conditions.timestamp == FIXED_NOW
        after = facade.get_risk("Germany")
        assert after is not before
        assert after.computed_at == FIXED_NOW + timedelta(hours=6)
        assert facade.cache.stats["invalidations"] == 1

    def test_cache_hit_echoes_canonical_names(self, facade) -> None:
        first = facade.get_risk("turkey", "energy")
        second = facade.get_risk("TURKEY", "Energy")

        assert first is second
        assert (second.country, second.product) == ("Turkey", "Energy")

    def test_unlisted_names_echo_each_caller(self, facade) -> None:
        lower = facade.get_risk("atlantis")
        upper = facade.get_risk("ATLANTIS ")

        assert lower.country == "atlantis"
        assert upper.country == "ATLANTIS"
        assert lower.overall_risk == upper.overall_risk

    def test_blank_product_means_general(self, facade) -> None:
        from app.domain.market.entities import GENERAL_PRODUCT

        blank = facade.get_risk("Germany", "   ")
        omitted = facade.get_risk("Germany")

        assert blank.product == GENERAL_PRODUCT
        assert blank is omitted

    def test_refresh_defaults_to_facade_clock(self, facade) -> None:
        assert facade.refresh_conditions().timestamp == FIXED_NOW


class TestFallback:
    """Engine faults degrade to uncached fallback results."""

    def test_risk_fault_serves_fallback(self, facade) -> None:
        from app.domain.market.entities import DataSource
        from app.domain.market.risk_engine import RiskEngine

        with patch.object(RiskEngine, "market_impact", side_effect=RuntimeError("boom")) as impact:
            first = facade.get_risk("Turkey", "Energy")
            second = facade.get_risk("Turkey", "Energy")

        assert first.source is DataSource.FALLBACK
        assert second.source is DataSource.FALLBACK
        assert impact.call_count == 2

        recovered = facade.get_risk("Turkey", "Energy")
        assert recovered.source is DataSource.REAL_TIME

    def test_fallback_logged_with_traceback(self, facade, caplog) -> None:
        from app.domain.market.tariff_engine import TariffEngine

        with patch.object(TariffEngine, "base_tariff", side_effect=ValueError("bad table")):
            with caplog.at_level("ERROR"):
                quote = facade.get_tariff("Electronics", "Germany", "France")

        assert quote.source.value == "Fallback Data"
        assert any(record.exc_info for record in caplog.records)

    def test_bulk_market_fault_serves_baseline_set(self, facade, reference) -> None:
        from app.domain.market.entities import DataSource
        from app.domain.market.market_data_engine import MarketDataEngine

        with patch.object(MarketDataEngine, "all_snapshots", side_effect=RuntimeError("boom")):
            markets = facade.get_all_market_data()

        assert len(markets) == len(reference.country_names()) * len(reference.product_names())
        assert all(m.source is DataSource.FALLBACK for m in markets)

    def test_indicator_fault_serves_baseline_indicators(self, facade) -> None:
        from app.application.market import query_facade

        # summarize_conditions also shapes the fallback; fail only the first call.
        real = query_facade.summarize_conditions
        calls = []

        def flaky(conditions):
            calls.append(conditions)
            if len(calls) == 1:
                raise RuntimeError("boom")
            return real(conditions)

        with patch.object(query_facade, "summarize_conditions", side_effect=flaky):
            indicators = facade.get_economic_indicators()

        assert indicators.source.value == "Fallback Data"
        assert indicators.volatility.vix == 18.0
        assert indicators.last_updated == FIXED_NOW


class TestQueries:
    """Tests for the remaining facade queries."""

    def test_tariff_eu_pair(self, facade) -> None:
        assert facade.get_tariff("Electronics", "Germany", "France").final_tariff_pct == 0.0

    def test_unknown_keys_are_safe(self, facade) -> None:
        assert facade.get_risk("Atlantis").overall_risk >= 10
        assert facade.get_tariff("Unobtainium", "X", "Y").final_tariff_pct == 5.0
        assert facade.get_market_snapshot("Atlantis", "Unobtainium").region == "Other"

    def test_all_market_data_is_a_fresh_list(self, facade) -> None:
        first = facade.get_all_market_data()
        first.clear()
        assert facade.get_all_market_data()

    def test_risk_overview_has_headline_economies(self, facade) -> None:
        from app.application.market.query_facade import OVERVIEW_COUNTRIES

        overview = facade.get_risk_overview()
        assert [line.country for line in overview] == list(OVERVIEW_COUNTRIES)
        assert all(10 <= line.overall_risk <= 85 for line in overview)

    def test_news_matches_conditions(self, facade) -> None:
        from app.domain.market.indicators import generate_headlines

        assert facade.get_market_news() == generate_headlines(facade.conditions)
