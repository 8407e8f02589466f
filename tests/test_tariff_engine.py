"""
Tests for the tariff engine.
"""

from tests.conftest import FIXED_NOW


class TestTariffQuote:
    """Tests for TariffEngine.quote."""

    def test_intra_eu_trade_is_tariff_free(self, reference) -> None:
        from app.domain.market.tariff_engine import TariffEngine

        quote = TariffEngine(reference).quote("Electronics", "Germany", "France", FIXED_NOW)

        assert quote.agreement_discount_pct == 100.0
        assert quote.final_tariff_pct == 0.0
        assert quote.hs_code == "8517.12.00"

    def test_us_canada_agreement_halves_tariff(self, reference) -> None:
        from app.domain.market.tariff_engine import TariffEngine

        engine = TariffEngine(reference)
        quote = engine.quote("Textiles", "Canada", "United States", FIXED_NOW)

        assert quote.base_tariff_pct == 16.5
        assert quote.final_tariff_pct == 16.5 * 0.5

        reverse = engine.quote("Textiles", "United States", "Canada", FIXED_NOW)
        assert reverse.agreement_discount_pct == 50.0
        assert reverse.final_tariff_pct == reverse.base_tariff_pct * 0.5

    def test_unknown_product_and_countries_use_defaults(self, reference) -> None:
        from app.domain.market.entities import DataSource
        from app.domain.market.tariff_engine import TariffEngine

        quote = TariffEngine(reference).quote("Unobtainium", "X", "Y", FIXED_NOW)

        assert quote.base_tariff_pct == 5.0
        assert quote.agreement_discount_pct == 0.0
        assert quote.final_tariff_pct == 5.0
        assert quote.hs_code == "0000.00.00"
        assert quote.source is DataSource.TARIFF_DATABASE

    def test_known_destination_rate(self, reference) -> None:
        from app.domain.market.tariff_engine import TariffEngine

        quote = TariffEngine(reference).quote("automotive", "united states", "CHINA", FIXED_NOW)
        assert quote.base_tariff_pct == 25.0
        assert quote.final_tariff_pct == 25.0
        assert (quote.product, quote.from_country, quote.to_country) == ("Automotive", "United States", "China")

    def test_zero_listed_rate_uses_default(self, reference) -> None:
        from app.domain.market.tariff_engine import DEFAULT_TARIFF_PCT, TariffEngine

        engine = TariffEngine(reference)
        electronics = engine.quote("Electronics", "China", "United States", FIXED_NOW)

        assert electronics.base_tariff_pct == DEFAULT_TARIFF_PCT
        assert electronics.final_tariff_pct == DEFAULT_TARIFF_PCT
        assert engine.base_tariff("Pharmaceuticals", "Germany") == DEFAULT_TARIFF_PCT
        assert engine.base_tariff("Energy", "United States") == DEFAULT_TARIFF_PCT

    def test_final_tariff_never_negative(self, reference) -> None:
        from app.domain.market.tariff_engine import TariffEngine

        engine = TariffEngine(reference)
        countries = reference.country_names()[:12]
        for product in reference.product_names():
            for origin in countries:
                for destination in countries:
                    quote = engine.quote(product, origin, destination, FIXED_NOW)
                    assert quote.final_tariff_pct >= 0.0

    def test_fallback_quote(self, reference) -> None:
        from app.domain.market.entities import DataSource
        from app.domain.market.tariff_engine import TariffEngine

        quote = TariffEngine(reference).fallback("Electronics", "Germany", "France", FIXED_NOW)
        assert quote.source is DataSource.FALLBACK
        assert quote.final_tariff_pct == 5.0
