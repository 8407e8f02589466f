"""
Static reference tables for the market engines.

Implements ReferenceDataPort from in-process constants. The raw tables
are keyed by display name and have partial coverage; they are merged
once into immutable CountryProfile / ProductProfile objects keyed by
normalized name.
"""

import logging
from typing import Optional

from app.domain.market.entities import CountryProfile, ProductProfile
from app.domain.market.ports import ReferenceDataPort, normalize_key

logger = logging.getLogger(__name__)

# Reference order used for bulk market data.
COUNTRIES = (
    "United States", "China", "Germany", "Japan", "United Kingdom",
    "France", "India", "Italy", "Brazil", "Canada", "South Korea",
    "Spain", "Australia", "Mexico", "Indonesia", "Netherlands",
    "Saudi Arabia", "Turkey", "Taiwan", "Belgium", "Switzerland",
    "Austria", "Poland", "Ireland", "Finland", "Romania", "Czech Republic",
    "Greece", "Portugal", "Hungary", "Slovakia", "Croatia", "Slovenia",
    "Ukraine", "Thailand", "Bangladesh", "Vietnam", "Philippines",
    "New Zealand", "Argentina", "Chile", "Peru", "Israel", "Qatar",
    "Kuwait", "Nigeria", "Egypt", "Morocco", "Kenya", "Ethiopia", "Ghana",
)

PRODUCTS = (
    "Electronics", "Textiles", "Automotive", "Machinery", "Chemicals",
    "Food & Beverages", "Pharmaceuticals", "Energy", "Metals", "Agriculture",
    "Software", "Telecommunications", "Construction", "Mining", "Forestry",
)

REGIONS = {
    "North America": ("United States", "Canada", "Mexico"),
    "Europe": (
        "Germany", "United Kingdom", "France", "Italy", "Spain", "Netherlands",
        "Belgium", "Switzerland", "Austria", "Poland", "Ireland", "Finland",
        "Romania", "Czech Republic", "Greece", "Portugal", "Hungary",
        "Slovakia", "Croatia", "Slovenia", "Ukraine",
    ),
    "Asia Pacific": (
        "China", "Japan", "South Korea", "India", "Indonesia", "Taiwan",
        "Australia", "Thailand", "Bangladesh", "Vietnam", "Philippines",
        "New Zealand",
    ),
    "Latin America": ("Brazil", "Argentina", "Chile", "Peru"),
    "Middle East & Africa": (
        "Saudi Arabia", "Turkey", "Israel", "Qatar", "Kuwait", "Nigeria",
        "Egypt", "Morocco", "Kenya", "Ethiopia", "Ghana",
    ),
}

BASE_RISK = {
    "Germany": 22, "United States": 25, "China": 45, "Japan": 28,
    "United Kingdom": 32, "France": 26, "India": 55, "Italy": 38,
    "Brazil": 65, "Canada": 20, "South Korea": 30, "Spain": 35,
    "Australia": 24, "Mexico": 48, "Indonesia": 58, "Netherlands": 21,
    "Saudi Arabia": 62, "Turkey": 75, "Taiwan": 35, "Belgium": 23,
    "Switzerland": 18, "Austria": 20, "Poland": 35, "Ireland": 22,
    "Finland": 19, "Romania": 45, "Czech Republic": 30, "Greece": 42,
    "Portugal": 28, "Hungary": 38, "Slovakia": 32, "Croatia": 40,
    "Slovenia": 25, "Ukraine": 85, "Thailand": 45, "Bangladesh": 68,
    "Vietnam": 52, "Philippines": 58, "New Zealand": 18, "Argentina": 72,
    "Chile": 35, "Peru": 48, "Israel": 55, "Qatar": 45, "Kuwait": 50,
    "Nigeria": 78, "Egypt": 68, "Morocco": 48, "Kenya": 65,
    "Ethiopia": 72, "Ghana": 55,
}

POLITICAL_RISK = {
    "Germany": 15, "United States": 28, "China": 55, "Japan": 18,
    "United Kingdom": 25, "France": 22, "India": 45, "Italy": 35,
    "Brazil": 60, "Canada": 12, "Turkey": 80, "Saudi Arabia": 70,
    "Ukraine": 95, "Nigeria": 85, "Ethiopia": 78,
}

ECONOMIC_RISK = {
    "Germany": 25, "United States": 22, "China": 38, "Japan": 30,
    "United Kingdom": 28, "France": 24, "India": 50, "Italy": 42,
    "Brazil": 68, "Canada": 18, "Turkey": 75, "Saudi Arabia": 55,
    "Argentina": 85, "Nigeria": 78, "Ethiopia": 72,
}

CURRENCY_RISK = {
    "Germany": 18, "United States": 10, "China": 35, "Japan": 22,
    "United Kingdom": 28, "France": 18, "India": 55, "Italy": 18,
    "Brazil": 75, "Canada": 25, "Turkey": 85, "Saudi Arabia": 45,
    "Argentina": 90, "Nigeria": 80, "Ethiopia": 65,
}

TRADE_RISK = {
    "Germany": 20, "United States": 25, "China": 45, "Japan": 22,
    "United Kingdom": 30, "France": 24, "India": 48, "Brazil": 55,
    "Turkey": 65, "Ukraine": 95, "Nigeria": 75, "Ethiopia": 68,
}

COUNTRY_GROWTH_PCT = {
    "United States": 2.5, "China": 4.8, "Germany": 1.8, "Japan": 1.2,
    "United Kingdom": 2.1, "France": 1.9, "India": 6.2, "Italy": 1.5,
    "Brazil": 3.2, "Canada": 2.3, "South Korea": 2.8, "Spain": 2.0,
    "Australia": 2.4, "Mexico": 2.9, "Indonesia": 5.1, "Netherlands": 1.7,
    "Saudi Arabia": 2.6, "Turkey": 3.8, "Taiwan": 2.2, "Belgium": 1.6,
    "Switzerland": 1.4, "Austria": 1.6, "Poland": 3.5, "Ireland": 4.2,
    "Finland": 1.8, "Romania": 4.1, "Czech Republic": 2.7, "Greece": 1.9,
    "Portugal": 2.2, "Hungary": 3.1, "Slovakia": 2.8, "Croatia": 2.5,
    "Slovenia": 2.3, "Ukraine": 3.0, "Thailand": 3.2, "Bangladesh": 6.1,
    "Vietnam": 6.8, "Philippines": 5.8, "New Zealand": 2.1,
    "Argentina": 2.8, "Chile": 2.5, "Peru": 3.2, "Israel": 3.4,
    "Qatar": 2.1, "Kuwait": 2.3, "Nigeria": 2.6, "Egypt": 3.3,
    "Morocco": 3.1, "Kenya": 5.7, "Ethiopia": 8.1, "Ghana": 5.4,
}

COUNTRY_MARKET_SIZE_USD = {
    "United States": 25e9, "China": 18e9, "Germany": 4.5e9, "Japan": 4.2e9,
    "United Kingdom": 3.1e9, "France": 2.8e9, "India": 3.5e9,
    "Italy": 2.2e9, "Brazil": 2.1e9, "Canada": 1.8e9, "South Korea": 1.6e9,
    "Spain": 1.4e9, "Australia": 1.3e9, "Mexico": 1.2e9,
    "Indonesia": 1.1e9, "Netherlands": 1.0e9, "Saudi Arabia": 9e8,
    "Turkey": 8e8, "Taiwan": 7e8, "Belgium": 6e8, "Switzerland": 5.8e8,
    "Austria": 4.5e8, "Poland": 6.2e8, "Ireland": 3.8e8, "Finland": 2.8e8,
    "Romania": 2.4e8, "Czech Republic": 2.6e8, "Greece": 2e8,
    "Portugal": 2.3e8, "Hungary": 1.6e8, "Slovakia": 1.1e8,
    "Croatia": 6e7, "Slovenia": 5.5e7, "Ukraine": 1.8e8, "Thailand": 5.4e8,
    "Bangladesh": 4.1e8, "Vietnam": 3.6e8, "Philippines": 3.8e8,
    "New Zealand": 2.1e8, "Argentina": 4.5e8, "Chile": 3.2e8, "Peru": 2.2e8,
    "Israel": 4.2e8, "Qatar": 1.8e8, "Kuwait": 1.4e8, "Nigeria": 4.8e8,
    "Egypt": 3.5e8, "Morocco": 1.2e8, "Kenya": 1e8, "Ethiopia": 9e7,
    "Ghana": 7e7,
}

RISK_NARRATIVES: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "Germany": (
        ("EU regulatory complexity", "Energy dependency concerns", "Export-dependent economy"),
        ("Leverage EU market access", "Monitor energy costs", "Consider local partnerships"),
    ),
    "United States": (
        ("Political polarization effects", "Trade policy uncertainties", "Dollar strength impact"),
        ("Monitor trade policy changes", "Hedge currency exposure", "Diversify supply chains"),
    ),
    "China": (
        ("Regulatory environment changes", "Geopolitical tensions", "Economic transition risks"),
        ("Navigate regulatory landscape", "Protect intellectual property", "Build government relations"),
    ),
    "Brazil": (
        ("Currency volatility", "Political instability", "Infrastructure challenges"),
        ("Use currency hedging", "Consider trade insurance", "Monitor political developments"),
    ),
    "Turkey": (
        ("Extreme currency instability", "High inflation environment", "Political tensions"),
        ("Extreme caution advised", "Comprehensive risk insurance", "Short-term contracts only"),
    ),
    "Ukraine": (
        ("Ongoing conflict situation", "Infrastructure damage", "Economic disruption"),
        ("Avoid new commitments", "Monitor security situation", "Consider alternative routes"),
    ),
    "Nigeria": (
        ("Currency devaluation risks", "Political instability", "Infrastructure challenges"),
        ("Secure payment terms", "Use trade insurance", "Monitor currency policies"),
    ),
    "Ethiopia": (
        ("Political tensions", "Currency restrictions", "Infrastructure limitations"),
        ("Careful market assessment", "Local partnership essential", "Monitor political developments"),
    ),
}

PRODUCT_RISK_MODIFIER = {
    "Electronics": 0, "Automotive": 5, "Textiles": -3, "Machinery": 2,
    "Chemicals": 8, "Food & Beverages": -2, "Pharmaceuticals": 12,
    "Energy": 15, "Metals": 3, "Agriculture": -1, "Software": -5,
    "Telecommunications": 3, "Construction": 4, "Mining": 8, "Forestry": 2,
}

PRODUCT_GROWTH_PCT = {
    "Electronics": 8.5, "Automotive": 4.2, "Machinery": 3.8,
    "Chemicals": 3.5, "Energy": 6.2, "Textiles": 2.8,
    "Food & Beverages": 3.2, "Pharmaceuticals": 7.1, "Metals": 2.5,
    "Agriculture": 2.1, "Software": 12.3, "Telecommunications": 9.1,
    "Construction": 4.5, "Mining": 3.2, "Forestry": 2.8,
}

PRODUCT_SIZE_MULTIPLIER = {
    "Electronics": 2.5, "Automotive": 2.0, "Machinery": 1.8,
    "Chemicals": 1.5, "Energy": 3.0, "Textiles": 0.8,
    "Food & Beverages": 1.2, "Pharmaceuticals": 1.6, "Metals": 1.4,
    "Agriculture": 1.0, "Software": 3.2, "Telecommunications": 2.1,
    "Construction": 1.7, "Mining": 2.3, "Forestry": 0.9,
}

HS_CODES = {
    "Electronics": "8517.12.00", "Textiles": "5208.11.00",
    "Automotive": "8703.23.00", "Machinery": "8479.89.00",
    "Chemicals": "2902.11.00", "Food & Beverages": "2009.11.00",
    "Pharmaceuticals": "3004.10.00", "Energy": "2709.00.00",
    "Metals": "7208.10.00", "Agriculture": "1001.99.00",
}

# Import tariff (%) by destination, then product.
DESTINATION_TARIFFS_PCT = {
    "Germany": {
        "Automotive": 8.5, "Electronics": 3.2, "Textiles": 12.0,
        "Machinery": 2.8, "Chemicals": 5.5, "Food & Beverages": 15.2,
        "Pharmaceuticals": 0.0, "Energy": 4.1, "Metals": 6.2,
        "Agriculture": 18.5,
    },
    "United States": {
        "Automotive": 2.5, "Electronics": 0.0, "Textiles": 16.5,
        "Machinery": 1.9, "Chemicals": 3.7, "Food & Beverages": 12.8,
        "Pharmaceuticals": 0.0, "Energy": 0.0, "Metals": 7.5,
        "Agriculture": 4.2,
    },
    "China": {
        "Automotive": 25.0, "Electronics": 10.0, "Textiles": 17.5,
        "Machinery": 8.5, "Chemicals": 6.5, "Food & Beverages": 22.0,
        "Pharmaceuticals": 4.0, "Energy": 1.0, "Metals": 12.0,
        "Agriculture": 15.8,
    },
    "Brazil": {
        "Automotive": 35.0, "Electronics": 18.0, "Textiles": 25.0,
        "Machinery": 14.0, "Chemicals": 12.0, "Food & Beverages": 20.0,
        "Pharmaceuticals": 8.0, "Energy": 6.0, "Metals": 15.0,
        "Agriculture": 10.0,
    },
    "India": {
        "Automotive": 30.0, "Electronics": 15.0, "Textiles": 20.0,
        "Machinery": 10.0, "Chemicals": 7.5, "Food & Beverages": 30.0,
        "Pharmaceuticals": 5.0, "Energy": 2.5, "Metals": 12.5,
        "Agriculture": 25.0,
    },
}


def _region_of(country: str) -> Optional[str]:
    for region, members in REGIONS.items():
        if country in members:
            return region
    return None


def _build_countries() -> dict[str, CountryProfile]:
    profiles: dict[str, CountryProfile] = {}
    for name in COUNTRIES:
        factors, recommendations = RISK_NARRATIVES.get(name, ((), ()))
        profiles[normalize_key(name)] = CountryProfile(
            name=name,
            region=_region_of(name),
            base_risk=BASE_RISK.get(name),
            political_risk=POLITICAL_RISK.get(name),
            economic_risk=ECONOMIC_RISK.get(name),
            currency_risk=CURRENCY_RISK.get(name),
            trade_risk=TRADE_RISK.get(name),
            growth_rate_pct=COUNTRY_GROWTH_PCT.get(name),
            market_size_usd=COUNTRY_MARKET_SIZE_USD.get(name),
            risk_factors=factors,
            recommendations=recommendations,
        )
    return profiles


def _build_products() -> dict[str, ProductProfile]:
    profiles: dict[str, ProductProfile] = {}
    for name in PRODUCTS:
        profiles[normalize_key(name)] = ProductProfile(
            name=name,
            risk_modifier=PRODUCT_RISK_MODIFIER.get(name),
            growth_rate_pct=PRODUCT_GROWTH_PCT.get(name),
            market_size_multiplier=PRODUCT_SIZE_MULTIPLIER.get(name),
            hs_code=HS_CODES.get(name),
            base_tariffs={
                normalize_key(destination): rates[name]
                for destination, rates in DESTINATION_TARIFFS_PCT.items()
                if name in rates
            },
        )
    return profiles


class StaticReferenceData(ReferenceDataPort):
    """In-memory, read-only reference tables built once at construction."""

    def __init__(self) -> None:
        self._countries = _build_countries()
        self._products = _build_products()
        logger.info(
            "Reference tables loaded: %d countries, %d products.",
            len(self._countries),
            len(self._products),
        )

    def country(self, name: str) -> Optional[CountryProfile]:
        return self._countries.get(normalize_key(name))

    def product(self, name: str) -> Optional[ProductProfile]:
        return self._products.get(normalize_key(name))

    def country_names(self) -> list[str]:
        return [profile.name for profile in self._countries.values()]

    def product_names(self) -> list[str]:
        return [profile.name for profile in self._products.values()]
