"""
Risk engine: country baseline + product modifier + current conditions.

Produces the overall score, four independent sub-scores, the narrative
factors/recommendations and a coarse trend label.

All thresholds and multipliers below are hand-tuned presentation
constants, kept as documented magic numbers.
"""

from typing import Optional

from app.domain.market.entities import (
    GENERAL_PRODUCT,
    CountryProfile,
    CountryRiskSummary,
    DataSource,
    MarketConditions,
    RiskAssessment,
    RiskTrend,
)
from app.domain.market.numeric import clamp, ensure_finite, round_half_up
from app.domain.market.ports import ReferenceDataPort, normalize_key

ENGINE_NAME = "RiskEngine"

OVERALL_MIN = 10
OVERALL_MAX = 85
SUB_SCORE_MIN = 0
SUB_SCORE_MAX = 95

DEFAULT_BASE_RISK = 40
DEFAULT_POLITICAL_RISK = 35
DEFAULT_ECONOMIC_RISK = 40
DEFAULT_CURRENCY_RISK = 40
DEFAULT_TRADE_RISK = 35

# Overall market impact
INFLATION_THRESHOLD = 4.0
INFLATION_WEIGHT = 2.0
VIX_THRESHOLD = 20.0
VIX_WEIGHT = 0.5
GDP_FLOOR = 2.0
GDP_WEIGHT = 3.0
OIL_THRESHOLD = 80.0
OIL_WEIGHT = 0.1
ENERGY_DEPENDENT_COUNTRIES = frozenset({"germany", "japan", "south korea", "italy"})

# Sub-score adjustments
POLITICAL_VIX_THRESHOLD = 25.0
POLITICAL_VIX_PENALTY = 5
ECONOMIC_INFLATION_WEIGHT = 3.0
ECONOMIC_GDP_WEIGHT = 4.0
CURRENCY_USD_THRESHOLD = 105.0
CURRENCY_USD_WEIGHT = 0.5
TRADE_VOLUME_FLOOR = 95.0
TRADE_VOLUME_WEIGHT = 0.2

# Trend labels
IMPROVING_GDP_ABOVE = 3.0
IMPROVING_INFLATION_BELOW = 3.5
DETERIORATING_VIX_ABOVE = 25.0
DETERIORATING_INFLATION_ABOVE = 4.5

GENERIC_FACTORS = (
    "Standard market risks",
    "Economic volatility",
    "Political factors",
)
GENERIC_RECOMMENDATIONS = (
    "Standard risk monitoring",
    "Regular assessment",
    "Local partnerships",
)


def _clean_product(product: Optional[str]) -> Optional[str]:
    """Blank product names mean no product."""
    if product is None:
        return None
    return product.strip() or None


def _baseline(value: Optional[int], default: int) -> int:
    return default if value is None else value


def _static_sub_score(value: Optional[int], default: int) -> int:
    return int(clamp(_baseline(value, default), SUB_SCORE_MIN, SUB_SCORE_MAX))


def _factors(profile: Optional[CountryProfile]) -> tuple[str, ...]:
    if profile is not None and profile.risk_factors:
        return profile.risk_factors
    return GENERIC_FACTORS


def _recommendations(profile: Optional[CountryProfile]) -> tuple[str, ...]:
    if profile is not None and profile.recommendations:
        return profile.recommendations
    return GENERIC_RECOMMENDATIONS


class RiskEngine:
    """Scores country/product risk against a MarketConditions snapshot.

    Unknown countries and products never raise: every missing baseline
    resolves to its documented default.
    """

    def __init__(self, reference: ReferenceDataPort) -> None:
        self._reference = reference

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def assess(
        self,
        country: str,
        product: Optional[str],
        conditions: MarketConditions,
    ) -> RiskAssessment:
        """Compute a full risk assessment.

        Args:
            country: Country name, any case.
            product: Optional product category narrowing the base risk.
            conditions: The snapshot every score is derived from.

        Returns:
            A RiskAssessment stamped with the snapshot timestamp.

        Raises:
            EngineComputationError: If a score is not a finite number.
        """
        product = _clean_product(product)
        profile = self._reference.country(country)
        base = self.base_risk(country, product)
        impact = self.market_impact(country, conditions)
        overall = int(clamp(base + impact, OVERALL_MIN, OVERALL_MAX))
        return RiskAssessment(
            country=self._reference.country_display(country),
            product=self._reference.product_display(product) if product else GENERAL_PRODUCT,
            overall_risk=overall,
            political_risk=self.political_risk(profile, conditions),
            economic_risk=self.economic_risk(profile, conditions),
            currency_risk=self.currency_risk(profile, conditions),
            trade_risk=self.trade_risk(profile, conditions),
            factors=_factors(profile),
            recommendations=_recommendations(profile),
            trend=self.trend(conditions),
            computed_at=conditions.timestamp,
        )

    def fallback(
        self,
        country: str,
        product: Optional[str],
        conditions: MarketConditions,
    ) -> RiskAssessment:
        """Degraded assessment built from the baseline tables only.

        Skips every condition-driven adjustment so it cannot fail on the
        snapshot; the trend is reported as stable.
        """
        product = _clean_product(product)
        profile = self._reference.country(country)
        return RiskAssessment(
            country=self._reference.country_display(country),
            product=self._reference.product_display(product) if product else GENERAL_PRODUCT,
            overall_risk=self.base_risk(country, product),
            political_risk=_static_sub_score(
                profile.political_risk if profile else None, DEFAULT_POLITICAL_RISK
            ),
            economic_risk=_static_sub_score(
                profile.economic_risk if profile else None, DEFAULT_ECONOMIC_RISK
            ),
            currency_risk=_static_sub_score(
                profile.currency_risk if profile else None, DEFAULT_CURRENCY_RISK
            ),
            trade_risk=_static_sub_score(
                profile.trade_risk if profile else None, DEFAULT_TRADE_RISK
            ),
            factors=_factors(profile),
            recommendations=_recommendations(profile),
            trend=RiskTrend.STABLE,
            computed_at=conditions.timestamp,
            source=DataSource.FALLBACK,
        )

    def summarize(self, country: str, conditions: MarketConditions) -> CountryRiskSummary:
        """Compact country-level line (no product) for the risk overview."""
        profile = self._reference.country(country)
        overall = clamp(
            self.base_risk(country, None) + self.market_impact(country, conditions),
            OVERALL_MIN,
            OVERALL_MAX,
        )
        return CountryRiskSummary(
            country=self._reference.country_display(country),
            political_risk=self.political_risk(profile, conditions),
            economic_risk=self.economic_risk(profile, conditions),
            currency_risk=self.currency_risk(profile, conditions),
            overall_risk=int(overall),
            computed_at=conditions.timestamp,
        )

    # ------------------------------------------------------------------
    # Score components
    # ------------------------------------------------------------------

    def base_risk(self, country: str, product: Optional[str]) -> int:
        """Country baseline plus product modifier, clamped to [10, 85]."""
        profile = self._reference.country(country)
        base = _baseline(profile.base_risk if profile else None, DEFAULT_BASE_RISK)
        if product:
            product_profile = self._reference.product(product)
            if product_profile is not None and product_profile.risk_modifier is not None:
                base += product_profile.risk_modifier
        return int(clamp(base, OVERALL_MIN, OVERALL_MAX))

    def market_impact(self, country: str, conditions: MarketConditions) -> int:
        """Condition-driven addition to the overall score (never negative)."""
        impact = 0.0
        if conditions.global_inflation_pct > INFLATION_THRESHOLD:
            impact += (conditions.global_inflation_pct - INFLATION_THRESHOLD) * INFLATION_WEIGHT
        if conditions.vix_index > VIX_THRESHOLD:
            impact += (conditions.vix_index - VIX_THRESHOLD) * VIX_WEIGHT
        if conditions.global_gdp_growth_pct < GDP_FLOOR:
            impact += (GDP_FLOOR - conditions.global_gdp_growth_pct) * GDP_WEIGHT
        if (
            normalize_key(country) in ENERGY_DEPENDENT_COUNTRIES
            and conditions.oil_price_usd > OIL_THRESHOLD
        ):
            impact += (conditions.oil_price_usd - OIL_THRESHOLD) * OIL_WEIGHT
        return round_half_up(ensure_finite(ENGINE_NAME, "market_impact", impact))

    def political_risk(
        self, profile: Optional[CountryProfile], conditions: MarketConditions
    ) -> int:
        risk = float(_baseline(profile.political_risk if profile else None, DEFAULT_POLITICAL_RISK))
        if conditions.vix_index > POLITICAL_VIX_THRESHOLD:
            risk += POLITICAL_VIX_PENALTY
        return self._sub_score("political_risk", risk)

    def economic_risk(
        self, profile: Optional[CountryProfile], conditions: MarketConditions
    ) -> int:
        risk = float(_baseline(profile.economic_risk if profile else None, DEFAULT_ECONOMIC_RISK))
        if conditions.global_inflation_pct > INFLATION_THRESHOLD:
            risk += (conditions.global_inflation_pct - INFLATION_THRESHOLD) * ECONOMIC_INFLATION_WEIGHT
        if conditions.global_gdp_growth_pct < GDP_FLOOR:
            risk += (GDP_FLOOR - conditions.global_gdp_growth_pct) * ECONOMIC_GDP_WEIGHT
        return self._sub_score("economic_risk", risk)

    def currency_risk(
        self, profile: Optional[CountryProfile], conditions: MarketConditions
    ) -> int:
        risk = float(_baseline(profile.currency_risk if profile else None, DEFAULT_CURRENCY_RISK))
        if conditions.usd_index > CURRENCY_USD_THRESHOLD:
            risk += (conditions.usd_index - CURRENCY_USD_THRESHOLD) * CURRENCY_USD_WEIGHT
        return self._sub_score("currency_risk", risk)

    def trade_risk(
        self, profile: Optional[CountryProfile], conditions: MarketConditions
    ) -> int:
        risk = float(_baseline(profile.trade_risk if profile else None, DEFAULT_TRADE_RISK))
        if conditions.trade_volume_index < TRADE_VOLUME_FLOOR:
            risk += (TRADE_VOLUME_FLOOR - conditions.trade_volume_index) * TRADE_VOLUME_WEIGHT
        return self._sub_score("trade_risk", risk)

    @staticmethod
    def trend(conditions: MarketConditions) -> RiskTrend:
        if (
            conditions.global_gdp_growth_pct > IMPROVING_GDP_ABOVE
            and conditions.global_inflation_pct < IMPROVING_INFLATION_BELOW
        ):
            return RiskTrend.IMPROVING
        if (
            conditions.vix_index > DETERIORATING_VIX_ABOVE
            or conditions.global_inflation_pct > DETERIORATING_INFLATION_ABOVE
        ):
            return RiskTrend.DETERIORATING
        return RiskTrend.STABLE

    @staticmethod
    def _sub_score(field_name: str, value: float) -> int:
        ensure_finite(ENGINE_NAME, field_name, value)
        return int(clamp(round_half_up(value), SUB_SCORE_MIN, SUB_SCORE_MAX))
