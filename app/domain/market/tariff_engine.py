"""
Tariff engine: product/destination baseline tariff + trade-agreement discount.

Unknown products, countries and pairs degrade to defaults; quoting never
raises for unrecognised input.
"""

from datetime import datetime

from app.domain.market.entities import DataSource, TariffAssessment
from app.domain.market.numeric import ensure_finite
from app.domain.market.ports import ReferenceDataPort, normalize_key

ENGINE_NAME = "TariffEngine"

DEFAULT_TARIFF_PCT = 5.0
DEFAULT_HS_CODE = "0000.00.00"

# Internal-market members: trade between any two is tariff-free.
EU_MEMBERS = frozenset({"germany", "france", "italy", "spain", "netherlands"})
EU_DISCOUNT_PCT = 100.0

# Bilateral agreements, discount applies in both directions.
BILATERAL_DISCOUNTS_PCT: dict[frozenset[str], float] = {
    frozenset({"united states", "canada"}): 50.0,
}


class TariffEngine:
    """Quotes effective import tariffs from the reference tables."""

    def __init__(self, reference: ReferenceDataPort) -> None:
        self._reference = reference

    def quote(
        self,
        product: str,
        from_country: str,
        to_country: str,
        computed_at: datetime,
    ) -> TariffAssessment:
        """Compute the tariff a shipment pays on entering ``to_country``.

        Args:
            product: Product category name.
            from_country: Exporting country.
            to_country: Importing (destination) country.
            computed_at: Timestamp of the conditions snapshot in use.

        Returns:
            A TariffAssessment; ``final_tariff_pct`` is never negative.

        Raises:
            EngineComputationError: If the final rate is not a finite number.
        """
        base = self.base_tariff(product, to_country)
        discount = self.agreement_discount(from_country, to_country)
        final = max(0.0, base - base * discount / 100.0)
        return TariffAssessment(
            product=self._reference.product_display(product),
            from_country=self._reference.country_display(from_country),
            to_country=self._reference.country_display(to_country),
            hs_code=self.hs_code(product),
            base_tariff_pct=base,
            agreement_discount_pct=discount,
            final_tariff_pct=ensure_finite(ENGINE_NAME, "final_tariff_pct", final),
            computed_at=computed_at,
        )

    def fallback(
        self,
        product: str,
        from_country: str,
        to_country: str,
        computed_at: datetime,
    ) -> TariffAssessment:
        """Flat default quote used when a computation fails."""
        return TariffAssessment(
            product=self._reference.product_display(product),
            from_country=self._reference.country_display(from_country),
            to_country=self._reference.country_display(to_country),
            hs_code=DEFAULT_HS_CODE,
            base_tariff_pct=DEFAULT_TARIFF_PCT,
            agreement_discount_pct=0.0,
            final_tariff_pct=DEFAULT_TARIFF_PCT,
            computed_at=computed_at,
            source=DataSource.FALLBACK,
        )

    def base_tariff(self, product: str, to_country: str) -> float:
        profile = self._reference.product(product)
        if profile is None:
            return DEFAULT_TARIFF_PCT
        # A zero in the destination table counts as unlisted.
        rate = profile.base_tariffs.get(normalize_key(to_country))
        return float(rate) if rate else DEFAULT_TARIFF_PCT

    @staticmethod
    def agreement_discount(from_country: str, to_country: str) -> float:
        """Percentage of the base tariff removed by a trade agreement."""
        origin = normalize_key(from_country)
        destination = normalize_key(to_country)
        if origin in EU_MEMBERS and destination in EU_MEMBERS:
            return EU_DISCOUNT_PCT
        return BILATERAL_DISCOUNTS_PCT.get(frozenset({origin, destination}), 0.0)

    def hs_code(self, product: str) -> str:
        profile = self._reference.product(product)
        if profile is None or not profile.hs_code:
            return DEFAULT_HS_CODE
        return profile.hs_code
