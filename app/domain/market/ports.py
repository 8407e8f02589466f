"""
Port interfaces (ABCs) for the market bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Hashable, Optional

from app.domain.market.entities import CountryProfile, ProductProfile


def normalize_key(name: str) -> str:
    """Normalize a country or product name for reference lookups."""
    return name.strip().casefold()


class ReferenceDataPort(ABC):
    """Port for the read-only country and product reference tables."""

    @abstractmethod
    def country(self, name: str) -> Optional[CountryProfile]:
        """Return the profile for a country, or None if it is not listed."""
        raise NotImplementedError

    @abstractmethod
    def product(self, name: str) -> Optional[ProductProfile]:
        """Return the profile for a product, or None if it is not listed."""
        raise NotImplementedError

    @abstractmethod
    def country_names(self) -> list[str]:
        """Return display names of every known country, in reference order."""
        raise NotImplementedError

    @abstractmethod
    def product_names(self) -> list[str]:
        """Return display names of every known product, in reference order."""
        raise NotImplementedError

    def country_display(self, name: str) -> str:
        """Canonical name of a listed country, else the trimmed input."""
        profile = self.country(name)
        return profile.name if profile is not None else name.strip()

    def product_display(self, name: str) -> str:
        """Canonical name of a listed product, else the trimmed input."""
        profile = self.product(name)
        return profile.name if profile is not None else name.strip()


class ResultCachePort(ABC):
    """Port for the short-lived result cache shared by all callers."""

    @abstractmethod
    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None on a miss or expiry."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value, replacing any previous entry for the key."""
        raise NotImplementedError

    @abstractmethod
    def invalidate_all(self) -> None:
        """Make every key an immediate miss."""
        raise NotImplementedError

    @property
    @abstractmethod
    def stats(self) -> dict:
        """Return hit/miss/eviction counters and the current entry count."""
        raise NotImplementedError
