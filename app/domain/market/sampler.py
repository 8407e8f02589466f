"""
Condition sampler: maps a timestamp to a MarketConditions snapshot.

Each indicator is a baseline plus layered sine/cosine terms, one per
time granularity (day-of-year, hour-of-day, minute-of-hour,
second-of-minute). Slow terms carry the large swings and fast terms add
jitter, so values look like multi-timescale market movement while staying
fully reproducible from the input timestamp.

The timestamp is used as given, in its own timezone. No clamping is done
here; downstream engines clamp their own scores.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from app.domain.market.entities import MarketConditions

PERIODS = {
    "day": 365,
    "hour": 24,
    "minute": 60,
    "second": 60,
}


@dataclass(frozen=True)
class OscillationTerm:
    """One periodic component of an indicator.

    Attributes:
        granularity: Key into PERIODS selecting the time field.
        wave: ``math.sin`` or ``math.cos``.
        amplitude: Peak contribution of this term.
    """

    granularity: str
    wave: Callable[[float], float]
    amplitude: float


@dataclass(frozen=True)
class IndicatorModel:
    baseline: float
    terms: tuple[OscillationTerm, ...]

    @property
    def lower_bound(self) -> float:
        return self.baseline - sum(abs(t.amplitude) for t in self.terms)

    @property
    def upper_bound(self) -> float:
        return self.baseline + sum(abs(t.amplitude) for t in self.terms)


# Hand-tuned constants; keep in step with the published dashboards.
CONDITION_MODEL: dict[str, IndicatorModel] = {
    "global_inflation_pct": IndicatorModel(3.2, (
        OscillationTerm("day", math.sin, 0.8),
        OscillationTerm("minute", math.sin, 0.2),
        OscillationTerm("second", math.sin, 0.1),
    )),
    "oil_price_usd": IndicatorModel(75.0, (
        OscillationTerm("day", math.sin, 15.0),
        OscillationTerm("hour", math.sin, 5.0),
        OscillationTerm("second", math.cos, 2.0),
    )),
    "gold_price_usd": IndicatorModel(1950.0, (
        OscillationTerm("day", math.cos, 50.0),
        OscillationTerm("hour", math.sin, 20.0),
        OscillationTerm("second", math.sin, 10.0),
    )),
    "usd_index": IndicatorModel(103.0, (
        OscillationTerm("day", math.sin, 4.0),
        OscillationTerm("minute", math.cos, 1.5),
        OscillationTerm("second", math.sin, 0.5),
    )),
    "vix_index": IndicatorModel(18.0, (
        OscillationTerm("hour", math.sin, 8.0),
        OscillationTerm("minute", math.sin, 3.0),
        OscillationTerm("second", math.cos, 2.0),
    )),
    "global_gdp_growth_pct": IndicatorModel(2.8, (
        OscillationTerm("day", math.cos, 0.5),
        OscillationTerm("hour", math.sin, 0.3),
        OscillationTerm("second", math.sin, 0.2),
    )),
    "trade_volume_index": IndicatorModel(100.0, (
        OscillationTerm("day", math.sin, 8.0),
        OscillationTerm("hour", math.cos, 4.0),
        OscillationTerm("second", math.sin, 2.0),
    )),
}


def _phases(now: datetime) -> dict[str, float]:
    """Return the angle (radians) of each granularity at ``now``."""
    fields = {
        "day": now.timetuple().tm_yday,
        "hour": now.hour,
        "minute": now.minute,
        "second": now.second,
    }
    return {
        name: value / PERIODS[name] * 2 * math.pi
        for name, value in fields.items()
    }


class ConditionSampler:
    """Pure, stateless mapping from a timestamp to market conditions.

    Safe to share between threads: nothing is stored between calls.
    """

    def __init__(self, model: dict[str, IndicatorModel] | None = None) -> None:
        self._model = model or CONDITION_MODEL

    def sample(self, now: datetime) -> MarketConditions:
        """Compute the conditions for a timestamp.

        Args:
            now: The instant to sample. Naive and aware datetimes are both
                accepted; the wall-clock fields are read as given.

        Returns:
            A MarketConditions snapshot stamped with ``now``.
        """
        phases = _phases(now)
        values = {
            name: indicator.baseline + sum(
                term.wave(phases[term.granularity]) * term.amplitude
                for term in indicator.terms
            )
            for name, indicator in self._model.items()
        }
        return MarketConditions(timestamp=now, **values)

    def baseline(self, now: datetime) -> MarketConditions:
        """Conditions with every oscillation removed, stamped with ``now``."""
        return MarketConditions(
            timestamp=now,
            **{name: indicator.baseline for name, indicator in self._model.items()},
        )

    def oscillation_range(self, indicator: str) -> tuple[float, float]:
        """Return the (min, max) an indicator can reach.

        Raises:
            KeyError: If the indicator is not part of the model.
        """
        model = self._model[indicator]
        return model.lower_bound, model.upper_bound
