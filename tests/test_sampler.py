"""
Tests for the condition sampler.

Pure function of the timestamp: no clock, no IO.
"""

import math
from datetime import datetime, timedelta, timezone

import pytest

from tests.conftest import FIXED_NOW

INDICATORS = (
    "global_inflation_pct",
    "oil_price_usd",
    "gold_price_usd",
    "usd_index",
    "vix_index",
    "global_gdp_growth_pct",
    "trade_volume_index",
)


class TestSample:
    """Tests for ConditionSampler.sample."""

    def test_same_timestamp_same_snapshot(self) -> None:
        from app.domain.market.sampler import ConditionSampler

        sampler = ConditionSampler()
        assert sampler.sample(FIXED_NOW) == sampler.sample(FIXED_NOW)
        assert ConditionSampler().sample(FIXED_NOW) == sampler.sample(FIXED_NOW)

    def test_snapshot_is_stamped_with_input(self) -> None:
        from app.domain.market.sampler import ConditionSampler

        assert ConditionSampler().sample(FIXED_NOW).timestamp == FIXED_NOW

    def test_new_year_midnight_values(self) -> None:
        """Day 1, 00:00:00: only the day term and the cosine terms contribute."""
        from app.domain.market.sampler import ConditionSampler

        at = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        day = math.sin(2 * math.pi / 365)
        day_cos = math.cos(2 * math.pi / 365)

        conditions = ConditionSampler().sample(at)

        assert conditions.global_inflation_pct == pytest.approx(3.2 + 0.8 * day)
        assert conditions.oil_price_usd == pytest.approx(75.0 + 15.0 * day + 2.0)
        assert conditions.gold_price_usd == pytest.approx(1950.0 + 50.0 * day_cos)
        assert conditions.usd_index == pytest.approx(103.0 + 4.0 * day + 1.5)
        assert conditions.vix_index == pytest.approx(18.0 + 2.0)
        assert conditions.global_gdp_growth_pct == pytest.approx(2.8 + 0.5 * day_cos)
        assert conditions.trade_volume_index == pytest.approx(100.0 + 8.0 * day + 4.0)

    def test_inflation_stays_in_band(self) -> None:
        from app.domain.market.sampler import ConditionSampler

        inflation = ConditionSampler().sample(FIXED_NOW).global_inflation_pct
        assert 2.0 <= inflation <= 4.5

    def test_values_stay_within_oscillation_range(self) -> None:
        from app.domain.market.sampler import ConditionSampler

        sampler = ConditionSampler()
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for step in range(0, 400):
            at = start + timedelta(days=step, hours=step % 24, minutes=step % 60, seconds=(step * 7) % 60)
            conditions = sampler.sample(at)
            for name in INDICATORS:
                low, high = sampler.oscillation_range(name)
                assert low - 1e-9 <= getattr(conditions, name) <= high + 1e-9, name

    def test_naive_timestamp_read_as_given(self) -> None:
        from app.domain.market.sampler import ConditionSampler

        sampler = ConditionSampler()
        naive = FIXED_NOW.replace(tzinfo=None)
        assert sampler.sample(naive).vix_index == sampler.sample(FIXED_NOW).vix_index


class TestBaselineAndRange:
    """Tests for baseline() and oscillation_range()."""

    def test_baseline_has_no_oscillation(self) -> None:
        from app.domain.market.sampler import ConditionSampler

        baseline = ConditionSampler().baseline(FIXED_NOW)
        assert baseline.global_inflation_pct == 3.2
        assert baseline.vix_index == 18.0
        assert baseline.trade_volume_index == 100.0
        assert baseline.timestamp == FIXED_NOW

    def test_vix_range(self) -> None:
        from app.domain.market.sampler import ConditionSampler

        assert ConditionSampler().oscillation_range("vix_index") == pytest.approx((5.0, 31.0))

    def test_unknown_indicator_raises(self) -> None:
        from app.domain.market.sampler import ConditionSampler

        with pytest.raises(KeyError):
            ConditionSampler().oscillation_range("copper_price")
