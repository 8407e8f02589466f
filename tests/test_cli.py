"""
Tests for the simulator CLI.

Commands print camelCase JSON to stdout; logs go to stderr.
"""

import json

import pandas as pd
import pytest

from tests.conftest import FIXED_NOW


@pytest.fixture
def pinned_clock(monkeypatch):
    """Build every CLI facade with its clock fixed at FIXED_NOW."""
    from app.interfaces.market.dependencies import build_market_facade

    monkeypatch.setattr(
        "simulator.cli.build_market_facade",
        lambda config: build_market_facade(config, clock=lambda: FIXED_NOW),
    )


class TestCli:
    """Tests for simulator.cli.main."""

    def test_conditions_at_instant(self, capsys) -> None:
        from app.domain.market.sampler import ConditionSampler
        from simulator.cli import main

        main(["conditions", "--at", "2024-06-01T12:00:00"])

        body = json.loads(capsys.readouterr().out)
        expected = ConditionSampler().sample(FIXED_NOW)
        assert body["timestamp"].startswith("2024-06-01T12:00:00")
        assert body["globalInflationPct"] == pytest.approx(expected.global_inflation_pct)
        assert body["oilPriceUSD"] == pytest.approx(expected.oil_price_usd)

    def test_conditions_rejects_bad_timestamp(self) -> None:
        from simulator.cli import main

        with pytest.raises(SystemExit) as exc_info:
            main(["conditions", "--at", "yesterday"])
        assert exc_info.value.code == 2

    def test_tariff(self, capsys) -> None:
        from simulator.cli import main

        main(["tariff", "--product", "Electronics", "--from", "Germany", "--to", "France"])

        body = json.loads(capsys.readouterr().out)
        assert body["finalTariffPct"] == 0.0
        assert body["toCountry"] == "France"

    def test_risk(self, capsys, pinned_clock) -> None:
        from simulator.cli import main

        main(["risk", "--country", "Turkey", "--product", "Energy"])

        body = json.loads(capsys.readouterr().out)
        assert body["overallRisk"] == 85

    def test_market_snapshot(self, capsys, pinned_clock) -> None:
        from app.domain.market.market_data_engine import MarketDataEngine
        from app.domain.market.numeric import round_half_up
        from app.domain.market.sampler import ConditionSampler
        from simulator.cli import main

        main(["market", "--country", "atlantis", "--product", "Unobtainium"])

        body = json.loads(capsys.readouterr().out)
        impact = MarketDataEngine.condition_impact(ConditionSampler().sample(FIXED_NOW))
        assert body["marketSizeUSD"] == round_half_up(1_000_000_000 * (1 + impact))
        assert body["computedAt"].startswith("2024-06-01T12:00:00")
        assert body["country"] == "atlantis"

    def test_export(self, tmp_path) -> None:
        from simulator.cli import main

        path = tmp_path / "markets.csv"
        main(["export", "--output", str(path), "--region", "canada", "--product", "energy"])

        frame = pd.read_csv(path)
        assert list(frame["country"]) == ["Canada"]
        assert list(frame["product"]) == ["Energy"]

    def test_scheduler_run_refresh(self) -> None:
        from simulator.cli import main

        main(["scheduler", "--run", "refresh_conditions"])

    def test_scheduler_unknown_task(self) -> None:
        from simulator.cli import main

        with pytest.raises(SystemExit) as exc_info:
            main(["scheduler", "--run", "retrain"])
        assert exc_info.value.code == 2
