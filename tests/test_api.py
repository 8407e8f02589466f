"""
Tests for the HTTP API.

Runs the real application (lifespan included) through TestClient with
the background scheduler disabled. Validates response shapes
(camelCase), validation errors, error mapping, security headers, rate
limiting and the realtime endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from tests.conftest import FIXED_NOW


@pytest.fixture
def client(monkeypatch):
    from app.core.config import settings
    from app.main import create_app
    from app.shared.security.rate_limiting import limiter

    monkeypatch.setattr(settings, "realtime_enabled", False)
    limiter.reset()
    with TestClient(create_app(clock=lambda: FIXED_NOW)) as test_client:
        yield test_client
    limiter.reset()


class TestHealthEndpoint:
    """Tests for GET /api/v1/health."""

    def test_health(self, client) -> None:
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["schedulerRunning"] is False
        assert body["conditionsAt"].startswith("2024-06-01T12:00:00")


class TestMarketEndpoints:
    """Tests for the /api/v1/market routes."""

    def test_conditions(self, client) -> None:
        body = client.get("/api/v1/market/conditions").json()
        assert {"timestamp", "globalInflationPct", "oilPriceUSD", "goldPriceUSD", "vixIndex"} <= set(body)
        assert 2.0 <= body["globalInflationPct"] <= 4.5

    def test_risk(self, client) -> None:
        response = client.get("/api/v1/market/risk", params={"country": "Turkey", "product": "Energy"})

        assert response.status_code == 200
        body = response.json()
        assert body["overallRisk"] == 85
        assert body["product"] == "Energy"
        assert body["source"] == "Real-time Market Data"
        assert body["trend"] in {"improving", "stable", "deteriorating"}

    def test_risk_is_stable_between_refreshes(self, client) -> None:
        params = {"country": "Turkey", "product": "Energy"}
        assert client.get("/api/v1/market/risk", params=params).json() == client.get(
            "/api/v1/market/risk", params=params
        ).json()

    def test_risk_requires_country(self, client) -> None:
        response = client.get("/api/v1/market/risk")

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "Invalid request"
        assert "country" in body["detail"]

    def test_unknown_country_is_not_an_error(self, client) -> None:
        body = client.get("/api/v1/market/risk", params={"country": "Atlantis"}).json()
        assert body["country"] == "Atlantis"
        assert body["product"] == "General"

    def test_risk_overview(self, client) -> None:
        body = client.get("/api/v1/market/risk/overview").json()
        assert len(body["countries"]) == 10
        assert body["countries"][0]["country"] == "United States"
        assert body["countries"][0]["source"] == "Real-time Risk Assessment"

    def test_tariff(self, client) -> None:
        response = client.get(
            "/api/v1/market/tariff",
            params={"product": "Electronics", "fromCountry": "Germany", "toCountry": "France"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["finalTariffPct"] == 0.0
        assert body["fromCountry"] == "Germany"
        assert body["source"] == "Real-time Tariff Database"

    def test_tariff_requires_both_countries(self, client) -> None:
        response = client.get("/api/v1/market/tariff", params={"product": "Electronics", "fromCountry": "Germany"})
        assert response.status_code == 422
        assert "toCountry" in response.json()["detail"]

    def test_snapshot(self, client) -> None:
        from app.domain.market.market_data_engine import MarketDataEngine
        from app.domain.market.numeric import round_half_up
        from app.domain.market.sampler import ConditionSampler

        impact = MarketDataEngine.condition_impact(ConditionSampler().sample(FIXED_NOW))
        expected_size = round_half_up(1_000_000_000 * (1 + impact))

        body = client.get(
            "/api/v1/market/snapshot", params={"country": "Atlantis", "product": "Unobtainium"}
        ).json()
        assert body["marketSizeUSD"] == expected_size
        assert body["volumeUSD"] == round_half_up(expected_size * 1.2)
        assert body["region"] == "Other"

    def test_market_data(self, client) -> None:
        body = client.get("/api/v1/market/data").json()
        assert body["total"] == len(body["markets"]) > 0
        assert "growthRatePct" in body["markets"][0]

    def test_economic_indicators(self, client) -> None:
        body = client.get("/api/v1/market/economic-indicators").json()
        assert {"globalGDP", "inflation", "commodities", "currencies", "volatility", "tradeVolume"} <= set(body)
        assert "global" in body["inflation"]

    def test_news(self, client) -> None:
        body = client.get("/api/v1/market/news").json()
        assert isinstance(body["items"], list)

    def test_intelligence(self, client) -> None:
        response = client.get(
            "/api/v1/market/intelligence",
            params={"region": "europe", "product": "energy", "timeframe": "3M"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["summary"]["timeframe"] == "3M"
        assert body["summary"]["totalMarkets"] == 21

    def test_intelligence_rejects_bad_timeframe(self, client) -> None:
        response = client.get("/api/v1/market/intelligence", params={"timeframe": "2W"})
        assert response.status_code == 422


class TestSecurityHeaders:
    """Tests for security headers on responses."""

    def test_security_headers_present(self, client) -> None:
        response = client.get("/api/v1/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"

    def test_error_responses_carry_headers(self, client) -> None:
        response = client.get("/api/v1/market/risk")
        assert response.headers["X-Frame-Options"] == "DENY"


class TestRateLimiting:
    """Tests for rate limiting behavior."""

    def test_rate_limit_returns_429(self, client) -> None:
        from app.core.config import settings

        allowed = int(settings.rate_limit_heavy.split("/")[0])
        statuses = [client.get("/api/v1/market/data").status_code for _ in range(allowed + 1)]

        assert statuses[:allowed] == [200] * allowed
        assert statuses[-1] == 429


class TestRealtimeEndpoints:
    """Tests for the /api/v1/realtime routes."""

    def test_websocket_session(self, client) -> None:
        with client.websocket_connect("/api/v1/realtime/ws/market") as ws:
            assert ws.receive_json()["event"] == "connection-status"

            ws.send_json({"action": "ping"})
            assert ws.receive_json()["event"] == "pong"

            ws.send_json({"action": "request-risk-data", "country": "Atlantis"})
            reply = ws.receive_json()
            assert reply["event"] == "risk-data-update"
            assert 10 <= reply["data"]["overallRisk"] <= 85

    def test_scheduler_status(self, client) -> None:
        body = client.get("/api/v1/realtime/scheduler/status").json()
        assert body["running"] is False

    def test_run_refresh_task(self, client) -> None:
        before = client.get("/api/v1/realtime/stream/status").json()["conditions_generation"]

        response = client.post("/api/v1/realtime/scheduler/run/refresh_conditions")

        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        after = client.get("/api/v1/realtime/stream/status").json()["conditions_generation"]
        assert after == before + 1

    def test_run_broadcast_task(self, client) -> None:
        body = client.post("/api/v1/realtime/scheduler/run/broadcast_market_update").json()
        assert body["status"] == "completed"
        assert body["details"]["dispatched"] is True

    def test_run_unknown_task(self, client) -> None:
        response = client.post("/api/v1/realtime/scheduler/run/retrain")

        assert response.status_code == 404
        assert response.json()["error"] == "Unknown task"

    def test_stream_status(self, client) -> None:
        body = client.get("/api/v1/realtime/stream/status").json()
        assert body["active_connections"] == 0
        assert "hits" in body["cache"]
