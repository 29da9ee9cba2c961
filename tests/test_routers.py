import asyncio
import random

import pytest
import pytest_asyncio
from prometheus_client import REGISTRY
from httpx import ASGITransport, AsyncClient

from alphavault.adapters.mock import MockAdapter
from alphavault.app import create_app
from alphavault.config import Settings
from alphavault.core.metrics import Token


def _settings(**overrides) -> Settings:
    values = {"data_source": "mock", "refresh_on_startup": False, "refresh_interval_sec": 3600}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def app():
    return create_app(_settings(), adapter=MockAdapter(random.Random(11)))


@pytest_asyncio.fixture
async def loaded_app(app):
    await app.state.refresher.refresh_once()
    return app


def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_health_before_and_after_refresh(app):
    async with _client(app) as client:
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "starting"
        assert response.json()["ready"] is False

        await app.state.refresher.refresh_once()
        body = (await client.get("/health")).json()
    assert body["status"] == "ok"
    assert body["tokens"] == 24
    assert body["source"] == "mock"


@pytest.mark.asyncio
async def test_data_endpoints_unavailable_until_loaded(app):
    app.state.dashboard.record_error("Market data provider returned HTTP 500")
    async with _client(app) as client:
        response = await client.get("/tokens")
        health = (await client.get("/health")).json()
    assert response.status_code == 503
    assert "HTTP 500" in response.json()["detail"]
    assert health["status"] == "error"


@pytest.mark.asyncio
async def test_list_and_filter_tokens(loaded_app):
    async with _client(loaded_app) as client:
        everything = (await client.get("/tokens")).json()
        searched = (await client.get("/tokens", params={"search": "bit"})).json()
        bad = await client.get("/tokens", params={"volatility": "extreme"})
    assert everything["count"] == 24
    assert {"healthScore", "marketCap", "change24h"} <= set(everything["items"][0])
    assert [item["symbol"] for item in searched["items"]] == ["BTC"]
    assert bad.status_code == 422


@pytest.mark.asyncio
async def test_token_detail(loaded_app):
    async with _client(loaded_app) as client:
        found = await client.get("/tokens/1")
        missing = await client.get("/tokens/999")
    assert found.status_code == 200
    body = found.json()
    assert body["token"]["name"] == "Bitcoin"
    assert body["health_label"] in {"Excellent", "Good", "Average", "Poor", "Critical"}
    assert body["recommendations"]
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_signals_respect_criteria(loaded_app, base_ts):
    state = loaded_app.state.dashboard
    good = Token(
        id=100, name="Good", symbol="GD", price=1, liquidity=9e6, volatility=10,
        slippage=0.5, health_score=90, last_updated=base_ts,
    )
    state.replace_tokens(list(state.tokens) + [good] * 12, base_ts)
    async with _client(loaded_app) as client:
        body = (await client.get("/signals")).json()
    assert body["count"] == len(body["items"]) <= 10
    for item in body["items"]:
        assert item["healthScore"] >= 60
        assert item["slippage"] < 2
        assert item["liquidity"] > 5_000_000
        assert item["volatility"] < 50


@pytest.mark.asyncio
async def test_swap_quote_and_no_quote(loaded_app):
    state = loaded_app.state.dashboard
    btc, eth = state.find_token(1), state.find_token(2)
    async with _client(loaded_app) as client:
        quoted = (await client.post("/swap/quote", json={"from_id": 1, "to_id": 2, "amount": "100"})).json()
        flipped = (await client.post("/swap/quote", json={"from_id": 1, "to_id": 2, "amount": 100, "flip": True})).json()
        empty = (await client.post("/swap/quote", json={"from_id": 1, "to_id": 2, "amount": "abc"})).json()
        unknown = await client.post("/swap/quote", json={"from_id": 1, "to_id": 404, "amount": 1})

    quote = quoted["quote"]
    assert quote["rate"] == pytest.approx(eth.price / btc.price)
    assert quote["priceImpact"] == pytest.approx(btc.slippage)
    assert quote["fee"] == pytest.approx(0.3)
    assert flipped["from_id"] == 2
    assert flipped["quote"]["slippage"] == pytest.approx(eth.slippage)
    assert empty["quote"] is None
    assert unknown.status_code == 404


@pytest.mark.asyncio
async def test_portfolio_lifecycle(loaded_app, base_ts):
    state = loaded_app.state.dashboard
    async with _client(loaded_app) as client:
        added = await client.post("/portfolio", json={"token_id": 1, "amount": "2"})
        assert added.status_code == 200
        holding_id = added.json()["holdingId"]
        purchase = added.json()["purchasePrice"]

        repriced = state.find_token(1).model_copy(update={"price": purchase * 2})
        others = [t for t in state.tokens if t.id != 1]
        state.replace_tokens([repriced, *others], base_ts)

        summary = (await client.get("/portfolio")).json()
        assert summary["totalCost"] == pytest.approx(2 * purchase)
        assert summary["totalPnl"] == pytest.approx(2 * purchase)
        assert summary["totalPnlPct"] == pytest.approx(100.0)

        invalid = await client.post("/portfolio", json={"token_id": 1, "amount": "-3"})
        unknown = await client.post("/portfolio", json={"token_id": 999, "amount": "1"})
        removed = await client.delete(f"/portfolio/{holding_id}")
        again = await client.delete(f"/portfolio/{holding_id}")

    assert invalid.status_code == 422
    assert unknown.status_code == 404
    assert removed.json() == {"removed": holding_id}
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_force_refresh_requires_running_loop(app):
    async with _client(app) as client:
        response = await client.post("/control/refresh")
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_metrics_endpoint(loaded_app):
    async with _client(loaded_app) as client:
        response = await client.get("/metrics")
    assert response.status_code == 200
    assert "alphavault_snapshot_tokens" in response.text


@pytest.mark.asyncio
async def test_metrics_disabled_by_app_settings():
    app = create_app(_settings(metrics_enabled=False), adapter=MockAdapter(random.Random(5)))
    await app.state.refresher.refresh_once()
    labels = {"outcome": "quoted"}
    before = REGISTRY.get_sample_value("alphavault_swap_quotes_total", labels) or 0.0

    async with _client(app) as client:
        exposed = await client.get("/metrics")
        quoted = await client.post("/swap/quote", json={"from_id": 1, "to_id": 2, "amount": 1})

    assert exposed.status_code == 404
    assert quoted.json()["quote"] is not None
    assert (REGISTRY.get_sample_value("alphavault_swap_quotes_total", labels) or 0.0) == before


@pytest.mark.asyncio
async def test_lifespan_starts_and_cancels_refresh_loop():
    app = create_app(_settings(refresh_on_startup=True), adapter=MockAdapter(random.Random(2)))
    refresher = app.state.refresher
    async with app.router.lifespan_context(app):
        assert refresher.running
        for _ in range(100):
            if app.state.dashboard.ready:
                break
            await asyncio.sleep(0.01)
        assert app.state.dashboard.ready
    assert not refresher.running
