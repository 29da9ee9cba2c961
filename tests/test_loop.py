import asyncio
import random

import pytest
from prometheus_client import REGISTRY

from alphavault.adapters.base import MarketAdapter, ProviderError
from alphavault.adapters.mock import MockAdapter
from alphavault.config import Settings
from alphavault.core.strategies import FormulaStrategy
from alphavault.jobs.loop import Refresher
from alphavault.state import DashboardState


class FailingAdapter(MarketAdapter):
    source = "live"

    def __init__(self) -> None:
        self.strategy = FormulaStrategy()
        self.calls = 0

    async def fetch_records(self, limit: int):
        self.calls += 1
        raise ProviderError("HTTP 503")


class GatedAdapter(MarketAdapter):
    source = "live"

    def __init__(self) -> None:
        self.strategy = FormulaStrategy()
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()
        self.closed = False

    async def fetch_records(self, limit: int):
        self.entered.set()
        await self.gate.wait()
        return [{"id": "x", "name": "X", "symbol": "x", "price": 1, "volume_24h": 10, "market_cap": 100}]

    async def close(self) -> None:
        self.closed = True


def _settings(**overrides) -> Settings:
    values = {"data_source": "mock", "per_page": 5, "refresh_interval_sec": 3600, "metrics_enabled": False}
    values.update(overrides)
    return Settings(**values)


@pytest.mark.asyncio
async def test_refresh_once_replaces_snapshot():
    state = DashboardState(source="mock")
    refresher = Refresher(MockAdapter(random.Random(3)), state, _settings())
    assert await refresher.refresh_once() is True
    assert len(state.tokens) == 5
    assert state.ready
    assert state.refresh_count == 1
    first = state.tokens
    await refresher.refresh_once()
    assert state.tokens is not first
    assert state.refresh_count == 2


@pytest.mark.asyncio
async def test_provider_error_recorded_and_snapshot_kept():
    state = DashboardState(source="mock")
    good = Refresher(MockAdapter(random.Random(3)), state, _settings())
    await good.refresh_once()
    snapshot = state.tokens

    failing = FailingAdapter()
    refresher = Refresher(failing, state, _settings())
    assert await refresher.refresh_once() is False
    assert state.last_error == "HTTP 503"
    assert state.tokens == snapshot
    assert failing.calls == 1

    await good.refresh_once()
    assert state.last_error is None


@pytest.mark.asyncio
async def test_disabled_metrics_leave_counters_untouched():
    state = DashboardState(source="live")
    before = REGISTRY.get_sample_value("alphavault_refresh_errors_total")

    assert await Refresher(FailingAdapter(), state, _settings(metrics_enabled=False)).refresh_once() is False
    assert REGISTRY.get_sample_value("alphavault_refresh_errors_total") == before

    assert await Refresher(FailingAdapter(), state, _settings(metrics_enabled=True)).refresh_once() is False
    assert REGISTRY.get_sample_value("alphavault_refresh_errors_total") == before + 1


@pytest.mark.asyncio
async def test_overlapping_refresh_is_skipped():
    adapter = GatedAdapter()
    state = DashboardState(source="live")
    refresher = Refresher(adapter, state, _settings())

    in_flight = asyncio.create_task(refresher.refresh_once())
    await adapter.entered.wait()
    assert await refresher.refresh_once() is False

    adapter.gate.set()
    assert await in_flight is True
    assert state.refresh_count == 1


@pytest.mark.asyncio
async def test_start_stop_and_force_refresh():
    adapter = GatedAdapter()
    adapter.gate.set()
    state = DashboardState(source="live")
    refresher = Refresher(adapter, state, _settings())

    assert refresher.request_refresh()["queued"] is False
    refresher.start()
    for _ in range(100):
        if state.ready:
            break
        await asyncio.sleep(0.01)
    assert state.refresh_count == 1

    assert refresher.request_refresh() == {"queued": True}
    for _ in range(100):
        if state.refresh_count == 2:
            break
        await asyncio.sleep(0.01)
    assert state.refresh_count == 2

    await refresher.stop()
    assert not refresher.running
    assert adapter.closed
