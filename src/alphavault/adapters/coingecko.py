"""Live top-N market list from the public CoinGecko API."""
from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from ..config import get_settings
from ..core.strategies import FormulaStrategy
from ..observability import record_provider_latency
from .base import MarketAdapter, ProviderError

LOGGER = logging.getLogger(__name__)

MARKETS_PATH = "/coins/markets"


def normalize_market(row: Mapping[str, Any]) -> dict[str, Any]:
    """Map one provider row onto the raw record shape the strategies consume."""

    return {
        "id": row.get("id"),
        "name": row.get("name"),
        "symbol": row.get("symbol"),
        "price": row.get("current_price"),
        "change_24h": row.get("price_change_percentage_24h"),
        "volume_24h": row.get("total_volume"),
        "market_cap": row.get("market_cap"),
        "market_cap_rank": row.get("market_cap_rank"),
        "image": row.get("image"),
    }


class CoinGeckoAdapter(MarketAdapter):
    """Single-request client; failures surface as :class:`ProviderError` without retry."""

    source = "live"

    def __init__(
        self,
        base_url: str | None = None,
        vs_currency: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
        metrics_enabled: bool | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.vs_currency = vs_currency or settings.vs_currency
        self.metrics_enabled = settings.metrics_enabled if metrics_enabled is None else metrics_enabled
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.request_timeout_sec,
            headers={"Accept": "application/json"},
        )
        self.strategy = FormulaStrategy()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_records(self, limit: int) -> list[dict[str, Any]]:
        params = {
            "vs_currency": self.vs_currency,
            "order": "market_cap_desc",
            "per_page": limit,
            "page": 1,
            "sparkline": "false",
        }
        url = f"{self.base_url}{MARKETS_PATH}"
        try:
            with record_provider_latency(self.source, self.metrics_enabled):
                response = await self._client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise ProviderError(f"Market data request failed: {exc}") from exc

        if response.status_code != 200:
            raise ProviderError(f"Market data provider returned HTTP {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError("Market data provider returned malformed JSON") from exc
        if not isinstance(payload, list):
            raise ProviderError("Market data provider returned an unexpected payload")

        records = [normalize_market(row) for row in payload if isinstance(row, Mapping)]
        LOGGER.debug("Fetched %d market rows from %s", len(records), url)
        return records
