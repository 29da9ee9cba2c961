import random

from ..config import Settings, get_settings
from .base import MarketAdapter
from .coingecko import CoinGeckoAdapter
from .mock import MockAdapter


def make_adapter(settings: Settings | None = None) -> MarketAdapter:
    settings = settings or get_settings()
    if settings.data_source == "live":
        return CoinGeckoAdapter(
            base_url=settings.api_base_url,
            vs_currency=settings.vs_currency,
            timeout=settings.request_timeout_sec,
            metrics_enabled=settings.metrics_enabled,
        )
    return MockAdapter(random.Random(settings.mock_seed))
