from abc import ABC, abstractmethod
from typing import Any

from ..core.strategies import MetricStrategy


class ProviderError(RuntimeError):
    """Raised when the market data source cannot produce records."""


class MarketAdapter(ABC):
    """Source of raw market records paired with the strategy that derives them."""

    source: str = "base"
    strategy: MetricStrategy

    @abstractmethod
    async def fetch_records(self, limit: int) -> list[dict[str, Any]]:
        ...

    async def close(self) -> None:
        return None

    async def __aenter__(self) -> "MarketAdapter":
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.close()
