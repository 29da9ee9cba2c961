import random
from typing import Any

from ..core.strategies import RandomStrategy
from .base import MarketAdapter

MOCK_TOKENS: tuple[tuple[str, str], ...] = (
    ("Bitcoin", "BTC"),
    ("Ethereum", "ETH"),
    ("Solana", "SOL"),
    ("Cardano", "ADA"),
    ("Polkadot", "DOT"),
    ("Chainlink", "LINK"),
    ("Uniswap", "UNI"),
    ("Litecoin", "LTC"),
    ("Dogecoin", "DOGE"),
    ("Polygon", "MATIC"),
    ("Avalanche", "AVAX"),
    ("Cosmos", "ATOM"),
    ("Algorand", "ALGO"),
    ("Tezos", "XTZ"),
    ("Stellar", "XLM"),
    ("VeChain", "VET"),
    ("Theta", "THETA"),
    ("Filecoin", "FIL"),
    ("Hedera", "HBAR"),
    ("Near Protocol", "NEAR"),
    ("Internet Computer", "ICP"),
    ("Elrond", "EGLD"),
    ("Fantom", "FTM"),
    ("Harmony", "ONE"),
)


class MockAdapter(MarketAdapter):
    source = "mock"

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self.strategy = RandomStrategy(self._rng)

    async def fetch_records(self, limit: int) -> list[dict[str, Any]]:
        rng = self._rng
        return [
            {
                "id": index + 1,
                "name": name,
                "symbol": symbol,
                "price": rng.random() * 1000 + 0.01,
                "change_24h": (rng.random() - 0.5) * 20,
                "volume_24h": rng.random() * 1e9,
                "market_cap": rng.random() * 1e11,
            }
            for index, (name, symbol) in enumerate(MOCK_TOKENS[: max(limit, 0)])
        ]
