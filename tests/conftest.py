from datetime import datetime, timezone

import pytest

from alphavault.core.metrics import Token


@pytest.fixture
def base_ts() -> datetime:
    return datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_token(base_ts):
    def _make(token_id=1, symbol="TKN", **overrides) -> Token:
        fields = {
            "id": token_id,
            "name": overrides.pop("name", f"Token {token_id}"),
            "symbol": symbol,
            "price": 10.0,
            "change_24h": 1.0,
            "volume_24h": 1_000_000.0,
            "market_cap": 50_000_000.0,
            "liquidity": 8_000_000.0,
            "volatility": 20.0,
            "slippage": 1.0,
            "health_score": 75.0,
            "last_updated": base_ts,
        }
        fields.update(overrides)
        return Token(**fields)

    return _make
