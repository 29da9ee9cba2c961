"""Pure derivation functions and the normalized token model."""
from __future__ import annotations

from datetime import datetime, timezone
from math import isfinite
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_VOLATILITY = 100.0
MISSING_RANK_FACTOR = 10.0
SLIPPAGE_FLOOR = 0.1
SLIPPAGE_CEILING = 5.0
HEALTH_BASE = 50.0


class Token(BaseModel):
    """Immutable view of one token's market data and synthetic indicators."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: Union[int, str] = Field(..., description="Provider identifier, unique within a snapshot.")
    name: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1, description="Ticker, upper-cased for display.")
    price: float = Field(0.0, ge=0)
    change_24h: float = Field(0.0, alias="change24h", description="24h price change in percent.")
    volume_24h: float = Field(0.0, ge=0, alias="volume24h")
    market_cap: float = Field(0.0, ge=0, alias="marketCap")
    liquidity: float = Field(0.0, ge=0, description="Estimated tradable depth in quote currency.")
    volatility: float = Field(0.0, ge=0, le=100)
    slippage: float = Field(0.0, ge=0, le=5, description="Estimated execution cost in percent.")
    health_score: float = Field(0.0, ge=0, le=100, alias="healthScore")
    market_cap_rank: Optional[int] = Field(None, gt=0, alias="marketCapRank")
    image: Optional[str] = Field(None, description="Provider icon URL, display only.")
    last_updated: datetime = Field(..., alias="lastUpdated")

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.upper()


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _to_float(value: object, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not isfinite(number):
        return default
    return number


def _to_rank(value: object) -> Optional[int]:
    number = _to_float(value, default=0.0)
    if number < 1 or number != int(number):
        return None
    return int(number)


def _non_negative(value: object) -> float:
    return max(0.0, _to_float(value))


def liquidity(volume_24h: float, market_cap: float) -> float:
    """Conservative depth proxy: the smaller of turnover and capitalisation estimates."""

    return min(2 * volume_24h, 0.1 * market_cap)


def rank_factor(rank: Optional[int]) -> float:
    if rank is None:
        return MISSING_RANK_FACTOR
    return min(rank / 10, MISSING_RANK_FACTOR)


def volatility(change_24h: float, rank: Optional[int]) -> float:
    return min(2 * abs(change_24h) + rank_factor(rank), MAX_VOLATILITY)


def slippage(volume_24h: float, market_cap: float) -> float:
    """Estimated slippage in percent, driven by the turnover ratio."""

    volume = volume_24h or 1.0
    cap = market_cap or 1.0
    return _clamp((1 - volume / cap) * 3, SLIPPAGE_FLOOR, SLIPPAGE_CEILING)


def health_score(
    volume_24h: float,
    market_cap: float,
    change_24h: float,
    rank: Optional[int],
) -> float:
    """Composite 0-100 indicator rewarding rank, turnover and price stability."""

    score = HEALTH_BASE
    if rank is not None:
        score += max(0.0, 20 - rank / 5)
    if volume_24h and market_cap:
        score += min(20.0, (volume_24h / market_cap) * 100)
    score += max(0.0, 10 - abs(change_24h) / 2)
    return _clamp(score, 0.0, 100.0)


def base_fields(record: Mapping[str, Any], now: datetime | None = None) -> dict[str, Any]:
    """Normalise the raw market fields of a provider record.

    Missing or malformed numbers become 0, negative amounts are floored at 0
    and a rank that is not a positive integer is dropped.
    """

    raw_id = record.get("id")
    if isinstance(raw_id, bool) or not isinstance(raw_id, (int, str)):
        raw_id = str(raw_id) if raw_id is not None else None
    image = record.get("image")
    symbol = str(record.get("symbol") or "").strip()
    name = str(record.get("name") or "").strip()
    fallback = str(raw_id) if raw_id not in (None, "") else "unknown"
    return {
        "id": raw_id if raw_id not in (None, "") else fallback,
        "name": name or symbol or fallback,
        "symbol": symbol or name or fallback,
        "price": _non_negative(record.get("price")),
        "change_24h": _to_float(record.get("change_24h")),
        "volume_24h": _non_negative(record.get("volume_24h")),
        "market_cap": _non_negative(record.get("market_cap")),
        "market_cap_rank": _to_rank(record.get("market_cap_rank")),
        "image": image if isinstance(image, str) and image else None,
        "last_updated": now or datetime.now(timezone.utc),
    }


def derive_token(record: Mapping[str, Any], now: datetime | None = None) -> Token:
    """Build a :class:`Token` from a raw record using the deterministic formulas."""

    fields = base_fields(record, now)
    volume = fields["volume_24h"]
    cap = fields["market_cap"]
    change = fields["change_24h"]
    rank = fields["market_cap_rank"]
    return Token(
        **fields,
        liquidity=liquidity(volume, cap),
        volatility=volatility(change, rank),
        slippage=slippage(volume, cap),
        health_score=health_score(volume, cap, change, rank),
    )


__all__ = [
    "Token",
    "base_fields",
    "derive_token",
    "health_score",
    "liquidity",
    "rank_factor",
    "slippage",
    "volatility",
]
