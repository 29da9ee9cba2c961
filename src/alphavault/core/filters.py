"""Search and bucket filters for the token discovery list."""
from __future__ import annotations

from typing import Callable, Iterable, Literal

from pydantic import BaseModel

from .metrics import Token

Bucket = Literal["all", "low", "medium", "high"]

# (low upper bound, high lower bound); medium is the range in between.
VOLATILITY_BUCKETS = (30.0, 60.0)
SLIPPAGE_BUCKETS = (1.0, 3.0)
LIQUIDITY_BUCKETS = (1_000_000.0, 10_000_000.0)


class TokenFilters(BaseModel):
    search: str = ""
    volatility: Bucket = "all"
    slippage: Bucket = "all"
    liquidity: Bucket = "all"


def in_bucket(value: float, bucket: str, bounds: tuple[float, float]) -> bool:
    low, high = bounds
    if bucket == "low":
        return value < low
    if bucket == "medium":
        return low <= value < high
    if bucket == "high":
        return value >= high
    return True


def matches_search(token: Token, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return needle in token.name.lower() or needle in token.symbol.lower()


def _predicate(filters: TokenFilters) -> Callable[[Token], bool]:
    def check(token: Token) -> bool:
        return (
            matches_search(token, filters.search)
            and in_bucket(token.volatility, filters.volatility, VOLATILITY_BUCKETS)
            and in_bucket(token.slippage, filters.slippage, SLIPPAGE_BUCKETS)
            and in_bucket(token.liquidity, filters.liquidity, LIQUIDITY_BUCKETS)
        )

    return check


def filter_tokens(tokens: Iterable[Token], filters: TokenFilters | None = None) -> list[Token]:
    """Apply search and bucket filters, preserving input order."""

    if filters is None:
        return list(tokens)
    check = _predicate(filters)
    return [token for token in tokens if check(token)]
