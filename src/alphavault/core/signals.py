"""Buy signals, health labels and per-token recommendations."""
from __future__ import annotations

from itertools import islice
from typing import Iterable

from .metrics import Token

MIN_HEALTH = 60.0
MAX_SLIPPAGE = 2.0
MIN_LIQUIDITY = 5_000_000.0
MAX_VOLATILITY = 50.0
MAX_SIGNALS = 10

HEALTH_LABELS: tuple[tuple[float, str], ...] = (
    (80.0, "Excellent"),
    (60.0, "Good"),
    (40.0, "Average"),
    (20.0, "Poor"),
)


def is_buy_signal(token: Token) -> bool:
    return (
        token.health_score >= MIN_HEALTH
        and token.slippage < MAX_SLIPPAGE
        and token.liquidity > MIN_LIQUIDITY
        and token.volatility < MAX_VOLATILITY
    )


def buy_signals(tokens: Iterable[Token], limit: int = MAX_SIGNALS) -> list[Token]:
    """Return the first ``limit`` qualifying tokens, in input order."""

    return list(islice((token for token in tokens if is_buy_signal(token)), max(limit, 0)))


def health_label(score: float) -> str:
    for threshold, label in HEALTH_LABELS:
        if score >= threshold:
            return label
    return "Critical"


def recommendations(token: Token) -> list[str]:
    recs: list[str] = []
    if token.health_score >= 70:
        recs.append("Strong fundamentals detected")
    if token.volatility < 30:
        recs.append("Low volatility - stable investment")
    if token.liquidity > 10_000_000:
        recs.append("High liquidity - easy entry/exit")
    if token.slippage < 1:
        recs.append("Low slippage - efficient trading")
    if not recs:
        recs.append("Monitor closely before investing")
    return recs
