"""Interchangeable strategies that turn raw records into tokens."""
from __future__ import annotations

import random
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, Mapping

from .metrics import Token, base_fields, derive_token

MOCK_LIQUIDITY_MAX = 50_000_000.0
MOCK_VOLATILITY_MAX = 100.0
MOCK_SLIPPAGE_MAX = 5.0
MOCK_HEALTH_MAX = 100.0


class MetricStrategy(ABC):
    """Produces a normalized :class:`Token` from one raw market record."""

    name: str = "base"

    @abstractmethod
    def derive(self, record: Mapping[str, Any], now: datetime | None = None) -> Token:
        ...

    def derive_all(self, records: Iterable[Mapping[str, Any]], now: datetime | None = None) -> list[Token]:
        return [self.derive(record, now) for record in records]


class FormulaStrategy(MetricStrategy):
    """Deterministic derivation used with live provider data."""

    name = "formula"

    def derive(self, record: Mapping[str, Any], now: datetime | None = None) -> Token:
        return derive_token(record, now)


class RandomStrategy(MetricStrategy):
    """Assigns each synthetic metric independently from a uniform distribution."""

    name = "random"

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def derive(self, record: Mapping[str, Any], now: datetime | None = None) -> Token:
        rng = self._rng
        return Token(
            **base_fields(record, now),
            liquidity=rng.random() * MOCK_LIQUIDITY_MAX,
            volatility=rng.random() * MOCK_VOLATILITY_MAX,
            slippage=rng.random() * MOCK_SLIPPAGE_MAX,
            health_score=rng.random() * MOCK_HEALTH_MAX,
        )
