"""Simulated portfolio holdings and profit/loss."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .metrics import Token
from .swap import parse_amount

TokenId = Union[int, str]


class InvalidAmountError(ValueError):
    """Raised when a holding amount is not a finite positive number."""


class Holding(BaseModel):
    """A token snapshot frozen at acquisition time plus the quantity held."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    holding_id: str = Field(default_factory=lambda: uuid.uuid4().hex, alias="holdingId")
    token: Token
    amount: float = Field(..., gt=0)
    purchase_price: float = Field(..., ge=0, alias="purchasePrice")
    purchase_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="purchaseDate")


class HoldingValuation(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    holding: Holding
    current_price: float = Field(..., alias="currentPrice")
    value: float
    cost: float
    pnl: float
    pnl_pct: float = Field(..., alias="pnlPct")


class PortfolioSummary(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    holdings: list[HoldingValuation]
    total_value: float = Field(..., alias="totalValue")
    total_cost: float = Field(..., alias="totalCost")
    total_pnl: float = Field(..., alias="totalPnl")
    total_pnl_pct: float = Field(..., alias="totalPnlPct")


def _pct(pnl: float, cost: float) -> float:
    return (pnl / cost) * 100 if cost > 0 else 0.0


def value_holding(holding: Holding, current_price: Optional[float] = None) -> HoldingValuation:
    """Mark a holding to ``current_price``, or to its frozen price when omitted."""

    price = holding.token.price if current_price is None else current_price
    value = holding.amount * price
    cost = holding.amount * holding.purchase_price
    pnl = value - cost
    return HoldingValuation(
        holding=holding,
        current_price=price,
        value=value,
        cost=cost,
        pnl=pnl,
        pnl_pct=_pct(pnl, cost),
    )


class Portfolio:
    """Ordered collection of holdings owned by the dashboard state."""

    def __init__(self) -> None:
        self._holdings: list[Holding] = []

    def __len__(self) -> int:
        return len(self._holdings)

    @property
    def holdings(self) -> tuple[Holding, ...]:
        return tuple(self._holdings)

    def add(self, token: Token, amount: object) -> Holding:
        quantity = parse_amount(amount)
        if quantity is None:
            raise InvalidAmountError(f"Invalid holding amount: {amount!r}")
        holding = Holding(token=token, amount=quantity, purchase_price=token.price)
        self._holdings.append(holding)
        return holding

    def remove(self, holding_id: str) -> Holding:
        for index, holding in enumerate(self._holdings):
            if holding.holding_id == holding_id:
                return self._holdings.pop(index)
        raise KeyError(holding_id)

    def valuations(self, tokens: Iterable[Token] = ()) -> list[HoldingValuation]:
        """Value every holding against the latest snapshot in ``tokens``.

        Holdings whose token is absent from the snapshot keep their frozen price.
        """

        marks: Mapping[TokenId, float] = {token.id: token.price for token in tokens}
        return [value_holding(h, marks.get(h.token.id)) for h in self._holdings]

    def summary(self, tokens: Iterable[Token] = ()) -> PortfolioSummary:
        rows = self.valuations(tokens)
        total_value = sum(row.value for row in rows)
        total_cost = sum(row.cost for row in rows)
        total_pnl = total_value - total_cost
        return PortfolioSummary(
            holdings=rows,
            total_value=total_value,
            total_cost=total_cost,
            total_pnl=total_pnl,
            total_pnl_pct=_pct(total_pnl, total_cost),
        )
