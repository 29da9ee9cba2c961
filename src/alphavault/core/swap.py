"""Simulated swap quotes between two tokens."""
from __future__ import annotations

from math import isfinite
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .metrics import Token

SWAP_FEE_RATE = 0.003


class SwapQuote(BaseModel):
    """Deterministic quote for swapping ``input_amount`` of one token into another."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    input_amount: float = Field(..., alias="inputAmount")
    output_amount: float = Field(..., alias="outputAmount")
    rate: float = Field(..., description="Units of the output token per unit of input.")
    slippage: float = Field(..., description="Source token slippage estimate in percent.")
    fee: float = Field(..., description="Protocol fee in units of the input token.")
    price_impact: float = Field(..., alias="priceImpact")


def parse_amount(value: object) -> Optional[float]:
    """Return a finite positive amount, or None when the input is unusable."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not isfinite(amount) or amount <= 0:
        return None
    return amount


def quote_swap(
    from_token: Optional[Token],
    to_token: Optional[Token],
    amount: object,
) -> Optional[SwapQuote]:
    """Compute a swap quote, or None when no quote can be produced.

    A price ratio that underflows or overflows also yields None.
    The slippage deduction uses the source token's estimate, so
    ``price_impact`` always equals ``from_token.slippage``.
    """

    if from_token is None or to_token is None:
        return None
    if from_token.price <= 0 or to_token.price <= 0:
        return None
    input_amount = parse_amount(amount)
    if input_amount is None:
        return None

    rate = to_token.price / from_token.price
    slippage_amount = input_amount * (from_token.slippage / 100)
    fee_amount = input_amount * SWAP_FEE_RATE
    output_amount = (input_amount - slippage_amount - fee_amount) * rate
    if not (isfinite(rate) and rate > 0 and isfinite(output_amount)):
        return None
    return SwapQuote(
        input_amount=input_amount,
        output_amount=output_amount,
        rate=rate,
        slippage=from_token.slippage,
        fee=fee_amount,
        price_impact=(slippage_amount / input_amount) * 100,
    )


def flip(from_token: Optional[Token], to_token: Optional[Token]) -> tuple[Optional[Token], Optional[Token]]:
    """Exchange the two sides of a swap."""

    return to_token, from_token
