from __future__ import annotations

from fastapi import APIRouter, Depends

from ..core.signals import (
    MAX_SIGNALS,
    MAX_SLIPPAGE,
    MAX_VOLATILITY,
    MIN_HEALTH,
    MIN_LIQUIDITY,
    buy_signals,
)
from ..state import DashboardState
from ._helpers import dump, get_state, require_snapshot

router = APIRouter()


@router.get("")
async def list_signals(state: DashboardState = Depends(get_state)):
    require_snapshot(state)
    signals = buy_signals(state.tokens, limit=MAX_SIGNALS)
    return {
        "count": len(signals),
        "criteria": {
            "min_health": MIN_HEALTH,
            "max_slippage": MAX_SLIPPAGE,
            "min_liquidity": MIN_LIQUIDITY,
            "max_volatility": MAX_VOLATILITY,
        },
        "items": [dump(token) for token in signals],
    }
