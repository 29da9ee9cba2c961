from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.filters import Bucket, TokenFilters, filter_tokens
from ..core.signals import health_label, recommendations
from ..state import DashboardState
from ._helpers import dump, get_state, require_snapshot

router = APIRouter()


@router.get("")
async def list_tokens(
    search: str = Query("", max_length=100),
    volatility: Bucket = Query("all"),
    slippage: Bucket = Query("all"),
    liquidity: Bucket = Query("all"),
    state: DashboardState = Depends(get_state),
):
    require_snapshot(state)
    filters = TokenFilters(search=search, volatility=volatility, slippage=slippage, liquidity=liquidity)
    tokens = filter_tokens(state.tokens, filters)
    return {
        "count": len(tokens),
        "last_updated": state.last_updated.isoformat() if state.last_updated else None,
        "last_error": state.last_error,
        "items": [dump(token) for token in tokens],
    }


@router.get("/{token_id}")
async def token_detail(token_id: str, state: DashboardState = Depends(get_state)):
    require_snapshot(state)
    token = state.find_token(token_id)
    if token is None:
        raise HTTPException(status_code=404, detail=f"Unknown token '{token_id}'")
    return {
        "token": dump(token),
        "health_label": health_label(token.health_score),
        "recommendations": recommendations(token),
    }
