from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..core.portfolio import InvalidAmountError
from ..state import DashboardState
from ._helpers import dump, get_state, require_snapshot

router = APIRouter()


class HoldingPayload(BaseModel):
    token_id: Union[int, str]
    amount: Optional[Union[float, str]] = None


@router.get("")
async def portfolio_summary(state: DashboardState = Depends(get_state)):
    """Holdings valued against the latest token snapshot."""
    return dump(state.portfolio.summary(state.tokens))


@router.post("")
async def add_holding(payload: HoldingPayload, state: DashboardState = Depends(get_state)):
    require_snapshot(state)
    token = state.find_token(payload.token_id)
    if token is None:
        raise HTTPException(status_code=404, detail=f"Unknown token '{payload.token_id}'")
    try:
        holding = state.portfolio.add(token, payload.amount)
    except InvalidAmountError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return dump(holding)


@router.delete("/{holding_id}")
async def remove_holding(holding_id: str, state: DashboardState = Depends(get_state)):
    try:
        holding = state.portfolio.remove(holding_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown holding '{holding_id}'") from exc
    return {"removed": holding.holding_id}
