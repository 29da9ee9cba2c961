from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from ..core.swap import flip, quote_swap
from ..observability import record_quote
from ..state import DashboardState
from ._helpers import dump, get_state, require_snapshot

router = APIRouter()


class QuotePayload(BaseModel):
    from_id: Union[int, str]
    to_id: Union[int, str]
    amount: Optional[Union[float, str]] = Field(default=None, description="Input amount; numeric strings are accepted.")
    flip: bool = Field(default=False, description="Exchange the from and to tokens before quoting.")


@router.post("/quote")
async def swap_quote(payload: QuotePayload, request: Request, state: DashboardState = Depends(get_state)):
    """Quote a simulated swap. An unusable amount yields ``quote: null``, not an error."""
    require_snapshot(state)
    from_token = state.find_token(payload.from_id)
    to_token = state.find_token(payload.to_id)
    missing = [str(tid) for tid, tok in ((payload.from_id, from_token), (payload.to_id, to_token)) if tok is None]
    if missing:
        raise HTTPException(status_code=404, detail=f"Unknown token(s): {', '.join(missing)}")
    if payload.flip:
        from_token, to_token = flip(from_token, to_token)

    quote = quote_swap(from_token, to_token, payload.amount)
    record_quote(quote is not None, request.app.state.settings.metrics_enabled)
    return {
        "from_id": from_token.id,
        "to_id": to_token.id,
        "quote": dump(quote) if quote is not None else None,
    }
