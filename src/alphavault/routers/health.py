from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..state import DashboardState
from ._helpers import get_state

router = APIRouter()


@router.get("/health")
async def health(state: DashboardState = Depends(get_state)):
    """Service status, snapshot freshness and the last fetch error, if any."""
    payload = state.health()
    if not state.ready:
        status = "starting" if state.last_error is None else "error"
    else:
        status = "degraded" if state.last_error else "ok"
    return {"status": status, "asof": datetime.now(timezone.utc).isoformat(), **payload}
