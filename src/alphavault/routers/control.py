from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..jobs.loop import Refresher
from ._helpers import get_refresher

router = APIRouter(prefix="/control", tags=["control"])


@router.post("/refresh")
async def force_refresh(refresher: Refresher = Depends(get_refresher)) -> dict[str, object]:
    result = refresher.request_refresh()
    if not result.get("queued"):
        raise HTTPException(status_code=409, detail=result.get("reason", "Unable to queue refresh"))
    return result
