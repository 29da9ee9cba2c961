from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request
from pydantic import BaseModel

from ..jobs.loop import Refresher
from ..state import DashboardState


def get_state(request: Request) -> DashboardState:
    return request.app.state.dashboard


def get_refresher(request: Request) -> Refresher:
    return request.app.state.refresher


def require_snapshot(state: DashboardState) -> None:
    """Reject data requests until the first snapshot has been loaded."""

    if not state.ready:
        detail = state.last_error or "Token snapshot not loaded yet"
        raise HTTPException(status_code=503, detail=detail)


def dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(by_alias=True, mode="json")
