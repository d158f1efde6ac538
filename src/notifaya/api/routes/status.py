"""Service status endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from notifaya.api.dependencies import get_engine
from notifaya.api.schemas import StatusResponse
from notifaya.engine.client import NotifayaEngine  # noqa: TC001

router = APIRouter(tags=["status"])


@router.get("/status")
async def status(
    engine: Annotated[NotifayaEngine, Depends(get_engine)],
) -> StatusResponse:
    """Report that the server is running and how many addresses are registered."""
    return StatusResponse(**engine.status())
