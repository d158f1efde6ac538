"""Address registration endpoint."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from notifaya.api.dependencies import get_engine
from notifaya.api.schemas import (
    REGISTRATION_MESSAGES,
    ErrorResponse,
    MessageResponse,
    RegisterRequest,
)
from notifaya.engine.client import NotifayaEngine  # noqa: TC001
from notifaya.errors.definitions import MSG_REGISTER_FAILED
from notifaya.errors.notify_errors import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["registrations"])


@router.post(
    "/register",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def register(
    body: RegisterRequest,
    engine: Annotated[NotifayaEngine, Depends(get_engine)],
) -> MessageResponse:
    """Register a Stacks address to be notified of incoming STX transfers."""
    try:
        outcome = await engine.register(body.address, body.email)
    except StorageError as exc:
        logger.exception("Registration error")
        raise StorageError(MSG_REGISTER_FAILED) from exc
    return MessageResponse(message=REGISTRATION_MESSAGES[outcome])
