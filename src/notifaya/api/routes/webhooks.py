"""Chainhook webhook receiver.

The endpoint always acknowledges with 200 so Chainhook never retries a
batch; everything that goes wrong while processing it is logged here.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from notifaya.api.dependencies import get_engine, verify_webhook_secret
from notifaya.api.schemas import AckResponse
from notifaya.engine.client import NotifayaEngine  # noqa: TC001

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post("/webhook", dependencies=[Depends(verify_webhook_secret)])
async def chainhook_webhook(
    request: Request,
    engine: Annotated[NotifayaEngine, Depends(get_engine)],
) -> AckResponse:
    """Receive a Chainhook batch and email registered recipients."""
    logger.info("Webhook received")
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Webhook body is not valid JSON; ignoring")
        return AckResponse()

    try:
        report = await engine.handle_webhook(payload)
    except Exception:
        logger.exception("Webhook processing error")
        return AckResponse()

    logger.info(
        "Webhook batch %s: %d matched, %d sent, %d failed",
        report.status,
        report.dispatch.matched,
        report.dispatch.sent,
        report.dispatch.failed,
    )
    return AckResponse()
