"""Sink that only logs messages, used when no email provider is configured."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notifaya.notifications.message import EmailMessage

logger = logging.getLogger(__name__)


class LoggingSink:
    """Logs each message instead of delivering it. Nothing is retained."""

    async def send(self, message: EmailMessage) -> None:  # noqa: ASYNC910
        """Log *message*."""
        logger.info("Email delivery disabled; would send %r to %s", message.subject, message.to)
