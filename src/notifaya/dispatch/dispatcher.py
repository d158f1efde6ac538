"""Dispatcher — join transfer events against registrations and notify.

Each matching event is sent independently: a failed send is retried a
bounded number of times, then dead-lettered, and processing moves on to
the next event.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from notifaya.dispatch.dead_letter import DeadLetter, DeadLetterLog
from notifaya.errors.notify_errors import DispatchError
from notifaya.notifications.message import EmailMessage
from notifaya.registry.models import utc_now

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from notifaya.chainhook.events import TransferEvent
    from notifaya.config.settings import DispatchConfig
    from notifaya.metrics.collector import NotifierMetrics
    from notifaya.notifications.message import NotificationSink

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "You received STX!"


def render_body(event: TransferEvent) -> str:
    """Plain-text body describing an incoming transfer."""
    return (
        f"You just received {event.amount_display} STX from {event.sender}\n\n"
        f"To address: {event.recipient}\n"
        f"Transaction: {event.tx_hash}"
    )


@dataclass
class DispatchReport:
    """Counts for one dispatched batch."""

    matched: int = 0
    sent: int = 0
    failed: int = 0


class Dispatcher:
    """Sends one notification per event whose recipient is registered."""

    def __init__(
        self,
        sink: NotificationSink,
        config: DispatchConfig,
        *,
        from_email: str = "",
        subject: str = DEFAULT_SUBJECT,
        dead_letters: DeadLetterLog | None = None,
        metrics: NotifierMetrics | None = None,
    ) -> None:
        self._sink = sink
        self._config = config
        self._from_email = from_email
        self._subject = subject
        self._dead_letters = dead_letters or DeadLetterLog()
        self._metrics = metrics

    async def dispatch(
        self,
        events: Iterable[TransferEvent],
        targets: Mapping[str, str],
    ) -> DispatchReport:
        """Notify the registered recipient of each event.

        Args:
            events: Transfer events of one batch.
            targets: Address → email mapping, built once for the batch.

        Returns:
            A :class:`DispatchReport`. Sink failures are counted, never raised.
        """
        report = DispatchReport()
        if not targets:
            logger.info("No registered addresses yet")
            return report

        for event in events:
            email = targets.get(event.recipient)
            if email is None:
                continue
            report.matched += 1
            logger.info(
                "STX received: %s STX from %s to %s",
                event.amount_display,
                event.sender,
                event.recipient,
            )
            if await self._deliver(email, event):
                report.sent += 1
            else:
                report.failed += 1
        return report

    async def _deliver(self, email: str, event: TransferEvent) -> bool:
        """Send with bounded retries; dead-letter on final failure."""
        message = EmailMessage(
            to=email,
            from_email=self._from_email,
            subject=self._subject,
            body=render_body(event),
        )
        attempts = self._config.max_retries + 1
        last_error = ""
        for attempt in range(attempts):
            try:
                await self._sink.send(message)
            except DispatchError as exc:
                last_error = exc.message
            except Exception as exc:  # noqa: BLE001
                last_error = f"{type(exc).__name__}: {exc}"
            else:
                logger.info("Email sent to %s", email)
                self._record("sent")
                return True
            logger.warning(
                "Failed to send email to %s: %s (attempt %d/%d)",
                email,
                last_error,
                attempt + 1,
                attempts,
            )
            if attempt < attempts - 1:
                await asyncio.sleep(self._config.retry_delay)

        self._record("failed")
        await self._dead_letters.record(
            DeadLetter.from_event(email, event, last_error, utc_now().isoformat())
        )
        return False

    def _record(self, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_notification(outcome)
