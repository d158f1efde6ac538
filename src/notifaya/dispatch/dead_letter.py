"""Dead-letter log for notifications that exhausted their retries.

Entries are appended as JSON lines so an operator can replay them later.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from notifaya.chainhook.events import TransferEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeadLetter:
    """A notification that could not be delivered."""

    to: str
    sender: str
    recipient: str
    amount_micro: int
    tx_hash: str
    error: str
    failed_at: str

    @classmethod
    def from_event(cls, to: str, event: TransferEvent, error: str, failed_at: str) -> DeadLetter:
        """Build an entry for *event* addressed to *to*."""
        return cls(
            to=to,
            sender=event.sender,
            recipient=event.recipient,
            amount_micro=event.amount_micro,
            tx_hash=event.tx_hash,
            error=error,
            failed_at=failed_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys."""
        return {
            "to": self.to,
            "sender": self.sender,
            "recipient": self.recipient,
            "amountMicro": self.amount_micro,
            "txHash": self.tx_hash,
            "error": self.error,
            "failedAt": self.failed_at,
        }


class DeadLetterLog:
    """Append-only JSON-lines file of failed notifications.

    An empty *path* disables the file; entries are then only logged.
    """

    def __init__(self, path: str | Path = "") -> None:
        self._path = Path(path) if path else None
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        """Whether entries are written to disk."""
        return self._path is not None

    async def record(self, entry: DeadLetter) -> None:
        """Log *entry* and append it to the file.

        Write failures are logged and never raised.
        """
        logger.error(
            "Notification to %s for tx %s dead-lettered: %s",
            entry.to,
            entry.tx_hash,
            entry.error,
        )
        if self._path is None:
            return
        line = json.dumps(entry.to_dict())
        async with self._lock:
            try:
                await asyncio.to_thread(self._append, line)
            except OSError:
                logger.exception("Failed to write dead letter to %s", self._path)

    def read_all(self) -> list[dict[str, Any]]:
        """Return every entry in the file (empty if disabled or missing)."""
        if self._path is None or not self._path.exists():
            return []
        lines = self._path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line.strip()]

    def _append(self, line: str) -> None:
        assert self._path is not None
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")
