"""Chainhook event kinds and the transfer events projected from them.

Each ``EventKind`` has exactly one extraction rule in ``EXTRACTORS``.
Event types not listed there are ignored.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from notifaya.chainhook.amounts import MAX_AMOUNT_MICRO, format_stx, micro_to_stx

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class EventKind(enum.StrEnum):
    """Receipt event ``type`` values understood by the extractor."""

    STX_TRANSFER = "STXTransferEvent"


@dataclass(frozen=True)
class TransferEvent:
    """An STX transfer between two addresses."""

    sender: str
    recipient: str
    amount_micro: int
    tx_hash: str = ""

    @property
    def amount_stx(self) -> Decimal:
        """Transfer amount in STX."""
        return micro_to_stx(self.amount_micro)

    @property
    def amount_display(self) -> str:
        """Transfer amount in STX as shown to users."""
        return format_stx(self.amount_micro)


_MAX_AMOUNT_DIGITS = len(str(MAX_AMOUNT_MICRO))


def _parse_amount(value: Any) -> int | None:
    # Chainhook sends amounts as decimal strings
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        amount = value
    elif isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()) or len(text) > _MAX_AMOUNT_DIGITS:
            return None
        amount = int(text)
    else:
        return None
    return amount if 0 <= amount <= MAX_AMOUNT_MICRO else None


def extract_stx_transfer(data: dict[str, Any], tx_hash: str) -> TransferEvent | None:
    """Project an ``STXTransferEvent`` payload; ``None`` if malformed."""
    sender = data.get("sender")
    recipient = data.get("recipient")
    amount = _parse_amount(data.get("amount"))
    if not isinstance(sender, str) or not sender:
        return None
    if not isinstance(recipient, str) or not recipient:
        return None
    if amount is None:
        return None
    return TransferEvent(sender=sender, recipient=recipient, amount_micro=amount, tx_hash=tx_hash)


EXTRACTORS: dict[EventKind, Callable[[dict[str, Any], str], TransferEvent | None]] = {
    EventKind.STX_TRANSFER: extract_stx_transfer,
}


def project_event(event: Any, tx_hash: str) -> TransferEvent | None:
    """Apply the extraction rule for *event*'s kind, if one exists."""
    if not isinstance(event, dict):
        return None
    try:
        kind = EventKind(event.get("type"))
    except ValueError:
        return None
    data = event.get("data")
    if not isinstance(data, dict):
        logger.debug("Skipping %s without data in tx %s", kind, tx_hash)
        return None
    projected = EXTRACTORS[kind](data, tx_hash)
    if projected is None:
        logger.debug("Skipping malformed %s in tx %s", kind, tx_hash)
    return projected
