"""Chainhook payload parsing.

Provides:
- ``extract`` — classify a batch and expose its STX transfers
- ``TransferEvent`` — sender, recipient, microSTX amount, tx hash
"""

from __future__ import annotations

from notifaya.chainhook.events import EventKind, TransferEvent
from notifaya.chainhook.extractor import BatchStatus, Extraction, TransferEvents, extract

__all__ = [
    "BatchStatus",
    "EventKind",
    "Extraction",
    "TransferEvent",
    "TransferEvents",
    "extract",
]
