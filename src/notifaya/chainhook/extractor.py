"""Flatten a Chainhook batch into transfer events.

A batch looks like::

    {
      "apply": [{"transactions": [{"transaction_identifier": {"hash": "0x.."},
                                   "metadata": {"receipt": {"events": [...]}}}]}],
      "rollback": [...]
    }

Any batch with a non-empty ``rollback`` is a reorg and yields nothing, even
if it also carries ``apply`` blocks. Missing or mistyped intermediate fields
count as zero events for that node.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from notifaya.chainhook.events import project_event

if TYPE_CHECKING:
    from collections.abc import Iterator

    from notifaya.chainhook.events import TransferEvent

logger = logging.getLogger(__name__)


class BatchStatus(enum.StrEnum):
    """How an inbound batch was classified."""

    APPLIED = "applied"
    IGNORED_REORG = "ignored_reorg"
    EMPTY = "empty"


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _tx_hash(tx: dict[str, Any]) -> str:
    value = _as_dict(tx.get("transaction_identifier")).get("hash")
    return value if isinstance(value, str) else ""


def _receipt_events(tx: dict[str, Any]) -> list[Any]:
    receipt = _as_dict(_as_dict(tx.get("metadata")).get("receipt"))
    return _as_list(receipt.get("events"))


def iter_transfers(blocks: list[Any]) -> Iterator[TransferEvent]:
    """Walk blocks → transactions → receipt events, yielding transfers."""
    for block in blocks:
        for raw_tx in _as_list(_as_dict(block).get("transactions")):
            tx = _as_dict(raw_tx)
            tx_hash = _tx_hash(tx)
            for event in _receipt_events(tx):
                transfer = project_event(event, tx_hash)
                if transfer is not None:
                    yield transfer


@dataclass(frozen=True)
class TransferEvents:
    """Lazy, restartable view over the transfers of a batch.

    Every iteration walks the payload again; nothing is cached.
    """

    blocks: list[Any] = field(default_factory=list)

    def __iter__(self) -> Iterator[TransferEvent]:
        return iter_transfers(self.blocks)


@dataclass(frozen=True)
class Extraction:
    """Classified batch plus its transfer events."""

    status: BatchStatus
    events: TransferEvents = field(default_factory=TransferEvents)


def extract(batch: Any) -> Extraction:
    """Classify *batch* and expose its transfer events.

    Reorg batches and batches without ``apply`` blocks produce an empty
    event sequence.
    """
    payload = _as_dict(batch)
    if _as_list(payload.get("rollback")):
        logger.info("Ignoring rollback batch")
        return Extraction(status=BatchStatus.IGNORED_REORG)

    blocks = _as_list(payload.get("apply"))
    if not blocks:
        logger.debug("Batch has no apply blocks")
        return Extraction(status=BatchStatus.EMPTY)

    return Extraction(status=BatchStatus.APPLIED, events=TransferEvents(blocks))
