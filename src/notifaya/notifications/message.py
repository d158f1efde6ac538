"""Outgoing notification message and the sink protocol."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class EmailMessage:
    """A plain-text email addressed to a single recipient."""

    to: str
    from_email: str
    subject: str
    body: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        return asdict(self)


class NotificationSink(Protocol):
    """Something that can deliver an :class:`EmailMessage`.

    Implementations raise ``DispatchError`` when delivery fails.
    """

    async def send(self, message: EmailMessage) -> None: ...
