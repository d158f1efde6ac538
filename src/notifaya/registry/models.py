"""Registration records and upsert outcomes.

A registration is the persisted pair of a watched Stacks address and the
email that should hear about incoming transfers. Records are immutable;
updates produce a new record via :func:`dataclasses.replace`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    # JavaScript-style ISO strings end in "Z"
    text = str(value).replace("Z", "+00:00")
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        # naive timestamps are UTC
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class Registration:
    """A watched address and its notification target."""

    address: str
    email: str
    created_at: datetime
    updated_at: datetime | None = None

    def with_email(self, email: str, *, now: datetime | None = None) -> Registration:
        """Return a copy pointing at *email* with ``updated_at`` set."""
        return replace(self, email=email, updated_at=now or utc_now())

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the on-disk JSON shape (camelCase keys)."""
        data: dict[str, Any] = {
            "address": self.address,
            "email": self.email,
            "createdAt": _format_timestamp(self.created_at),
        }
        if self.updated_at is not None:
            data["updatedAt"] = _format_timestamp(self.updated_at)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Registration:
        """Build a registration from its on-disk JSON shape."""
        created = _parse_timestamp(data.get("createdAt")) or utc_now()
        return cls(
            address=str(data["address"]),
            email=str(data["email"]),
            created_at=created,
            updated_at=_parse_timestamp(data.get("updatedAt")),
        )


class RegistrationOutcome(enum.StrEnum):
    """The three distinct results of a registration call."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class UpsertResult:
    """Result of :meth:`RegistryStore.upsert`."""

    created: bool
    changed: bool

    @property
    def outcome(self) -> RegistrationOutcome:
        """Collapse the flags into a :class:`RegistrationOutcome`."""
        if self.created:
            return RegistrationOutcome.CREATED
        if self.changed:
            return RegistrationOutcome.UPDATED
        return RegistrationOutcome.UNCHANGED
