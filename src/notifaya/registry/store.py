"""RegistryStore — address-keyed registrations with idempotent upsert.

Every mutation runs read-modify-persist as one critical section under a
single ``asyncio.Lock``: the new registry is computed on a copy, written to the
backend, and only then swapped into memory. A failed write therefore leaves
the in-memory state equal to the last successful persist.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from notifaya.errors.notify_errors import StorageError, ValidationError
from notifaya.registry.models import Registration, UpsertResult, utc_now

if TYPE_CHECKING:
    from notifaya.registry.backends import RegistryBackend

logger = logging.getLogger(__name__)

_ERR_NOT_OPEN = "Registry store not open. Call open() first."


class RegistryStore:
    """In-memory registry mirrored to a persistence backend.

    Usage::

        store = RegistryStore(JSONFileBackend("registrations.json"))
        await store.open()
        result = await store.upsert("ST1...", "me@example.com")
    """

    def __init__(self, backend: RegistryBackend) -> None:
        self._backend = backend
        self._lock = asyncio.Lock()
        self._records: dict[str, Registration] = {}
        self._open = False

    @property
    def is_open(self) -> bool:
        """Whether the registry has been loaded from the backend."""
        return self._open

    async def open(self) -> None:
        """Load the persisted registry.

        Raises:
            StorageError: If the backend cannot be read or holds bad records.
        """
        raw = await self._backend.load()
        records: dict[str, Registration] = {}
        for item in raw:
            try:
                reg = Registration.from_dict(item)
            except (KeyError, ValueError) as exc:
                msg = f"Malformed registration record: {item!r}"
                raise StorageError(msg) from exc
            # Exact-match uniqueness; the first record for an address wins
            records.setdefault(reg.address, reg)
        self._records = records
        self._open = True
        logger.info("Loaded %d registrations", len(records))

    async def close(self) -> None:  # noqa: ASYNC910
        """Drop the in-memory view."""
        self._records = {}
        self._open = False

    async def upsert(self, address: str, email: str) -> UpsertResult:
        """Insert or update the registration for *address*.

        Returns:
            ``UpsertResult(created=True, changed=True)`` for a new address,
            ``(False, True)`` when the email changed and ``(False, False)``
            when the stored email is already *email*.

        Raises:
            ValidationError: If *address* or *email* is empty.
            StorageError: If persisting the registry fails.
        """
        if not address:
            raise ValidationError("address must not be empty", field="address")
        if not email:
            raise ValidationError("email must not be empty", field="email")
        self._ensure_open()

        async with self._lock:
            existing = self._records.get(address)
            if existing is not None and existing.email == email:
                return UpsertResult(created=False, changed=False)

            if existing is None:
                updated = Registration(address=address, email=email, created_at=utc_now())
            else:
                updated = existing.with_email(email)

            pending = dict(self._records)
            pending[address] = updated
            await self._backend.save([r.to_dict() for r in pending.values()])
            self._records = pending

        if existing is None:
            logger.info("New registration: %s -> %s", address, email)
            return UpsertResult(created=True, changed=True)
        logger.info("Registration updated: %s -> %s", address, email)
        return UpsertResult(created=False, changed=True)

    def get(self, address: str) -> Registration | None:
        """Return the registration for *address*, if any."""
        self._ensure_open()
        return self._records.get(address)

    def all(self) -> list[Registration]:
        """Return every registration in insertion order."""
        self._ensure_open()
        return list(self._records.values())

    def count_all(self) -> int:
        """Number of registered addresses."""
        self._ensure_open()
        return len(self._records)

    def snapshot_map(self) -> dict[str, str]:
        """Address → email mapping as of this call."""
        self._ensure_open()
        return {addr: reg.email for addr, reg in self._records.items()}

    def _ensure_open(self) -> None:
        if not self._open:
            raise RuntimeError(_ERR_NOT_OPEN)
