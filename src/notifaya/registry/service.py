"""Registration service — validate, then upsert into the registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from notifaya.registry.validation import validate_registration

if TYPE_CHECKING:
    from notifaya.registry.models import RegistrationOutcome
    from notifaya.registry.store import RegistryStore

logger = logging.getLogger(__name__)


class RegistrationService:
    """Entry point for address/email registrations."""

    def __init__(self, store: RegistryStore) -> None:
        self._store = store

    async def register(self, address: str | None, email: str | None) -> RegistrationOutcome:
        """Register *address* for notifications sent to *email*.

        Raises:
            ValidationError: If the address or email is malformed.
            StorageError: If the registry cannot be persisted.
        """
        address, email = validate_registration(address, email)
        result = await self._store.upsert(address, email)
        logger.debug("Registration %s for %s", result.outcome, address)
        return result.outcome
