"""Registry — watched addresses and their notification targets."""

from notifaya.registry.models import Registration, RegistrationOutcome, UpsertResult
from notifaya.registry.service import RegistrationService
from notifaya.registry.store import RegistryStore

__all__ = [
    "Registration",
    "RegistrationOutcome",
    "RegistrationService",
    "RegistryStore",
    "UpsertResult",
]
