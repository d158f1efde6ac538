"""Error types raised by the registry, extractor and dispatcher."""

from notifaya.errors.notify_errors import (
    DispatchError,
    NotifayaError,
    StorageError,
    ValidationError,
)

__all__ = ["DispatchError", "NotifayaError", "StorageError", "ValidationError"]
