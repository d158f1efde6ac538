"""NotifayaError — base exception class and the three failure kinds.

- ``ValidationError`` — bad address/email shape, returned to the caller as 400
- ``StorageError`` — registry persistence failed, 500 on registration
- ``DispatchError`` — notification sink failure, only ever logged
"""

from __future__ import annotations


class NotifayaError(Exception):
    """Base error for all notification relay operations.

    Attributes:
        message: Human-readable error description.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        code: str = "notifaya-error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class ValidationError(NotifayaError):
    """User-correctable input error tied to a request field."""

    def __init__(self, message: str, *, field: str = "") -> None:
        super().__init__(message, status_code=400, code="validation-error")
        self.field = field


class StorageError(NotifayaError):
    """Registry backend could not be read or written."""

    def __init__(self, message: str, *, status_code: int = 500) -> None:
        super().__init__(message, status_code=status_code, code="storage-error")


class DispatchError(NotifayaError):
    """Notification sink rejected or failed to deliver a message."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code, code="dispatch-error")
