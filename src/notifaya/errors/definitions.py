"""Pre-defined errors with their user-facing messages."""

from __future__ import annotations

from notifaya.errors.notify_errors import NotifayaError, ValidationError

# -- Registration ----------------------------------------------------------

ErrMissingFields = ValidationError("Address and email are required")
ErrInvalidAddress = ValidationError("Invalid Stacks address format", field="address")
ErrInvalidEmail = ValidationError("Invalid email format", field="email")
ErrInvalidBody = ValidationError("Request body must be a JSON object", field="body")

# -- Storage ---------------------------------------------------------------

MSG_REGISTER_FAILED = "Failed to register"

# -- Webhook / service -----------------------------------------------------

ErrWebhookUnauthorized = NotifayaError("unauthorized", status_code=401, code="unauthorized")
ErrEngineUnavailable = NotifayaError(
    "service not ready", status_code=503, code="engine-unavailable"
)
