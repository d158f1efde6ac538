"""API request/response schemas (Pydantic models)."""

from __future__ import annotations

from pydantic import BaseModel, Field

from notifaya.registry.models import RegistrationOutcome

# ---------------------------------------------------------------------------
# Common
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str


class MessageResponse(BaseModel):
    """Human-readable success message."""

    message: str


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Register an address for transfer notifications."""

    address: str | None = Field(None, description="Stacks address (ST... or SP...)")
    email: str | None = Field(None, description="Where notifications are sent")


REGISTRATION_MESSAGES: dict[RegistrationOutcome, str] = {
    RegistrationOutcome.CREATED: (
        "Registration successful! You'll be notified of incoming STX transfers."
    ),
    RegistrationOutcome.UPDATED: "Email updated successfully!",
    RegistrationOutcome.UNCHANGED: "Address already registered with this email",
}


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


class StatusResponse(BaseModel):
    """Service status with the number of registrations."""

    status: str = "running"
    registrations: int


class AckResponse(BaseModel):
    """Unconditional webhook acknowledgement."""

    status: str = "ok"
