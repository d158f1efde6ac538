"""Address and email validation for incoming registrations."""

from __future__ import annotations

import enum
import re

from notifaya.errors.definitions import ErrInvalidAddress, ErrInvalidEmail, ErrMissingFields

# local@domain.tld with no whitespace; deliberately not RFC 5322
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class Network(enum.StrEnum):
    """Stacks networks, keyed by their address prefix."""

    TESTNET = "ST"
    MAINNET = "SP"


def network_for(address: str) -> Network | None:
    """Return the network whose prefix *address* carries, if any."""
    for network in Network:
        if address.startswith(network.value):
            return network
    return None


def is_valid_email(email: str) -> bool:
    """Permissive ``local@domain.tld`` syntax check."""
    return bool(_EMAIL_RE.match(email))


def validate_registration(address: str | None, email: str | None) -> tuple[str, str]:
    """Normalize and validate an address/email pair.

    Surrounding whitespace is stripped before checking.

    Returns:
        The normalized ``(address, email)``.

    Raises:
        ValidationError: With a field-specific message.
    """
    address = (address or "").strip()
    email = (email or "").strip()
    if not address or not email:
        raise ErrMissingFields
    if network_for(address) is None:
        raise ErrInvalidAddress
    if not is_valid_email(email):
        raise ErrInvalidEmail
    return address, email
