"""SendGrid HTTP client — deliver notification emails via the v3 Web API.

- POST /v3/mail/send — send a single plain-text message
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from notifaya.errors.notify_errors import DispatchError

if TYPE_CHECKING:
    from notifaya.config.settings import EmailConfig
    from notifaya.notifications.message import EmailMessage


class SendGridSink:
    """Async SendGrid client implementing the notification sink protocol.

    Usage::

        sink = SendGridSink(config)
        await sink.connect()
        try:
            await sink.send(message)
        finally:
            await sink.close()
    """

    def __init__(self, config: EmailConfig) -> None:
        """Initialize the SendGrid sink.

        Args:
            config: Email configuration (api_key, api_url, timeout).
        """
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:  # noqa: ASYNC910
        """Create the underlying HTTP client."""
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
        }
        self._client = httpx.AsyncClient(
            base_url=self._config.api_url.rstrip("/"),
            headers=headers,
            timeout=self._config.timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    async def send(self, message: EmailMessage) -> None:
        """Send *message* through SendGrid.

        Raises:
            DispatchError: On transport errors or a non-2xx response.
        """
        client = self._ensure_connected()
        try:
            response = await client.post("/v3/mail/send", json=self._payload(message))
        except httpx.HTTPError as exc:
            raise DispatchError(f"SendGrid send failed: {exc}") from exc

        if response.status_code >= 300:
            self._raise_for_status(response)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _payload(message: EmailMessage) -> dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": {"email": message.from_email},
            "subject": message.subject,
            "content": [{"type": "text/plain", "value": message.body}],
        }

    def _ensure_connected(self) -> httpx.AsyncClient:
        """Return the HTTP client, raising if not connected."""
        if self._client is None:
            msg = "SendGrid sink not connected. Call connect() first."
            raise DispatchError(msg, status_code=500)
        return self._client

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Raise a DispatchError from a non-2xx response."""
        status = response.status_code
        try:
            body = response.json()
            errors = body.get("errors") or []
            detail = "; ".join(str(e.get("message", e)) for e in errors) or response.text
        except Exception:  # noqa: BLE001
            detail = response.text

        message = f"SendGrid rejected message ({status}): {detail}"
        raise DispatchError(message, status_code=status)
