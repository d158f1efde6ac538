"""NotifayaEngine — central engine client owning the registry and dispatcher."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from notifaya.chainhook.extractor import BatchStatus, extract
from notifaya.dispatch.dispatcher import DispatchReport

if TYPE_CHECKING:
    from notifaya.config.settings import AppConfig
    from notifaya.dispatch.dispatcher import Dispatcher
    from notifaya.metrics.collector import NotifierMetrics
    from notifaya.notifications.message import NotificationSink
    from notifaya.notifications.sendgrid import SendGridSink
    from notifaya.registry.models import RegistrationOutcome
    from notifaya.registry.service import RegistrationService
    from notifaya.registry.store import RegistryStore

logger = logging.getLogger(__name__)

# Error messages
_ERR_NOT_INITIALIZED = "Engine not initialized. Call initialize() first."


@dataclass
class WebhookReport:
    """What happened to one inbound Chainhook batch."""

    status: BatchStatus
    dispatch: DispatchReport = field(default_factory=DispatchReport)


class NotifayaEngine:
    """Owns the registry store, notification sink and dispatcher.

    The configuration is read once here and handed to each collaborator;
    nothing below the engine looks at the environment.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        sink: NotificationSink | None = None,
        metrics: NotifierMetrics | None = None,
    ) -> None:
        """Initialize engine with configuration.

        Args:
            config: Application configuration.
            sink: Optional notification sink; built from ``config.email``
                when omitted.
            metrics: Optional metrics to update as work is done.
        """
        self._config = config
        self._initialized = False
        self._injected_sink = sink
        self._metrics = metrics

        self._store: RegistryStore | None = None
        self._registrations: RegistrationService | None = None
        self._sink: NotificationSink | None = None
        self._sendgrid: SendGridSink | None = None
        self._dispatcher: Dispatcher | None = None

    async def initialize(self) -> None:
        """Load the registry and start the notification sink.

        Raises:
            RuntimeError: If already initialized.
            StorageError: If the registry cannot be loaded.
        """
        if self._initialized:
            msg = "Engine already initialized"
            raise RuntimeError(msg)

        from notifaya.dispatch.dead_letter import DeadLetterLog
        from notifaya.dispatch.dispatcher import Dispatcher
        from notifaya.registry.backends import create_backend
        from notifaya.registry.service import RegistrationService
        from notifaya.registry.store import RegistryStore

        # Registry
        self._store = RegistryStore(create_backend(self._config.registry))
        await self._store.open()
        self._registrations = RegistrationService(self._store)
        self._update_registration_gauge()

        # Notification sink
        self._sink = await self._build_sink()

        self._dispatcher = Dispatcher(
            self._sink,
            self._config.dispatch,
            from_email=self._config.email.from_email,
            subject=self._config.email.subject,
            dead_letters=DeadLetterLog(self._config.dispatch.dead_letter_path),
            metrics=self._metrics,
        )

        self._initialized = True

    async def _build_sink(self) -> NotificationSink:
        if self._injected_sink is not None:
            return self._injected_sink

        email = self._config.email
        if not email.is_configured:
            from notifaya.notifications.logging_sink import LoggingSink

            logger.warning("SendGrid API key not configured; emails will only be logged")
            return LoggingSink()

        from notifaya.notifications.sendgrid import SendGridSink

        if not email.from_email:
            logger.warning("No sender address configured; SendGrid will reject messages")
        self._sendgrid = SendGridSink(email)
        await self._sendgrid.connect()
        logger.info("SendGrid API key configured")
        return self._sendgrid

    async def close(self) -> None:
        """Gracefully shut down all services and connections.

        Can be called multiple times (idempotent).
        """
        if not self._initialized:
            return

        self._dispatcher = None
        self._sink = None

        if self._sendgrid is not None:
            await self._sendgrid.close()
            self._sendgrid = None

        self._registrations = None
        if self._store is not None:
            await self._store.close()
            self._store = None

        self._initialized = False

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def register(self, address: str | None, email: str | None) -> RegistrationOutcome:
        """Validate and store a registration.

        Raises:
            ValidationError: If the address or email is malformed.
            StorageError: If the registry cannot be persisted.
        """
        outcome = await self.registrations.register(address, email)
        self._update_registration_gauge()
        return outcome

    async def handle_webhook(self, payload: Any) -> WebhookReport:
        """Extract transfers from a Chainhook batch and notify recipients."""
        extraction = extract(payload)
        if self._metrics is not None:
            self._metrics.record_batch(extraction.status)

        if extraction.status is not BatchStatus.APPLIED:
            return WebhookReport(status=extraction.status)

        targets = self.store.snapshot_map()
        if self._metrics is not None:
            with self._metrics.track_dispatch():
                report = await self.dispatcher.dispatch(extraction.events, targets)
        else:
            report = await self.dispatcher.dispatch(extraction.events, targets)
        return WebhookReport(status=extraction.status, dispatch=report)

    def status(self) -> dict[str, Any]:
        """Liveness summary for ``GET /status``."""
        return {"status": "running", "registrations": self.store.count_all()}

    def _update_registration_gauge(self) -> None:
        if self._metrics is not None and self._store is not None:
            self._metrics.set_registration_count(self._store.count_all())

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        """Check if the engine is initialized."""
        return self._initialized

    @property
    def config(self) -> AppConfig:
        """Get the application configuration."""
        return self._config

    @property
    def store(self) -> RegistryStore:
        """Get the registry store."""
        if self._store is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._store

    @property
    def registrations(self) -> RegistrationService:
        """Get the registration service."""
        if self._registrations is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._registrations

    @property
    def sink(self) -> NotificationSink:
        """Get the notification sink."""
        if self._sink is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._sink

    @property
    def dispatcher(self) -> Dispatcher:
        """Get the dispatcher."""
        if self._dispatcher is None:
            raise RuntimeError(_ERR_NOT_INITIALIZED)
        return self._dispatcher
