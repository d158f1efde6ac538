"""Metrics collector — Prometheus counters, gauges, histograms.

- ``notifaya_registrations_total`` gauge
- ``notifaya_webhook_batches_total`` counter by batch status
- ``notifaya_notifications_total`` counter by outcome (sent, failed)
- ``notifaya_dispatch_duration_seconds`` histogram
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

if TYPE_CHECKING:
    from collections.abc import Iterator


_PREFIX = "notifaya"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`NotifierMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def gauge(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Gauge:
        """Register and return a Gauge."""
        return Gauge(name, doc, labels, registry=self._registry)

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class NotifierMetrics:
    """High-level metrics for registrations, webhook batches and sends."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._registrations = self._collector.gauge(
            f"{_PREFIX}_registrations_total",
            "Number of registered addresses",
        )
        self._batches = self._collector.counter(
            f"{_PREFIX}_webhook_batches",
            "Chainhook batches received, by classification",
            ("status",),
        )
        self._notifications = self._collector.counter(
            f"{_PREFIX}_notifications",
            "Notifications attempted, by final outcome",
            ("outcome",),
        )
        self._dispatch = self._collector.histogram(
            f"{_PREFIX}_dispatch_duration_seconds",
            "Duration of dispatching one webhook batch",
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    def set_registration_count(self, count: int) -> None:
        """Set the current number of registrations."""
        self._registrations.set(count)

    def record_batch(self, status: str) -> None:
        """Count one webhook batch with the given classification."""
        self._batches.labels(status=status).inc()

    def record_notification(self, outcome: str) -> None:
        """Count one notification by its final outcome."""
        self._notifications.labels(outcome=outcome).inc()

    @contextmanager
    def track_dispatch(self) -> Iterator[None]:
        """Track the duration of a batch dispatch."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._dispatch.observe(time.monotonic() - start)
