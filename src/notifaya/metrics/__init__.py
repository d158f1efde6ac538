"""Metrics — Prometheus metrics collection and exposure."""

from __future__ import annotations

from notifaya.metrics.collector import MetricsCollector, NotifierMetrics

__all__ = ["MetricsCollector", "NotifierMetrics"]
