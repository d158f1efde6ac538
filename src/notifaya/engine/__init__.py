"""Engine — owns the registry, sink and dispatcher for the app."""

from __future__ import annotations

from notifaya.engine.client import NotifayaEngine, WebhookReport

__all__ = ["NotifayaEngine", "WebhookReport"]
