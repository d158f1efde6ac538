"""Notifications — outgoing email delivery.

Provides:
- ``EmailMessage`` — the message handed to a sink
- ``SendGridSink`` — delivers through the SendGrid Web API
- ``LoggingSink`` — logs instead of delivering
"""

from __future__ import annotations

from notifaya.notifications.logging_sink import LoggingSink
from notifaya.notifications.message import EmailMessage, NotificationSink
from notifaya.notifications.sendgrid import SendGridSink

__all__ = [
    "EmailMessage",
    "LoggingSink",
    "NotificationSink",
    "SendGridSink",
]
