"""Dispatch — match transfers to registrations and send notifications."""

from __future__ import annotations

from notifaya.dispatch.dead_letter import DeadLetter, DeadLetterLog
from notifaya.dispatch.dispatcher import Dispatcher, DispatchReport

__all__ = ["DeadLetter", "DeadLetterLog", "DispatchReport", "Dispatcher"]
