"""Tests for the logging-only sink."""

from __future__ import annotations

import logging

import pytest

from notifaya.notifications.logging_sink import LoggingSink
from notifaya.notifications.message import EmailMessage


async def test_logs_message(caplog: pytest.LogCaptureFixture) -> None:
    sink = LoggingSink()
    message = EmailMessage(to="a@b.co", from_email="", subject="Hi", body="body")
    with caplog.at_level(logging.INFO, logger="notifaya.notifications.logging_sink"):
        await sink.send(message)
    assert "a@b.co" in caplog.text
    assert "'Hi'" in caplog.text


async def test_does_not_retain_messages() -> None:
    sink = LoggingSink()
    for i in range(1000):
        await sink.send(EmailMessage(to=f"u{i}@b.co", from_email="", subject="s", body="b"))
    assert vars(sink) == {}


def test_message_to_dict() -> None:
    message = EmailMessage(to="a@b.co", from_email="x@y.co", subject="s", body="b")
    assert message.to_dict() == {"to": "a@b.co", "from_email": "x@y.co", "subject": "s", "body": "b"}
