"""Shared test fixtures for the notifaya test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from notifaya.config.settings import (
    AppConfig,
    DispatchConfig,
    EmailConfig,
    MetricsConfig,
    RegistryConfig,
    RegistryEngine,
)
from notifaya.errors.notify_errors import DispatchError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from notifaya.notifications.message import EmailMessage

TESTNET_ADDR = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
MAINNET_ADDR = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"
SENDER_ADDR = "ST2CY5V39NHDPWSXMW9QDT3HC3GD6Q6XX4CFRK9AG"


class RecordingSink:
    """Notification sink that records messages and fails for chosen recipients."""

    def __init__(self, fail_for: tuple[str, ...] = ()) -> None:
        self.sent: list[EmailMessage] = []
        self.attempts: list[str] = []
        self.fail_for = set(fail_for)

    async def send(self, message: EmailMessage) -> None:  # noqa: ASYNC910
        self.attempts.append(message.to)
        if message.to in self.fail_for:
            msg = f"rejected {message.to}"
            raise DispatchError(msg)
        self.sent.append(message)


class Payloads:
    """Builders for Chainhook webhook bodies."""

    @staticmethod
    def transfer(
        recipient: str,
        amount: int | str = 5_000_000,
        sender: str = SENDER_ADDR,
        kind: str = "STXTransferEvent",
    ) -> dict[str, Any]:
        return {
            "type": kind,
            "data": {"sender": sender, "recipient": recipient, "amount": str(amount)},
        }

    @staticmethod
    def tx(*events: dict[str, Any], tx_hash: str = "0xabc123") -> dict[str, Any]:
        return {
            "transaction_identifier": {"hash": tx_hash},
            "metadata": {"receipt": {"events": list(events)}},
        }

    @staticmethod
    def batch(*txs: dict[str, Any], rollback: list[Any] | None = None) -> dict[str, Any]:
        return {"apply": [{"transactions": list(txs)}], "rollback": rollback or []}


@pytest.fixture
def payloads() -> type[Payloads]:
    """Chainhook payload builders."""
    return Payloads


@pytest.fixture
def sink() -> RecordingSink:
    """A notification sink that records what it was asked to send."""
    return RecordingSink()


@pytest.fixture
def app_config() -> AppConfig:
    """Provide a test AppConfig with an in-memory registry and no real email."""
    return AppConfig(
        debug=True,
        registry=RegistryConfig(engine=RegistryEngine.MEMORY),
        email=EmailConfig(enabled=False, from_email="alerts@notifaya.test"),
        dispatch=DispatchConfig(max_retries=0, retry_delay=0, dead_letter_path=""),
        metrics=MetricsConfig(enabled=True),
    )


@pytest.fixture
def test_client(app_config: AppConfig, sink: RecordingSink) -> Iterator:
    """Provide a started FastAPI TestClient wired to the recording sink."""
    from fastapi.testclient import TestClient

    from notifaya.api.app import create_app

    app = create_app(config=app_config, sink=sink)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
