"""Tests for POST /webhook."""

from __future__ import annotations

from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from notifaya.api.app import create_app
from notifaya.config.settings import WebhookAuthConfig

ALICE = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
BOB = "SP2J6ZY48GV1EZ5V2V5RB9MP66SW86PYKKNRV9EJ7"
STRANGER = "ST3AM1A56AK2C1XAFJ4115ZSV26EB49BVQ10MGCS0"


def _register(client, address: str, email: str) -> None:
    assert client.post("/register", json={"address": address, "email": email}).status_code == 200


class TestWebhook:
    def test_two_recipients(self, test_client, sink, payloads) -> None:
        _register(test_client, ALICE, "alice@example.com")
        _register(test_client, BOB, "bob@example.com")
        batch = payloads.batch(
            payloads.tx(payloads.transfer(ALICE, 5_000_000), tx_hash="0x1"),
            payloads.tx(payloads.transfer(BOB, 2_000_000), tx_hash="0x2"),
        )
        resp = test_client.post("/webhook", json=batch)
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
        assert [m.to for m in sink.sent] == ["alice@example.com", "bob@example.com"]
        assert "You just received 5 STX" in sink.sent[0].body
        assert "Transaction: 0x1" in sink.sent[0].body
        assert "You just received 2 STX" in sink.sent[1].body

    def test_rollback_sends_nothing(self, test_client, sink, payloads) -> None:
        _register(test_client, ALICE, "alice@example.com")
        batch = payloads.batch(
            payloads.tx(payloads.transfer(ALICE)),
            rollback=[{"block_identifier": {"index": 10}}],
        )
        resp = test_client.post("/webhook", json=batch)
        assert resp.status_code == 200
        assert sink.attempts == []

    def test_unregistered_recipient(self, test_client, sink, payloads) -> None:
        _register(test_client, ALICE, "alice@example.com")
        resp = test_client.post("/webhook", json=payloads.batch(payloads.tx(payloads.transfer(STRANGER))))
        assert resp.status_code == 200
        assert sink.attempts == []

    def test_sink_failure_does_not_block_second_event(self, test_client, sink, payloads) -> None:
        _register(test_client, ALICE, "alice@example.com")
        _register(test_client, BOB, "bob@example.com")
        sink.fail_for = {"alice@example.com"}
        batch = payloads.batch(payloads.tx(payloads.transfer(ALICE), payloads.transfer(BOB)))
        resp = test_client.post("/webhook", json=batch)
        assert resp.status_code == 200
        assert [m.to for m in sink.sent] == ["bob@example.com"]

    def test_invalid_json_still_200(self, test_client) -> None:
        resp = test_client.post(
            "/webhook", content=b"{nope", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 200

    def test_internal_error_still_200(self, test_client, payloads) -> None:
        test_client.app.state.engine.handle_webhook = AsyncMock(side_effect=RuntimeError("boom"))
        resp = test_client.post("/webhook", json=payloads.batch())
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_oversized_amount_does_not_block_batch(self, test_client, sink, payloads) -> None:
        _register(test_client, ALICE, "alice@example.com")
        batch = payloads.batch(
            payloads.tx(payloads.transfer(ALICE, "9" * 5000), tx_hash="0x1"),
            payloads.tx(payloads.transfer(ALICE, 5_000_000), tx_hash="0x2"),
        )
        resp = test_client.post("/webhook", json=batch)
        assert resp.status_code == 200
        assert len(sink.sent) == 1
        assert "Transaction: 0x2" in sink.sent[0].body


class TestWebhookSecret:
    def test_secret_required_when_configured(self, app_config, sink, payloads) -> None:
        app_config.webhook = WebhookAuthConfig(secret="Bearer s3cret")
        with TestClient(create_app(config=app_config, sink=sink)) as client:
            _register(client, ALICE, "alice@example.com")
            batch = payloads.batch(payloads.tx(payloads.transfer(ALICE)))

            denied = client.post("/webhook", json=batch)
            assert denied.status_code == 401
            assert sink.attempts == []

            wrong = client.post("/webhook", json=batch, headers={"Authorization": "Bearer nope"})
            assert wrong.status_code == 401

            ok = client.post("/webhook", json=batch, headers={"Authorization": "Bearer s3cret"})
            assert ok.status_code == 200
            assert [m.to for m in sink.sent] == ["alice@example.com"]
