"""Tests for registration records and upsert outcomes."""

from __future__ import annotations

from datetime import UTC, datetime

from notifaya.registry.models import Registration, RegistrationOutcome, UpsertResult

ADDR = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
CREATED = datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)


class TestRegistration:
    def test_to_dict_omits_updated_at_until_set(self) -> None:
        reg = Registration(address=ADDR, email="a@b.co", created_at=CREATED)
        data = reg.to_dict()
        assert data == {
            "address": ADDR,
            "email": "a@b.co",
            "createdAt": "2025-01-02T03:04:05Z",
        }

    def test_with_email_sets_updated_at(self) -> None:
        reg = Registration(address=ADDR, email="a@b.co", created_at=CREATED)
        later = datetime(2025, 2, 1, tzinfo=UTC)
        updated = reg.with_email("c@d.co", now=later)
        assert updated.email == "c@d.co"
        assert updated.updated_at == later
        assert updated.created_at == CREATED
        assert reg.email == "a@b.co"

    def test_from_dict_accepts_javascript_timestamps(self) -> None:
        reg = Registration.from_dict(
            {
                "address": ADDR,
                "email": "a@b.co",
                "createdAt": "2025-01-02T03:04:05.123Z",
                "updatedAt": "2025-01-03T00:00:00.000Z",
            }
        )
        assert reg.created_at.year == 2025
        assert reg.created_at.tzinfo is not None
        assert reg.updated_at is not None
        assert reg.updated_at.day == 3

    def test_from_dict_roundtrips_updated_record(self) -> None:
        reg = Registration(
            address=ADDR,
            email="a@b.co",
            created_at=CREATED,
            updated_at=datetime(2025, 3, 1, tzinfo=UTC),
        )
        assert Registration.from_dict(reg.to_dict()) == reg

    def test_from_dict_naive_timestamp_is_utc(self) -> None:
        reg = Registration.from_dict(
            {"address": ADDR, "email": "a@b.co", "createdAt": "2024-01-01T00:00:00"}
        )
        assert reg.created_at == datetime(2024, 1, 1, tzinfo=UTC)
        assert reg.to_dict()["createdAt"] == "2024-01-01T00:00:00Z"


class TestUpsertResult:
    def test_outcomes(self) -> None:
        assert UpsertResult(created=True, changed=True).outcome is RegistrationOutcome.CREATED
        assert UpsertResult(created=False, changed=True).outcome is RegistrationOutcome.UPDATED
        assert (
            UpsertResult(created=False, changed=False).outcome is RegistrationOutcome.UNCHANGED
        )
