from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

import api.role.crud as role_crud
from database.models import Permission, Role, User
from utils.dates import as_utc, utc_now


def test_duplicate_active_role_name_is_rejected_by_the_database(session):
    session.add(Role(name="auditor"))
    session.commit()

    session.add(Role(name="auditor"))
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()


def test_soft_deleted_role_name_can_be_reused(session):
    session.add(Role(name="auditor", deleted_at=utc_now()))
    session.commit()

    session.add(Role(name="auditor"))
    session.commit()


def test_duplicate_active_permission_route_is_rejected(session):
    session.add(Permission(name="GET /reports", path="/reports", method="GET", module="REPORTS"))
    session.commit()

    session.add(Permission(name="GET /reports", path="/reports", method="GET", module="REPORTS"))
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()

    # Same path with another method is a different permission
    session.add(Permission(name="POST /reports", path="/reports", method="POST", module="REPORTS"))
    session.commit()


def test_duplicate_active_email_is_rejected(session):
    session.add(User(email="dup@example.com", name="a", password_hash="x", role_id="r"))
    session.commit()

    session.add(User(email="dup@example.com", name="b", password_hash="x", role_id="r"))
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()


def test_unique_violation_that_slips_past_the_lookup_maps_to_entity_message(
    client, admin_headers, monkeypatch
):
    assert client.post("/roles", json={"name": "auditor"}, headers=admin_headers).status_code == 201

    # Simulates a concurrent insert winning the race after the name check
    monkeypatch.setattr(role_crud, "_ensure_name_is_free", lambda *args, **kwargs: None)
    response = client.post("/roles", json={"name": "auditor"}, headers=admin_headers)

    assert response.status_code == 422
    assert response.json()["detail"] == "Role already exists."


class TestTimestamps:
    def test_new_rows_carry_aware_utc(self):
        role = Role(name="x")
        assert role.created_at.tzinfo is not None
        assert role.created_at.utcoffset() == timedelta(0)

    def test_as_utc_treats_naive_values_as_utc(self):
        naive = datetime(2024, 5, 1, 12, 0)
        assert as_utc(naive) == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def test_as_utc_converts_offsets(self):
        plus_two = datetime(2024, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        converted = as_utc(plus_two)
        assert converted == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert converted.tzinfo == timezone.utc

    def test_as_utc_keeps_none(self):
        assert as_utc(None) is None
