# tests/unit/infra/test_sqlalchemy_stores.py
"""Unit tests for the database-backed identity and session stores."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from vidshare.infra.sqlalchemy.identity_store import SQLAlchemyIdentityStore
from vidshare.infra.sqlalchemy.user_session_store import IdentitySessionStore
from vidshare.services._shared.errors import ConflictError, NotFoundError, StorageUnavailable
from vidshare.services._shared.ports import NewIdentity
from vidshare.services.identity.credentials import CredentialVerifier


@pytest.fixture()
def identities(session) -> SQLAlchemyIdentityStore:
    return SQLAlchemyIdentityStore()


@pytest.fixture()
def sessions(session) -> IdentitySessionStore:
    return IdentitySessionStore()


# ---- Identity store: reads ----


def test_find_by_id_returns_record(identities):
    user = UserFactory(username="alice", email="alice@example.com")

    record = identities.find_by_id(user.id)

    assert record is not None
    assert record.username == "alice"
    assert record.email == "alice@example.com"
    assert record.password_hash


def test_find_by_id_missing_returns_none(identities):
    assert identities.find_by_id(999) is None


def test_find_by_username_or_email_is_case_insensitive(identities):
    user = UserFactory(username="alice", email="alice@example.com")

    by_name = identities.find_by_username_or_email(username="  ALICE ")
    by_mail = identities.find_by_username_or_email(email="Alice@Example.com")

    assert by_name is not None and by_name.id == user.id
    assert by_mail is not None and by_mail.id == user.id
    assert identities.find_by_username_or_email() is None


# ---- Identity store: writes ----


def test_create_hashes_password_and_normalizes(identities):
    record = identities.create(
        NewIdentity(username=" Bob ", email="BOB@example.com", password="pw", full_name="Bob")
    )

    assert record.id is not None
    assert record.username == "bob"
    assert record.email == "bob@example.com"
    assert record.password_hash != "pw"
    assert CredentialVerifier().verify(record, "pw")


def test_create_conflicts_on_username_or_email(identities):
    UserFactory(username="alice", email="alice@example.com")

    with pytest.raises(ConflictError, match="already exists"):
        identities.create(
            NewIdentity(username="alice", email="other@example.com", password="pw", full_name="A")
        )
    with pytest.raises(ConflictError):
        identities.create(
            NewIdentity(username="other", email="ALICE@example.com", password="pw", full_name="A")
        )


def test_update_fields_changes_whitelisted_columns(identities):
    user = UserFactory()

    record = identities.update_fields(user.id, {"full_name": "New Name", "email": "NEW@x.io"})

    assert record.full_name == "New Name"
    assert record.email == "new@x.io"
    assert identities.find_by_id(user.id).email == "new@x.io"


def test_update_fields_rejects_unknown_field(identities):
    user = UserFactory()
    with pytest.raises(ValueError):
        identities.update_fields(user.id, {"password_hash": "x"})


def test_update_fields_missing_identity(identities):
    with pytest.raises(NotFoundError):
        identities.update_fields(404, {"full_name": "x"})


def test_update_fields_email_taken_by_other(identities):
    UserFactory(email="taken@example.com")
    user = UserFactory()
    with pytest.raises(ConflictError, match="Email already in use"):
        identities.update_fields(user.id, {"email": "taken@example.com"})


def test_set_password_replaces_credential(identities):
    user = UserFactory()

    identities.set_password(user.id, "n3w-secret")

    record = identities.find_by_id(user.id)
    verifier = CredentialVerifier()
    assert verifier.verify(record, "n3w-secret")
    assert not verifier.verify(record, DEFAULT_PASSWORD)


def test_set_password_missing_identity(identities):
    with pytest.raises(NotFoundError):
        identities.set_password(404, "x")


def test_operational_error_maps_to_storage_unavailable(identities, monkeypatch):
    from vidshare.repositories.user import UserRepository

    def boom(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("db down"))

    monkeypatch.setattr(UserRepository, "get", boom)
    with pytest.raises(StorageUnavailable):
        identities.find_by_id(1)


# ---- Session store on the users row ----


def test_session_store_round_trip(sessions):
    user = UserFactory()

    assert sessions.current_refresh_token(user.id) is None
    sessions.persist_refresh_token(user.id, "rt-1")
    sessions.persist_refresh_token(user.id, "rt-2")
    assert sessions.current_refresh_token(user.id) == "rt-2"

    sessions.clear_refresh_token(user.id)
    sessions.clear_refresh_token(user.id)
    assert sessions.current_refresh_token(user.id) is None


def test_session_store_unknown_identity(sessions):
    with pytest.raises(StorageUnavailable):
        sessions.persist_refresh_token(404, "rt")
    assert sessions.current_refresh_token(404) is None
