# tests/unit/services/test_credentials.py
from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from vidshare.services._shared.ports import IdentityRecord
from vidshare.services.identity.credentials import CredentialVerifier


def _record(password_hash: str) -> IdentityRecord:
    return IdentityRecord(
        id=1, username="u", email="u@example.com", password_hash=password_hash, full_name="U"
    )


@pytest.fixture()
def verifier() -> CredentialVerifier:
    return CredentialVerifier()


def test_matching_secret(verifier):
    assert verifier.verify(_record(generate_password_hash("s3cret")), "s3cret") is True


def test_wrong_secret(verifier):
    assert verifier.verify(_record(generate_password_hash("s3cret")), "other") is False


@pytest.mark.parametrize("secret", ["", None, 123])
def test_empty_or_non_string_secret(verifier, secret):
    assert verifier.verify(_record(generate_password_hash("s3cret")), secret) is False


def test_empty_or_unreadable_hash(verifier):
    assert verifier.verify(_record(""), "s3cret") is False
    assert verifier.verify(_record("not-a-hash"), "s3cret") is False
