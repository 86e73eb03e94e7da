"""Port for reading and writing account identities."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any, Protocol

from werkzeug.security import generate_password_hash

from vidshare.services._shared.errors import ConflictError, NotFoundError

#: Fields the general update path may touch.
UPDATABLE_FIELDS: frozenset[str] = frozenset({"full_name", "email", "avatar_url", "cover_image_url"})

DUPLICATE_IDENTITY = "User with email or username already exists"
DUPLICATE_EMAIL = "Email already in use"


def normalize_login(value: str) -> str:
    """Trim and lowercase a username or email before storage or comparison."""
    return value.strip().lower()


@dataclass(frozen=True, slots=True)
class IdentityRecord:
    """
    Framework-free snapshot of an identity.

    ``password_hash`` is the opaque verifiable credential; it never leaves the
    service layer.
    """

    id: int
    username: str
    email: str
    password_hash: str
    full_name: str
    avatar_url: str | None = None
    cover_image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class NewIdentity:
    """
    Data required to create an identity.

    :param password: Raw password; the store hashes it.
    """

    username: str
    email: str
    password: str
    full_name: str
    avatar_url: str | None = None
    cover_image_url: str | None = None


class IdentityStore(Protocol):
    """Account persistence seen by the services."""

    def find_by_id(self, identity_id: int) -> IdentityRecord | None: ...

    def find_by_username_or_email(
        self, *, username: str | None = None, email: str | None = None
    ) -> IdentityRecord | None: ...

    def update_fields(self, identity_id: int, fields: Mapping[str, Any]) -> IdentityRecord:
        """
        Update whitelisted public fields.

        :raises ValueError: If a field outside :data:`UPDATABLE_FIELDS` is given.
        :raises NotFoundError: If the identity does not exist.
        :raises ConflictError: If the new email belongs to another identity.
        """

    def set_password(self, identity_id: int, raw_password: str) -> None:
        """Replace the credential of ``identity_id``."""

    def create(self, record: NewIdentity) -> IdentityRecord:
        """
        Insert a new identity.

        :raises ConflictError: If the username or the email is taken.
        """


class InMemoryIdentityStore(IdentityStore):
    """Dictionary-backed identity store for unit tests."""

    def __init__(self) -> None:
        self._rows: dict[int, IdentityRecord] = {}
        self._seq = 0
        self._lock = threading.Lock()

    def find_by_id(self, identity_id: int) -> IdentityRecord | None:
        return self._rows.get(identity_id)

    def find_by_username_or_email(
        self, *, username: str | None = None, email: str | None = None
    ) -> IdentityRecord | None:
        uname = normalize_login(username) if username else None
        mail = normalize_login(email) if email else None
        for row in sorted(self._rows.values(), key=lambda r: r.id):
            if (uname and row.username == uname) or (mail and row.email == mail):
                return row
        return None

    def update_fields(self, identity_id: int, fields: Mapping[str, Any]) -> IdentityRecord:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {sorted(unknown)}")
        with self._lock:
            row = self._rows.get(identity_id)
            if row is None:
                raise NotFoundError("User", identity_id)
            changes = dict(fields)
            if "email" in changes:
                changes["email"] = normalize_login(changes["email"])
                if any(
                    r.email == changes["email"] and r.id != identity_id for r in self._rows.values()
                ):
                    raise ConflictError("User", DUPLICATE_EMAIL)
            updated = replace(row, updated_at=datetime.now(UTC), **changes)
            self._rows[identity_id] = updated
            return updated

    def set_password(self, identity_id: int, raw_password: str) -> None:
        with self._lock:
            row = self._rows.get(identity_id)
            if row is None:
                raise NotFoundError("User", identity_id)
            self._rows[identity_id] = replace(
                row, password_hash=generate_password_hash(raw_password)
            )

    def create(self, record: NewIdentity) -> IdentityRecord:
        username = normalize_login(record.username)
        email = normalize_login(record.email)
        with self._lock:
            if any(r.username == username or r.email == email for r in self._rows.values()):
                raise ConflictError("User", DUPLICATE_IDENTITY)
            self._seq += 1
            now = datetime.now(UTC)
            row = IdentityRecord(
                id=self._seq,
                username=username,
                email=email,
                password_hash=generate_password_hash(record.password),
                full_name=record.full_name,
                avatar_url=record.avatar_url,
                cover_image_url=record.cover_image_url,
                created_at=now,
                updated_at=now,
            )
            self._rows[row.id] = row
            return row

    def delete(self, identity_id: int) -> None:
        """Drop a row (test helper to simulate a deleted account)."""
        self._rows.pop(identity_id, None)
