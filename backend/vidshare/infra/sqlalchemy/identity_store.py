"""SQLAlchemy adapter for :class:`~vidshare.services._shared.ports.IdentityStore`."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError, OperationalError

from vidshare.models.user import User
from vidshare.services._shared.errors import (
    ConflictError,
    NotFoundError,
    StorageUnavailable,
    violates,
)
from vidshare.services._shared.ports import IdentityRecord, IdentityStore, NewIdentity
from vidshare.services._shared.ports.identity_store import (
    DUPLICATE_EMAIL,
    DUPLICATE_IDENTITY,
    UPDATABLE_FIELDS,
)
from vidshare.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


def to_record(user: User) -> IdentityRecord:
    """Snapshot a :class:`User` row into a DTO (call inside the UoW scope)."""
    return IdentityRecord(
        id=user.id,
        username=user.username,
        email=user.email,
        password_hash=user.password_hash,
        full_name=user.full_name,
        avatar_url=user.avatar_url,
        cover_image_url=user.cover_image_url,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class SQLAlchemyIdentityStore(IdentityStore):
    """
    Identity store over :class:`~vidshare.repositories.user.UserRepository`.

    Reads run in a read-only Unit of Work, writes in a read-write one.
    Unique-constraint violations surface as :class:`ConflictError`.
    """

    def __init__(
        self,
        *,
        rw_uow: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._rw_uow = rw_uow
        self._ro_uow = ro_uow

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def find_by_id(self, identity_id: int) -> IdentityRecord | None:
        try:
            with self._ro_uow() as uow:
                user = uow.users.get(identity_id)
                return to_record(user) if user is not None else None
        except OperationalError as exc:
            raise StorageUnavailable(f"Identity lookup failed: {exc}") from exc

    def find_by_username_or_email(
        self, *, username: str | None = None, email: str | None = None
    ) -> IdentityRecord | None:
        try:
            with self._ro_uow() as uow:
                user = uow.users.get_by_username_or_email(username=username, email=email)
                return to_record(user) if user is not None else None
        except OperationalError as exc:
            raise StorageUnavailable(f"Identity lookup failed: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def update_fields(self, identity_id: int, fields: Mapping[str, Any]) -> IdentityRecord:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {sorted(unknown)}")
        try:
            with self._rw_uow() as uow:
                repo = uow.users
                user = repo.get(identity_id)
                if user is None:
                    raise NotFoundError("User", identity_id)
                if "email" in fields and repo.exists_by_email(
                    fields["email"], exclude_id=identity_id
                ):
                    raise ConflictError("User", DUPLICATE_EMAIL)
                repo.assign_updates(user, fields)
                return to_record(user)
        except IntegrityError as exc:
            if violates(exc, "uq_users_email"):
                raise ConflictError("User", DUPLICATE_EMAIL) from exc
            raise

    def set_password(self, identity_id: int, raw_password: str) -> None:
        with self._rw_uow() as uow:
            try:
                uow.users.update_password(identity_id, raw_password)
            except ValueError as exc:
                raise NotFoundError("User", identity_id) from exc

    def create(self, record: NewIdentity) -> IdentityRecord:
        try:
            with self._rw_uow() as uow:
                repo = uow.users
                if repo.exists_by_username_or_email(record.username, record.email):
                    raise ConflictError("User", DUPLICATE_IDENTITY)
                user = repo.model(
                    username=record.username,
                    email=record.email,
                    password=record.password,  # model hashes via setter
                    full_name=record.full_name,
                    avatar_url=record.avatar_url,
                    cover_image_url=record.cover_image_url,
                )
                repo.add(user)
                return to_record(user)
        except IntegrityError as exc:
            # Concurrent insert won the race on a unique constraint
            if violates(exc, "uq_users_email") or violates(exc, "uq_users_username"):
                raise ConflictError("User", DUPLICATE_IDENTITY) from exc
            raise
