"""Session store that keeps the refresh token on the ``users`` row."""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.exc import SQLAlchemyError

from vidshare.services._shared.errors import StorageUnavailable
from vidshare.services._shared.ports import SessionStore
from vidshare.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork


class IdentitySessionStore(SessionStore):
    """
    Database-backed :class:`SessionStore` writing ``users.refresh_token``.

    Each write is a single-row ``UPDATE`` committed in its own Unit of Work.

    :param rw_uow: Factory for read-write units of work.
    :param ro_uow: Factory for read-only units of work.
    """

    def __init__(
        self,
        *,
        rw_uow: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        ro_uow: Callable[[], SQLAlchemyReadOnlyUnitOfWork] = SQLAlchemyReadOnlyUnitOfWork,
    ) -> None:
        self._rw_uow = rw_uow
        self._ro_uow = ro_uow

    def persist_refresh_token(self, identity_id: int, token: str) -> None:
        try:
            with self._rw_uow() as uow:
                found = uow.users.set_refresh_token(identity_id, token)
        except SQLAlchemyError as exc:
            raise StorageUnavailable(f"Could not store refresh token: {exc}") from exc
        if not found:
            raise StorageUnavailable(f"No identity row for id {identity_id}")

    def clear_refresh_token(self, identity_id: int) -> None:
        try:
            with self._rw_uow() as uow:
                uow.users.set_refresh_token(identity_id, None)
        except SQLAlchemyError as exc:
            raise StorageUnavailable(f"Could not clear refresh token: {exc}") from exc

    def current_refresh_token(self, identity_id: int) -> str | None:
        try:
            with self._ro_uow() as uow:
                return uow.users.get_refresh_token(identity_id)
        except SQLAlchemyError as exc:
            raise StorageUnavailable(f"Could not read refresh token: {exc}") from exc
