"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from contextlib import suppress

from sqlalchemy import event
from sqlalchemy.orm import Session

from vidshare.core.extensions import db
from vidshare.repositories import UserRepository
from vidshare.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    The same session is shared across all repositories for a consistent transaction.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first write.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    This UoW:
    - Installs an ORM write-guard (``before_flush``) for its whole scope.
    - Always rolls back on exit, so nothing it loaded can be persisted.
    - Disallows ``commit()``.

    Notes
    -----
    Callers must convert entities to DTOs inside the ``with`` block; the
    rollback on exit expires every loaded instance.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)
        self._listener_installed = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        event.listen(self.session, "before_flush", self._before_flush)
        self._listener_installed = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            with suppress(Exception):
                self.session.rollback()
        finally:
            if self._listener_installed:
                with suppress(Exception):
                    event.remove(self.session, "before_flush", self._before_flush)
                self._listener_installed = False

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    @staticmethod
    def _before_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )
