"""Generic repository base for SQLAlchemy 2.x.

This module centralizes persistence-only concerns shared by repositories:
- Safe update helpers with per-repository updatable-field whitelists.
- No business logic, no commit/rollback; Services own transactions.

Design decisions
----------------
* Repositories MUST remain thin and persistence-focused:
  - They never implement use cases or domain policies.
  - They never call commit/rollback; the Unit of Work does.
* Updates MUST NOT allow mass-assignment: each repo exposes an explicit
  ``_updatable_fields`` whitelist.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import select
from sqlalchemy.orm import InstrumentedAttribute, Session

from vidshare.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define:

    * ``model``: the SQLAlchemy mapped class.

    Subclasses MAY override:

    * ``_updatable_fields`` to whitelist keys allowed for updates.

    This class NEVER opens, commits or rolls back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Initialise the repository with an optional SQLAlchemy session.

        When no explicit session is provided the repository falls back to the
        Flask-scoped session exposed by ``vidshare.core.extensions``.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    # ------------------------------ Session access ---------------------------

    @property
    def session(self) -> Session:
        """Return the injected session, or the Flask-scoped one."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        """Return the model's primary-key attribute (``model.id``) if available."""
        return getattr(self.model, "id", None)

    def _updatable_fields(self) -> set[str]:
        """Whitelist of public keys that can be assigned on update.

        :returns: Set of allowed public keys for update operations.
        :rtype: set[str]
        """
        return set()

    # ------------------------------ Internals --------------------------------

    def _sanitize_update_fields(
        self,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
    ) -> dict[str, Any]:
        """Return a dict with only whitelisted update keys.

        :param fields: Raw update mapping (public keys).
        :type fields: Mapping[str, Any]
        :param strict: When ``True``, raise ``ValueError`` on unknown keys.
                       When ``False``, ignore unknown keys silently.
        :type strict: bool
        :returns: Filtered mapping with only allowed keys.
        :rtype: dict[str, Any]
        :raises ValueError: If ``strict`` and unknown keys are present.
        """
        allowed = self._updatable_fields()
        if not allowed:
            # Fail-closed by default to avoid accidental mass-assignment
            if fields and strict:
                raise ValueError("No updatable fields configured for this repository.")
            return {}

        unknown = [k for k in fields if k not in allowed]
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")

        return {k: v for k, v in fields.items() if k in allowed}

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity for persistence and flush to materialize the PK.

        :param instance: New entity instance.
        :type instance: E
        :returns: The same instance after ``flush()``.
        :rtype: E
        """
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :param entity_id: Primary-key value.
        :type entity_id: Any
        :returns: Entity or ``None``.
        :rtype: E | None
        :raises RuntimeError: If no PK attribute can be detected.
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        stmt = select(self.model).where(pk_attr == entity_id)
        result = self.session.execute(stmt).scalars().first()
        return cast(E | None, result)

    def flush(self) -> None:
        """Flush pending changes to the database without committing."""
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """Assign only whitelisted keys to ``instance`` and optionally flush.

        The assignment uses ``setattr`` to trigger SQLAlchemy ``@validates``
        decorators defined on the mapped class.

        :param instance: Entity to mutate.
        :type instance: E
        :param fields: Public mapping of fields to assign.
        :type fields: Mapping[str, Any]
        :param strict: Raise on unknown keys (recommended True).
        :type strict: bool
        :param flush: Call ``session.flush()`` after assignment.
        :type flush: bool
        :returns: The mutated instance.
        :rtype: E
        :raises ValueError: If ``strict`` and unknown keys are present, or if no
                           updatable fields are configured.
        """
        updates = self._sanitize_update_fields(fields, strict=strict)
        for k, v in updates.items():
            setattr(instance, k, v)
        if flush:
            self.flush()
        return instance
