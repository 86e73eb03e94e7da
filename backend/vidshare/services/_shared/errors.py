"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between adapters,
domain models, and application services.

The translation to HTTP responses (RFC 7807) is handled in one place,
``vidshare/core/errors.py`` (:func:`translate_service_error`).
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the column list
    (``UNIQUE constraint failed: users.email``), so the column suffix of the
    constraint name is matched as well.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    # uq_users_email -> users.email
    parts = name.split("_", 2)
    if len(parts) == 3 and parts[0] == "uq":
        return f"{parts[1]}.{parts[2]}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from adapters or domain logic.
    - The API boundary translates them to ``APIError``.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class ValidationError(ServiceError):
    """Raised when required input is missing, blank, or malformed."""

    def __init__(self, message: str = "Invalid input") -> None:
        super().__init__(message)
        self.message = message


class UnauthorizedError(ServiceError):
    """
    Raised when authentication fails.

    Covers missing, invalid, expired or reused tokens and credential
    mismatches. ``message`` is safe for clients; ``reason`` carries the
    underlying cause for logs only.

    :param message: Generic client-facing message.
    :type message: str
    :param reason: Diagnostic detail (never sent to clients).
    :type reason: str | None
    """

    def __init__(self, message: str = "Unauthorized request", *, reason: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.reason = reason or message


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the store.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return self.detail


class StorageUnavailable(ServiceError):
    """Raised when a downstream store (database, Redis, media) fails."""

    def __init__(self, message: str = "Storage unavailable") -> None:
        super().__init__(message)
        self.message = message


class IssuanceFailure(ServiceError):
    """Raised when a token pair cannot be issued because persistence failed."""

    def __init__(
        self, message: str = "Something went wrong while generating refresh and access token"
    ) -> None:
        super().__init__(message)
        self.message = message


# --------------------------------------------------------------------------- #
# Token codec errors
# --------------------------------------------------------------------------- #


class TokenError(ServiceError):
    """Base class for token decoding failures."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)
        self.message = message


class ExpiredToken(TokenError):
    """The token is past its ``exp`` claim."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message)


class InvalidSignature(TokenError):
    """The token signature does not verify with the supplied key."""

    def __init__(self, message: str = "Token signature verification failed") -> None:
        super().__init__(message)


class MalformedToken(TokenError):
    """The token cannot be parsed or lacks required claims."""

    def __init__(self, message: str = "Token is malformed") -> None:
        super().__init__(message)
