"""
vidshare.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that define the contracts
between the service layer and the infrastructure it relies on.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec`: signing and verification of session tokens.

- :mod:`session_store`:
    Defines :class:`~.SessionStore`: the single live refresh token per identity.

- :mod:`identity_store`:
    Defines :class:`~.IdentityStore` and :class:`~.IdentityRecord`: account persistence.

- :mod:`media_store`:
    Defines :class:`~.MediaStore`: publication of uploaded avatar/cover files.

Design Notes
------------
Each port module also ships an in-memory double used by unit tests.
Concrete adapters (database, Redis, filesystem, PyJWT) live under
``vidshare.infra``.
"""

from __future__ import annotations

from .identity_store import (
    IdentityRecord,
    IdentityStore,
    InMemoryIdentityStore,
    NewIdentity,
)
from .media_store import InMemoryMediaStore, MediaRef, MediaStore
from .session_store import InMemorySessionStore, SessionStore
from .token_codec import TokenClaims, TokenClass, TokenCodec

__all__ = [
    "IdentityRecord",
    "IdentityStore",
    "InMemoryIdentityStore",
    "NewIdentity",
    "MediaRef",
    "MediaStore",
    "InMemoryMediaStore",
    "SessionStore",
    "InMemorySessionStore",
    "TokenClaims",
    "TokenClass",
    "TokenCodec",
]
