"""Port for the server-side record of each identity's live refresh token."""

from __future__ import annotations

import threading
from typing import Protocol

from vidshare.services._shared.errors import StorageUnavailable


class SessionStore(Protocol):
    """
    Holds at most one refresh token per identity.

    Writes are unconditional overwrites (last writer wins); no
    compare-and-swap is offered. Backend failures raise
    :class:`~vidshare.services._shared.errors.StorageUnavailable`.
    """

    def persist_refresh_token(self, identity_id: int, token: str) -> None:
        """Store ``token`` as the only valid refresh token of ``identity_id``."""

    def clear_refresh_token(self, identity_id: int) -> None:
        """Forget the stored refresh token. Idempotent."""

    def current_refresh_token(self, identity_id: int) -> str | None:
        """Return the stored refresh token, or ``None`` when there is no session."""


class InMemorySessionStore(SessionStore):
    """
    Dictionary-backed session store for unit tests.

    Set ``available = False`` to simulate a backend outage.
    """

    def __init__(self) -> None:
        self._tokens: dict[int, str] = {}
        self._lock = threading.Lock()
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise StorageUnavailable("In-memory session store is offline")

    def persist_refresh_token(self, identity_id: int, token: str) -> None:
        self._check()
        with self._lock:
            self._tokens[identity_id] = token

    def clear_refresh_token(self, identity_id: int) -> None:
        self._check()
        with self._lock:
            self._tokens.pop(identity_id, None)

    def current_refresh_token(self, identity_id: int) -> str | None:
        self._check()
        with self._lock:
            return self._tokens.get(identity_id)
