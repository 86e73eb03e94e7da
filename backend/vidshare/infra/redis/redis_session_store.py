# comments in English; reST docstrings
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import cast

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from vidshare.services._shared.errors import StorageUnavailable
from vidshare.services._shared.ports import SessionStore


@dataclass(slots=True)
class RedisSessionStore(SessionStore):
    """
    Redis-backed session store: one key per identity holding the live refresh token.

    The key expires together with the refresh token, so an abandoned session
    disappears on its own.

    :param r: A Redis client (already connected).
    :param ttl: Lifetime applied to each stored token (the refresh TTL).
    :param prefix: Key namespace.
    """

    r: redis.Redis
    ttl: timedelta
    prefix: str = "session:rt"

    def _k(self, identity_id: int) -> str:
        return f"{self.prefix}:{identity_id}"

    def persist_refresh_token(self, identity_id: int, token: str) -> None:
        """Overwrite the stored token (plain ``SET`` with expiry, last writer wins)."""
        seconds = max(1, int(self.ttl.total_seconds()))
        try:
            self.r.set(self._k(identity_id), token, ex=seconds)
        except RedisError as exc:
            raise StorageUnavailable(f"Redis write failed: {exc}") from exc

    def clear_refresh_token(self, identity_id: int) -> None:
        try:
            self.r.delete(self._k(identity_id))
        except RedisError as exc:
            raise StorageUnavailable(f"Redis delete failed: {exc}") from exc

    def current_refresh_token(self, identity_id: int) -> str | None:
        try:
            raw = self.r.get(self._k(identity_id))
        except RedisError as exc:
            raise StorageUnavailable(f"Redis read failed: {exc}") from exc
        if raw is None:
            return None
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return cast(str, raw)
