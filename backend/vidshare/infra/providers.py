"""Build services and their adapters from the Flask configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from vidshare.core.extensions import get_redis
from vidshare.infra.jwt.token_codec import JWTTokenCodec
from vidshare.infra.media.local_media_store import LocalMediaStore
from vidshare.infra.redis.redis_session_store import RedisSessionStore
from vidshare.infra.sqlalchemy.identity_store import SQLAlchemyIdentityStore
from vidshare.infra.sqlalchemy.user_session_store import IdentitySessionStore
from vidshare.services._shared.base import ServiceContext
from vidshare.services._shared.ports import SessionStore
from vidshare.services.auth.dto import AuthTokenConfig
from vidshare.services.auth.service import AuthService
from vidshare.services.identity.service import IdentityService


def build_session_store(config: Mapping[str, Any]) -> SessionStore:
    """Return the session store selected by ``SESSION_STORE_BACKEND``."""
    backend = str(config.get("SESSION_STORE_BACKEND", "database")).strip().lower()
    if backend == "redis":
        ttl = AuthTokenConfig.from_mapping(config).refresh_expires
        return RedisSessionStore(r=get_redis(), ttl=ttl)
    return IdentitySessionStore()


def build_auth_service(config: Mapping[str, Any], *, ctx: ServiceContext | None = None) -> AuthService:
    """Wire :class:`AuthService` with the configured adapters."""
    return AuthService(
        identities=SQLAlchemyIdentityStore(),
        sessions=build_session_store(config),
        codec=JWTTokenCodec(algorithm=str(config.get("JWT_ALGORITHM", "HS256"))),
        token_cfg=AuthTokenConfig.from_mapping(config),
        ctx=ctx,
    )


def build_identity_service(
    config: Mapping[str, Any], *, ctx: ServiceContext | None = None
) -> IdentityService:
    """Wire :class:`IdentityService` with the configured adapters."""
    return IdentityService(
        identities=SQLAlchemyIdentityStore(),
        media=LocalMediaStore(
            root=str(config.get("MEDIA_ROOT", "./public/media")),
            url_prefix=str(config.get("MEDIA_URL_PREFIX", "/media")),
        ),
        require_avatar=bool(config.get("REGISTRATION_REQUIRE_AVATAR", False)),
        ctx=ctx,
    )
