# vidshare/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from vidshare.core.config import parse_duration
from vidshare.services.identity.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login. Either ``username`` or ``email`` must be given.

    :param password: Raw password (to be verified).
    :type password: str
    :param username: Handle to log in with.
    :type username: str | None
    :param email: Email to log in with.
    :type email: str | None
    """

    password: str
    username: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT (``None`` when the client sent none).
    :type refresh_token: str | None
    """

    refresh_token: str | None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class LoginOut:
    """Authenticated user plus the freshly issued pair."""

    user: UserPublicOut
    tokens: TokenPairOut


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Token emission configuration.

    :param access_secret: Key signing access tokens.
    :type access_secret: str
    :param refresh_secret: Key signing refresh tokens.
    :type refresh_secret: str
    :param access_expires: Access token lifetime.
    :type access_expires: timedelta
    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    access_secret: str
    refresh_secret: str
    access_expires: timedelta = timedelta(minutes=15)
    refresh_expires: timedelta = timedelta(days=10)

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> AuthTokenConfig:
        """Build from a Flask config (``ACCESS_TOKEN_SECRET``, ``*_EXPIRY``...)."""
        return cls(
            access_secret=str(config["ACCESS_TOKEN_SECRET"]),
            refresh_secret=str(config["REFRESH_TOKEN_SECRET"]),
            access_expires=parse_duration(config.get("ACCESS_TOKEN_EXPIRY", "15m")),
            refresh_expires=parse_duration(config.get("REFRESH_TOKEN_EXPIRY", "10d")),
        )
