"""PyJWT adapter for :class:`~vidshare.services._shared.ports.TokenCodec`."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt

from vidshare.services._shared.errors import ExpiredToken, InvalidSignature, MalformedToken
from vidshare.services._shared.ports import TokenClaims, TokenClass, TokenCodec

REQUIRED_CLAIMS = ("sub", "type", "iat", "exp", "jti")


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    HMAC-signed JWTs.

    The key is passed per call so access and refresh tokens can be signed
    with different secrets.

    :param algorithm: JWS algorithm (``HS256`` by default).
    :param leeway: Clock skew tolerated on ``exp``/``iat``, in seconds.
    """

    algorithm: str = "HS256"
    leeway: int = 0

    def mint(
        self,
        subject_id: int | str,
        token_class: TokenClass,
        secret_key: str,
        ttl: timedelta,
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(subject_id),
            "type": TokenClass(token_class).value,
            "iat": now,
            "exp": now + ttl,
            "jti": uuid4().hex,
        }
        return jwt.encode(payload, secret_key, algorithm=self.algorithm)

    def validate(self, token: str, secret_key: str) -> TokenClaims:
        if not isinstance(token, str) or not token:
            raise MalformedToken("Token is empty")
        try:
            payload = jwt.decode(
                token,
                secret_key,
                algorithms=[self.algorithm],
                leeway=self.leeway,
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredToken() from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignature() from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedToken(f"Token is malformed: {exc}") from exc

        try:
            token_class = TokenClass(payload["type"])
        except ValueError as exc:
            raise MalformedToken(f"Unknown token type: {payload['type']!r}") from exc

        subject = payload["sub"]
        jti = payload["jti"]
        if not isinstance(subject, str) or not subject or not isinstance(jti, str):
            raise MalformedToken("Token subject or jti is invalid")

        return TokenClaims(
            subject_id=subject,
            token_class=token_class,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
            jti=jti,
        )
