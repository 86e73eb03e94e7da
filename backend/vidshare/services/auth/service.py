# vidshare/services/auth/service.py
from __future__ import annotations

import logging

from vidshare.services._shared.base import BaseService, ServiceContext
from vidshare.services._shared.errors import (
    NotFoundError,
    TokenError,
    UnauthorizedError,
    ValidationError,
)
from vidshare.services._shared.ports import (
    IdentityStore,
    SessionStore,
    TokenClaims,
    TokenClass,
    TokenCodec,
)
from vidshare.services.auth.dto import (
    AuthTokenConfig,
    LoginIn,
    LoginOut,
    RefreshIn,
    TokenPairOut,
)
from vidshare.services.auth.issuer import TokenIssuer
from vidshare.services.identity.credentials import CredentialVerifier
from vidshare.services.identity.dto import UserPublicOut

# Client-facing messages; the precise cause goes to ``reason`` (logs only)
UNAUTHORIZED_REQUEST = "Unauthorized request"
INVALID_ACCESS_TOKEN = "Invalid access token"
INVALID_REFRESH_TOKEN = "Invalid refresh token"
REFRESH_TOKEN_REUSED = "Refresh token is expired or used"
INVALID_CREDENTIALS = "Invalid user credentials"


class AuthService(BaseService):
    """
    Session lifecycle service (login / gate / rotate / terminate).

    One identity has at most one live refresh token, held by the
    :class:`SessionStore`. Access tokens are stateless and only verified.
    Rotation compares the presented refresh token with the stored one
    without locking: two concurrent rotations of the same token may both
    succeed, the last write wins and the other pair's refresh token is
    rejected on its next use.
    """

    def __init__(
        self,
        *,
        identities: IdentityStore,
        sessions: SessionStore,
        codec: TokenCodec,
        token_cfg: AuthTokenConfig,
        verifier: CredentialVerifier | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param identities: Identity lookup port.
        :param sessions: Store of the live refresh token per identity.
        :param codec: Token signing/verification port.
        :param token_cfg: Keys and lifetimes per token class.
        :param verifier: Password verifier.
        :param ctx: Request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.identities = identities
        self.sessions = sessions
        self.codec = codec
        self.cfg = token_cfg
        self.verifier = verifier or CredentialVerifier()
        self.issuer = TokenIssuer(codec=codec, sessions=sessions, cfg=token_cfg)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Verify credentials and issue a fresh token pair.

        :param dto: Login input.
        :returns: Public user and token pair.
        :raises ValidationError: If neither username nor email is given.
        :raises UnauthorizedError: If the identity is unknown or the password is wrong.
        :raises IssuanceFailure: If the refresh token cannot be stored.
        """
        username = (dto.username or "").strip() or None
        email = (dto.email or "").strip() or None
        if username is None and email is None:
            raise ValidationError("username or email is required")

        record = self.identities.find_by_username_or_email(username=username, email=email)
        if record is None:
            self.audit("auth.login.failed", level=logging.WARNING, reason="unknown identity")
            raise UnauthorizedError(INVALID_CREDENTIALS, reason="unknown identity")
        if not self.verifier.verify(record, dto.password):
            self.audit(
                "auth.login.failed",
                level=logging.WARNING,
                identity_id=record.id,
                reason="password mismatch",
            )
            raise UnauthorizedError(INVALID_CREDENTIALS, reason="password mismatch")

        tokens = self.issuer.issue_pair(record.id)
        self.audit("auth.login.success", identity_id=record.id)
        return LoginOut(user=UserPublicOut.from_record(record), tokens=tokens)

    # ------------------------------------------------------------------ #
    # Auth gate
    # ------------------------------------------------------------------ #

    def authenticate_access_token(self, token: str | None) -> UserPublicOut:
        """
        Resolve the identity behind an access token.

        Expired access tokens are rejected; they are never refreshed here.

        :param token: Raw access token extracted from the request.
        :returns: Public projection of the authenticated identity.
        :raises UnauthorizedError: If the token is absent, invalid, expired,
            of the wrong class, or its identity no longer exists.
        """
        if not token:
            raise UnauthorizedError(UNAUTHORIZED_REQUEST, reason="no access token")
        claims = self._validate(token, TokenClass.ACCESS, INVALID_ACCESS_TOKEN)
        identity_id = self._identity_id(claims, INVALID_ACCESS_TOKEN)
        record = self.identities.find_by_id(identity_id)
        if record is None:
            raise UnauthorizedError(INVALID_ACCESS_TOKEN, reason="identity not found")
        return UserPublicOut.from_record(record)

    # ------------------------------------------------------------------ #
    # Refresh with rotation
    # ------------------------------------------------------------------ #

    def rotate(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange the live refresh token for a new pair.

        :param dto: Presented refresh token.
        :returns: New pair; the presented refresh token stops being valid.
        :raises UnauthorizedError: If the token is absent, invalid, expired,
            of the wrong class, or not the stored one (already used or
            superseded).
        :raises IssuanceFailure: If the new refresh token cannot be stored.
        """
        presented = dto.refresh_token
        if not presented:
            raise UnauthorizedError(UNAUTHORIZED_REQUEST, reason="no refresh token")

        claims = self._validate(presented, TokenClass.REFRESH, INVALID_REFRESH_TOKEN)
        identity_id = self._identity_id(claims, INVALID_REFRESH_TOKEN)
        if self.identities.find_by_id(identity_id) is None:
            raise UnauthorizedError(INVALID_REFRESH_TOKEN, reason="identity not found")

        stored = self.sessions.current_refresh_token(identity_id)
        if stored is None or stored != presented:
            self.audit(
                "auth.rotate.reuse",
                level=logging.WARNING,
                identity_id=identity_id,
                reason="no session" if stored is None else "token superseded",
            )
            raise UnauthorizedError(REFRESH_TOKEN_REUSED, reason="stored token mismatch")

        tokens = self.issuer.issue_pair(identity_id)
        self.audit("auth.rotate.success", identity_id=identity_id)
        return tokens

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def terminate(self, identity_id: int) -> None:
        """
        End the session of ``identity_id``. Idempotent.

        Access tokens already handed out stay valid until they expire.

        :raises NotFoundError: If the identity does not exist.
        """
        if self.identities.find_by_id(identity_id) is None:
            raise NotFoundError("User", identity_id)
        self.sessions.clear_refresh_token(identity_id)
        self.audit("auth.session.terminated", identity_id=identity_id)

    def has_session(self, identity_id: int) -> bool:
        """Return ``True`` if a refresh token is stored for ``identity_id``."""
        return self.sessions.current_refresh_token(identity_id) is not None

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    def _validate(self, token: str, expected: TokenClass, message: str) -> TokenClaims:
        key = self.cfg.access_secret if expected is TokenClass.ACCESS else self.cfg.refresh_secret
        try:
            claims = self.codec.validate(token, key)
        except TokenError as exc:
            raise UnauthorizedError(message, reason=exc.message) from exc
        if claims.token_class is not expected:
            raise UnauthorizedError(message, reason=f"wrong token type: {claims.token_class.value}")
        return claims

    @staticmethod
    def _identity_id(claims: TokenClaims, message: str) -> int:
        """Ensure the token subject can be treated as an integer identity id."""
        # ASCII digits only; str.isdigit() also admits "²", which int() rejects
        if claims.subject_id.isascii() and claims.subject_id.isdecimal():
            return int(claims.subject_id)
        raise UnauthorizedError(message, reason="invalid token subject")
