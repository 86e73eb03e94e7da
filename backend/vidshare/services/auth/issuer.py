"""Mint a token pair and record the refresh half as the identity's only session."""

from __future__ import annotations

from vidshare.services._shared.errors import IssuanceFailure, StorageUnavailable
from vidshare.services._shared.ports import SessionStore, TokenClass, TokenCodec
from vidshare.services.auth.dto import AuthTokenConfig, TokenPairOut


class TokenIssuer:
    """
    Issue access/refresh pairs.

    :param codec: Token signing port.
    :param sessions: Store receiving the refresh token.
    :param cfg: Keys and lifetimes per token class.
    """

    def __init__(self, *, codec: TokenCodec, sessions: SessionStore, cfg: AuthTokenConfig) -> None:
        self.codec = codec
        self.sessions = sessions
        self.cfg = cfg

    def issue_pair(self, identity_id: int) -> TokenPairOut:
        """
        Mint both tokens, then persist the refresh token.

        The pair is returned only after the write completed; any earlier
        refresh token of the identity stops being valid.

        :param identity_id: Subject of both tokens.
        :type identity_id: int
        :returns: The new pair.
        :rtype: TokenPairOut
        :raises IssuanceFailure: If the refresh token could not be stored.
        """
        access = self.codec.mint(
            identity_id, TokenClass.ACCESS, self.cfg.access_secret, self.cfg.access_expires
        )
        refresh = self.codec.mint(
            identity_id, TokenClass.REFRESH, self.cfg.refresh_secret, self.cfg.refresh_expires
        )
        try:
            self.sessions.persist_refresh_token(identity_id, refresh)
        except StorageUnavailable as exc:
            raise IssuanceFailure() from exc
        return TokenPairOut(access_token=access, refresh_token=refresh)
