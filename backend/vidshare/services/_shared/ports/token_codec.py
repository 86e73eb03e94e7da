"""Port for minting and validating signed session tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Protocol


class TokenClass(str, Enum):
    """The two token classes; each is signed with its own key."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified claims of a token.

    :ivar subject_id: Identity id the token was minted for (``sub``).
    :ivar token_class: ``access`` or ``refresh`` (``type``).
    :ivar issued_at: Issue instant, UTC (``iat``).
    :ivar expires_at: Expiry instant, UTC (``exp``).
    :ivar jti: Unique token identifier.
    """

    subject_id: str
    token_class: TokenClass
    issued_at: datetime
    expires_at: datetime
    jti: str


class TokenCodec(Protocol):
    """Sign and verify tokens. No I/O; validation depends only on token, key and clock."""

    def mint(
        self,
        subject_id: int | str,
        token_class: TokenClass,
        secret_key: str,
        ttl: timedelta,
    ) -> str:
        """Return a signed token carrying ``sub``, ``type``, ``iat``, ``exp`` and ``jti``."""

    def validate(self, token: str, secret_key: str) -> TokenClaims:
        """
        Verify ``token`` with ``secret_key`` and return its claims.

        :raises ExpiredToken: The token is past ``exp``.
        :raises InvalidSignature: The signature does not verify with ``secret_key``.
        :raises MalformedToken: The token cannot be parsed or lacks claims.
        """
