"""Password verification against a stored identity."""

from __future__ import annotations

from werkzeug.security import check_password_hash

from vidshare.services._shared.ports import IdentityRecord


class CredentialVerifier:
    """
    Check a presented secret against an identity's stored credential.

    Pure: no storage access, no side effects. The comparison itself is
    constant-time (``hmac.compare_digest`` inside Werkzeug).
    """

    def verify(self, identity: IdentityRecord, presented_secret: str) -> bool:
        """
        Return ``True`` only when ``presented_secret`` matches.

        An empty stored hash, an empty or non-string secret, and an
        unreadable hash format all yield ``False``.
        """
        if not identity.password_hash:
            return False
        if not isinstance(presented_secret, str) or not presented_secret:
            return False
        try:
            return bool(check_password_hash(identity.password_hash, presented_secret))
        except (ValueError, TypeError):
            return False
