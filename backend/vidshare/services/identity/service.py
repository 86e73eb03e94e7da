"""
IdentityService
===============

Aggregate service responsible for account data:
- Registration (with optional avatar/cover media)
- Public profile retrieval
- Account detail updates
- Password lifecycle

Token issuance is not handled here; see :mod:`vidshare.services.auth.service`.
"""

from __future__ import annotations

import logging

from vidshare.services._shared.base import BaseService, ServiceContext
from vidshare.services._shared.errors import (
    ConflictError,
    NotFoundError,
    StorageUnavailable,
    ValidationError,
)
from vidshare.services._shared.ports import IdentityStore, MediaRef, MediaStore, NewIdentity
from vidshare.services._shared.ports.identity_store import DUPLICATE_IDENTITY
from vidshare.services.identity.credentials import CredentialVerifier
from vidshare.services.identity.dto import (
    AccountUpdateIn,
    PasswordChangeIn,
    RegisterIn,
    UserPublicOut,
)


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


class IdentityService(BaseService):
    """
    Application service for account data.

    :param identities: Identity persistence port.
    :param media: Media publication port (avatar/cover files).
    :param verifier: Credential verifier (password check).
    :param require_avatar: Reject registrations without an avatar file.
    :param ctx: Request-scoped context.
    """

    def __init__(
        self,
        *,
        identities: IdentityStore,
        media: MediaStore,
        verifier: CredentialVerifier | None = None,
        require_avatar: bool = False,
        ctx: ServiceContext | None = None,
    ) -> None:
        super().__init__(ctx=ctx)
        self.identities = identities
        self.media = media
        self.verifier = verifier or CredentialVerifier()
        self.require_avatar = require_avatar

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register(self, dto: RegisterIn) -> UserPublicOut:
        """
        Register a new account. Does not log the user in.

        :param dto: Registration input.
        :type dto: RegisterIn
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises ValidationError: If a field is blank or a required avatar is missing.
        :raises ConflictError: If the username or email is already taken.
        :raises StorageUnavailable: If a media file cannot be stored.
        """
        if any(_blank(v) for v in (dto.full_name, dto.email, dto.username, dto.password)):
            raise ValidationError("All fields are required")
        if self.require_avatar and not dto.avatar_path:
            raise ValidationError("Avatar file is required")

        # Checked before any upload so a rejected sign-up leaves no media behind
        if self.identities.find_by_username_or_email(username=dto.username, email=dto.email):
            raise ConflictError("User", DUPLICATE_IDENTITY)

        published: list[MediaRef] = []
        try:
            avatar = self.media.upload(dto.avatar_path) if dto.avatar_path else None
            if avatar is not None:
                published.append(avatar)
            cover = self.media.upload(dto.cover_image_path) if dto.cover_image_path else None
            if cover is not None:
                published.append(cover)

            record = self.identities.create(
                NewIdentity(
                    username=dto.username,
                    email=dto.email,
                    password=dto.password,
                    full_name=dto.full_name.strip(),
                    avatar_url=avatar.url if avatar else None,
                    cover_image_url=cover.url if cover else None,
                )
            )
        except Exception:
            self._discard_media(published)
            raise
        self.audit("identity.registered", identity_id=record.id)
        return UserPublicOut.from_record(record)

    def _discard_media(self, refs: list[MediaRef]) -> None:
        """Unpublish media of a failed registration; the original error wins."""
        for ref in refs:
            try:
                self.media.remove(ref)
            except StorageUnavailable as exc:
                self.audit(
                    "identity.media_cleanup_failed", level=logging.WARNING, reason=exc.message
                )

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user(self, identity_id: int) -> UserPublicOut:
        """
        Retrieve the public projection of an identity.

        :raises NotFoundError: If the identity does not exist.
        """
        record = self.identities.find_by_id(identity_id)
        if record is None:
            raise NotFoundError("User", identity_id)
        return UserPublicOut.from_record(record)

    # --------------------------------------------------------------------- #
    # Updates
    # --------------------------------------------------------------------- #

    def update_account(self, identity_id: int, dto: AccountUpdateIn) -> UserPublicOut:
        """
        Replace the display name and email of an account.

        :param identity_id: Account to update.
        :type identity_id: int
        :param dto: New details (both required).
        :type dto: AccountUpdateIn
        :returns: Updated public projection.
        :rtype: UserPublicOut
        :raises ValidationError: If a field is blank.
        :raises ConflictError: If the email belongs to another account.
        :raises NotFoundError: If the identity does not exist.
        """
        if _blank(dto.full_name) or _blank(dto.email):
            raise ValidationError("All fields are required")
        record = self.identities.update_fields(
            identity_id, {"full_name": dto.full_name.strip(), "email": dto.email}
        )
        self.audit("identity.account_updated", identity_id=identity_id)
        return UserPublicOut.from_record(record)

    def change_password(self, identity_id: int, dto: PasswordChangeIn) -> None:
        """
        Change the password after checking the current one.

        Existing sessions are left untouched.

        :raises ValidationError: If the old password is wrong or the new one is blank.
        :raises NotFoundError: If the identity does not exist.
        """
        if _blank(dto.new_password):
            raise ValidationError("New password is required")
        record = self.identities.find_by_id(identity_id)
        if record is None:
            raise NotFoundError("User", identity_id)
        if not self.verifier.verify(record, dto.old_password):
            self.audit("identity.password_change_rejected", identity_id=identity_id)
            raise ValidationError("Invalid old password")
        self.identities.set_password(identity_id, dto.new_password)
        self.audit("identity.password_changed", identity_id=identity_id)
