"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from vidshare.services._shared.ports import IdentityRecord

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for account registration.

    :param full_name: Display name.
    :type full_name: str
    :param email: Login email (normalized to lowercase by the store).
    :type email: str
    :param username: Public handle (normalized to lowercase by the store).
    :type username: str
    :param password: Raw password to be hashed by the store.
    :type password: str
    :param avatar_path: Staged avatar file on local disk, if uploaded.
    :type avatar_path: str | None
    :param cover_image_path: Staged cover image on local disk, if uploaded.
    :type cover_image_path: str | None
    """

    full_name: str
    email: str
    username: str
    password: str
    avatar_path: str | None = None
    cover_image_path: str | None = None


@dataclass(frozen=True, slots=True)
class AccountUpdateIn:
    """
    Input DTO for updating account details. Both fields are required.

    :param full_name: New display name.
    :type full_name: str
    :param email: New login email.
    :type email: str
    """

    full_name: str
    email: str


@dataclass(frozen=True, slots=True)
class PasswordChangeIn:
    """
    Input DTO for changing a password.

    :param old_password: Current password.
    :type old_password: str
    :param new_password: New password to set.
    :type new_password: str
    """

    old_password: str
    new_password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe projection of an identity.

    Never carries the password hash or the refresh token.
    """

    id: int
    username: str
    email: str
    full_name: str
    avatar_url: str | None = None
    cover_image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, record: IdentityRecord) -> UserPublicOut:
        return cls(
            id=record.id,
            username=record.username,
            email=record.email,
            full_name=record.full_name,
            avatar_url=record.avatar_url,
            cover_image_url=record.cover_image_url,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
