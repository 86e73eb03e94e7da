"""User repository: account lookups and the refresh-token column."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select, update

from vidshare.models.user import User
from vidshare.repositories.base import BaseRepository


def _normalize(value: str) -> str:
    return value.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It never mints or validates tokens; it only stores the raw value of the
    current refresh token handed to it by the session store adapter.
    """

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _updatable_fields(self):
        """Publicly allowed updatable fields (no password, no refresh token)."""
        return {"email", "full_name", "avatar_url", "cover_image_url"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_username_or_email(
        self, *, username: str | None = None, email: str | None = None
    ) -> User | None:
        """Fetch a user matching the normalized username **or** email.

        :param username: Handle to match, if any.
        :type username: str | None
        :param email: Email to match, if any.
        :type email: str | None
        :returns: First matching user or ``None``.
        :rtype: User | None
        """
        clauses = []
        if username:
            clauses.append(User.username == _normalize(username))
        if email:
            clauses.append(User.email == _normalize(email))
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses)).order_by(User.id)
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_username_or_email(self, username: str, email: str) -> bool:
        """Return ``True`` when the username or the email is already taken."""
        stmt = select(User.id).where(
            or_(User.username == _normalize(username), User.email == _normalize(email))
        )
        return bool(self.session.execute(stmt).first())

    def exists_by_email(self, email: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when another user already owns ``email``."""
        stmt = select(User.id).where(User.email == _normalize(email))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return bool(self.session.execute(stmt).first())

    # ---------------------------- Password ops ----------------------------

    def update_password(self, user_id: int, new_password: str) -> None:
        """Update a user's password and flush the session.

        :param user_id: Identifier of the user.
        :type user_id: int
        :param new_password: Raw password to assign; model handles hashing.
        :type new_password: str
        :raises ValueError: If the user does not exist.
        """
        user = self.get(user_id)
        if not user:
            raise ValueError(f"User {user_id} not found.")
        user.password = new_password  # invokes setter → hash
        self.flush()

    # ---------------------------- Refresh token ----------------------------

    def get_refresh_token(self, user_id: int) -> str | None:
        """Return the stored refresh token of ``user_id`` (``None`` when absent)."""
        stmt = select(User.refresh_token).where(User.id == user_id)
        return cast(str | None, self.session.execute(stmt).scalar_one_or_none())

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        """Overwrite the refresh token with a single-row ``UPDATE``.

        :param user_id: Identifier of the user.
        :type user_id: int
        :param token: New raw token, or ``None`` to clear the session.
        :type token: str | None
        :returns: ``True`` if the row exists, else ``False``.
        :rtype: bool
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token)
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return bool(result.rowcount)
