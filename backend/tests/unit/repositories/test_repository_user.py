# tests/unit/repositories/test_repository_user.py
from __future__ import annotations

import pytest

from tests.factories.user import UserFactory
from vidshare.repositories.user import UserRepository


@pytest.fixture()
def repo(session) -> UserRepository:
    return UserRepository(session=session)


class TestUserRepository:
    def test_get_by_username_or_email(self, repo):
        user = UserFactory(username="carol", email="carol@example.com")

        assert repo.get_by_username_or_email(username="Carol") is user
        assert repo.get_by_username_or_email(email="CAROL@example.com") is user
        assert repo.get_by_username_or_email(username="nobody") is None
        assert repo.get_by_username_or_email() is None

    def test_username_or_email_prefers_lowest_id(self, repo):
        first = UserFactory(username="dave", email="dave@example.com")
        UserFactory(username="erin", email="erin@example.com")

        found = repo.get_by_username_or_email(username="erin", email="dave@example.com")
        assert found is first

    def test_exists_helpers(self, repo):
        user = UserFactory(username="frank", email="frank@example.com")

        assert repo.exists_by_username_or_email("FRANK", "x@example.com")
        assert repo.exists_by_username_or_email("x", "frank@example.com")
        assert not repo.exists_by_username_or_email("x", "x@example.com")
        assert repo.exists_by_email("frank@example.com")
        assert not repo.exists_by_email("frank@example.com", exclude_id=user.id)

    def test_refresh_token_column(self, repo, session):
        user = UserFactory()

        assert repo.get_refresh_token(user.id) is None
        assert repo.set_refresh_token(user.id, "rt") is True
        session.commit()
        assert repo.get_refresh_token(user.id) == "rt"
        assert repo.set_refresh_token(999, "rt") is False

    def test_update_password_missing_user(self, repo):
        with pytest.raises(ValueError):
            repo.update_password(999, "x")

    def test_assign_updates_rejects_protected_fields(self, repo):
        user = UserFactory()
        with pytest.raises(ValueError):
            repo.assign_updates(user, {"password_hash": "x"})

    def test_assign_updates_lenient_drops_protected_fields(self, repo):
        user = UserFactory(full_name="Old")
        original_hash = user.password_hash

        repo.assign_updates(
            user, {"full_name": "New", "password_hash": "x", "refresh_token": "y"}, strict=False
        )

        assert user.full_name == "New"
        assert user.password_hash == original_hash
        assert user.refresh_token is None
