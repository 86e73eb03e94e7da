"""Pytest fixtures: an isolated app and database per test, plus in-memory doubles.

Each test gets a fresh application bound to its own in-memory SQLite
database, so data changes never leak between cases.
"""

from __future__ import annotations

import pytest

from vidshare.core.config import TestingConfig
from vidshare.core.extensions import db as _db
from vidshare.factory import create_app
from vidshare.infra.jwt.token_codec import JWTTokenCodec
from vidshare.services._shared.ports import (
    InMemoryIdentityStore,
    InMemoryMediaStore,
    InMemorySessionStore,
)
from vidshare.services.auth.dto import AuthTokenConfig
from vidshare.services.auth.service import AuthService
from vidshare.services.identity.service import IdentityService

ACCESS_SECRET = TestingConfig.ACCESS_TOKEN_SECRET
REFRESH_SECRET = TestingConfig.REFRESH_TOKEN_SECRET


@pytest.fixture()
def app(tmp_path):
    """Create a Flask application configured for testing.

    Media and upload staging directories live under ``tmp_path``.

    Yields
    ------
    flask.Flask
        Application with tables created inside an active app context.
    """

    class Config(TestingConfig):
        MEDIA_ROOT = str(tmp_path / "media")
        UPLOAD_TEMP_DIR = str(tmp_path / "temp")

    app = create_app(Config, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def client(app):
    """Flask test client sharing the fixture's app context."""
    return app.test_client()


@pytest.fixture()
def session(app):
    """Expose the Flask-scoped SQLAlchemy session and wire Factory Boy to it."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(_db.session)
    yield _db.session
    SQLAlchemySession.set(None)


# -- In-memory wiring for service-level tests ---------------------------------


@pytest.fixture()
def token_cfg() -> AuthTokenConfig:
    return AuthTokenConfig(access_secret=ACCESS_SECRET, refresh_secret=REFRESH_SECRET)


@pytest.fixture()
def codec() -> JWTTokenCodec:
    return JWTTokenCodec()


@pytest.fixture()
def identities() -> InMemoryIdentityStore:
    return InMemoryIdentityStore()


@pytest.fixture()
def sessions() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def media() -> InMemoryMediaStore:
    return InMemoryMediaStore()


@pytest.fixture()
def auth(identities, sessions, codec, token_cfg) -> AuthService:
    """AuthService wired to in-memory doubles and the real PyJWT codec."""
    return AuthService(identities=identities, sessions=sessions, codec=codec, token_cfg=token_cfg)


@pytest.fixture()
def identity_svc(identities, media) -> IdentityService:
    return IdentityService(identities=identities, media=media)
