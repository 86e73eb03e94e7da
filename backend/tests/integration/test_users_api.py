# tests/integration/test_users_api.py
"""End-to-end account and session flows over HTTP."""

from __future__ import annotations

import io
import os
from datetime import timedelta

import pytest
from freezegun import freeze_time

from tests.helpers.http import USERS, bearer, cookie, login, register
from vidshare.core.extensions import db
from vidshare.models.user import User


@pytest.fixture()
def bare(app):
    """Client that never stores cookies (header/body token transport)."""
    return app.test_client(use_cookies=False)


# ---- Full session lifecycle ----


def test_alice_session_lifecycle(client, bare):
    resp = register(client)
    assert resp.status_code == 201
    user = resp.get_json()["data"]
    assert user["username"] == "alice"
    assert "password" not in user and "refreshToken" not in user

    resp = login(client)
    assert resp.status_code == 200
    tokens = resp.get_json()["data"]
    assert tokens["user"]["id"] == user["id"]
    assert cookie(client, "accessToken") == tokens["accessToken"]
    assert cookie(client, "refreshToken") == tokens["refreshToken"]

    resp = client.get(f"{USERS}/current-user")
    assert resp.status_code == 200
    assert resp.get_json()["data"]["email"] == "alice@example.com"

    resp = client.post(f"{USERS}/refresh-token")
    assert resp.status_code == 200
    rotated = resp.get_json()["data"]
    assert rotated["refreshToken"] != tokens["refreshToken"]
    assert cookie(client, "refreshToken") == rotated["refreshToken"]

    # replaying the first refresh token is refused
    resp = bare.post(f"{USERS}/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert resp.status_code == 401
    assert resp.get_json()["detail"] == "Refresh token is expired or used"

    resp = client.post(f"{USERS}/logout")
    assert resp.status_code == 200
    assert cookie(client, "accessToken") is None
    assert cookie(client, "refreshToken") is None

    resp = bare.post(f"{USERS}/refresh-token", json={"refreshToken": rotated["refreshToken"]})
    assert resp.status_code == 401


def test_login_sets_http_only_cookies(client):
    register(client)
    resp = login(client)

    set_cookies = resp.headers.getlist("Set-Cookie")
    assert len(set_cookies) == 2
    assert all("HttpOnly" in c for c in set_cookies)
    assert any(c.startswith("accessToken=") and "Max-Age=900" in c for c in set_cookies)
    assert any(c.startswith("refreshToken=") and "Max-Age=864000" in c for c in set_cookies)


def test_login_by_email(client):
    register(client)
    resp = login(client, email="ALICE@example.com")
    assert resp.status_code == 200


# ---- Auth gate ----


def test_gate_without_token(bare):
    resp = bare.get(f"{USERS}/current-user")
    assert resp.status_code == 401
    assert resp.mimetype == "application/problem+json"
    assert resp.get_json()["detail"] == "Unauthorized request"


def test_gate_accepts_bearer_header(client, bare):
    register(client)
    access = login(client).get_json()["data"]["accessToken"]

    resp = bare.get(f"{USERS}/current-user", headers=bearer(access))
    assert resp.status_code == 200


def test_cookie_wins_over_header(client):
    register(client)
    access = login(client).get_json()["data"]["accessToken"]

    # valid cookie, garbage header
    assert client.get(f"{USERS}/current-user", headers=bearer("garbage")).status_code == 200

    # garbage cookie, valid header
    client.set_cookie("accessToken", "garbage")
    resp = client.get(f"{USERS}/current-user", headers=bearer(access))
    assert resp.status_code == 401
    assert resp.get_json()["detail"] == "Invalid access token"


def test_gate_rejects_expired_access_token(client, bare):
    register(client)
    with freeze_time("2025-01-01 12:00:00") as frozen:
        access = login(bare).get_json()["data"]["accessToken"]
        frozen.tick(timedelta(minutes=16))
        resp = bare.get(f"{USERS}/current-user", headers=bearer(access))
    assert resp.status_code == 401
    assert resp.get_json()["detail"] == "Invalid access token"


def test_gate_rejects_deleted_identity(client, bare):
    register(client)
    access = login(bare).get_json()["data"]["accessToken"]

    db.session.delete(db.session.execute(db.select(User)).scalar_one())
    db.session.commit()

    resp = bare.get(f"{USERS}/current-user", headers=bearer(access))
    assert resp.status_code == 401


def test_refresh_token_is_not_an_access_token(client, bare):
    register(client)
    refresh = login(bare).get_json()["data"]["refreshToken"]

    assert bare.get(f"{USERS}/current-user", headers=bearer(refresh)).status_code == 401


# ---- Login failures ----


def test_wrong_password_keeps_existing_session(client, bare):
    register(client)
    first = login(bare).get_json()["data"]

    resp = login(bare, password="not-it")
    assert resp.status_code == 401
    assert resp.get_json()["detail"] == "Invalid user credentials"

    resp = bare.post(f"{USERS}/refresh-token", json={"refreshToken": first["refreshToken"]})
    assert resp.status_code == 200


def test_unknown_user_login(bare):
    resp = login(bare, username="ghost")
    assert resp.status_code == 401
    assert resp.get_json()["detail"] == "Invalid user credentials"


def test_login_without_identifier(bare):
    resp = bare.post(f"{USERS}/login", json={"password": "x"})
    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "username or email is required"


def test_refresh_without_token(bare):
    resp = bare.post(f"{USERS}/refresh-token", json={})
    assert resp.status_code == 401
    assert resp.get_json()["detail"] == "Unauthorized request"


# ---- Logout ----


def test_logout_is_idempotent(client, bare):
    register(client)
    access = login(bare).get_json()["data"]["accessToken"]

    assert bare.post(f"{USERS}/logout", headers=bearer(access)).status_code == 200
    assert bare.post(f"{USERS}/logout", headers=bearer(access)).status_code == 200


def test_logout_requires_auth(bare):
    assert bare.post(f"{USERS}/logout").status_code == 401


# ---- Registration ----


def test_register_conflict(client):
    register(client)

    resp = register(client, email="other@example.com")
    assert resp.status_code == 409
    assert resp.get_json()["detail"] == "User with email or username already exists"

    resp = register(client, username="other", email="ALICE@example.com")
    assert resp.status_code == 409


def test_register_blank_field(client):
    resp = register(client, username="   ")
    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "All fields are required"


def test_register_missing_field_fails_validation(client):
    resp = client.post(f"{USERS}/register", json={"username": "alice"})
    assert resp.status_code == 422
    assert "email" in resp.get_json()["details"]["errors"]


def test_register_multipart_with_avatar(app, client):
    data = {
        "fullName": "Alice Liddell",
        "email": "alice@example.com",
        "username": "alice",
        "password": "wonderland",
        "avatar": (io.BytesIO(b"\x89PNG fake"), "me.png"),
    }
    resp = client.post(f"{USERS}/register", data=data, content_type="multipart/form-data")

    assert resp.status_code == 201
    avatar = resp.get_json()["data"]["avatar"]
    assert avatar.startswith("/media/") and avatar.endswith(".png")
    stored = os.path.join(app.config["MEDIA_ROOT"], avatar.rsplit("/", 1)[-1])
    with open(stored, "rb") as fh:
        assert fh.read() == b"\x89PNG fake"
    assert os.listdir(app.config["UPLOAD_TEMP_DIR"]) == []


def _files(path):
    return sorted(os.listdir(path)) if os.path.isdir(path) else []


def _multipart(**overrides):
    data = {
        "fullName": "Alice Liddell",
        "email": "alice@example.com",
        "username": "alice",
        "password": "wonderland",
        "avatar": (io.BytesIO(b"\x89PNG fake"), "me.png"),
        "coverImage": (io.BytesIO(b"\xff\xd8 fake"), "cover.jpg"),
    }
    data.update(overrides)
    return data


def test_rejected_multipart_register_leaves_no_files(app, client):
    register(client)
    media_before = _files(app.config["MEDIA_ROOT"])

    resp = client.post(f"{USERS}/register", data=_multipart(), content_type="multipart/form-data")
    assert resp.status_code == 409
    assert os.listdir(app.config["UPLOAD_TEMP_DIR"]) == []

    resp = client.post(
        f"{USERS}/register",
        data=_multipart(fullName="   ", username="bob", email="bob@example.com"),
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert _files(app.config["UPLOAD_TEMP_DIR"]) == []
    assert _files(app.config["MEDIA_ROOT"]) == media_before


def test_register_requires_avatar_when_configured(app, client):
    app.config["REGISTRATION_REQUIRE_AVATAR"] = True
    resp = register(client)
    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "Avatar file is required"


# ---- Account management ----


def test_update_account(client):
    register(client)
    register(client, username="bob", email="bob@example.com")
    login(client)

    resp = client.patch(
        f"{USERS}/update-account", json={"fullName": "Alice L.", "email": "al@example.com"}
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["email"] == "al@example.com"

    resp = client.patch(
        f"{USERS}/update-account", json={"fullName": "Alice L.", "email": "bob@example.com"}
    )
    assert resp.status_code == 409


def test_change_password(client, bare):
    register(client)
    login(client)

    resp = client.post(
        f"{USERS}/change-password", json={"oldPassword": "nope", "newPassword": "rabbit-hole"}
    )
    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "Invalid old password"

    resp = client.post(
        f"{USERS}/change-password", json={"oldPassword": "wonderland", "newPassword": "rabbit-hole"}
    )
    assert resp.status_code == 200

    assert login(bare).status_code == 401
    assert login(bare, password="rabbit-hole").status_code == 200


def test_unknown_route_is_problem_json(client):
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.get_json()["code"] == "not_found"
