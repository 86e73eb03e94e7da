"""Account and session endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from vidshare.api.deps import (
    auth_service,
    clear_auth_cookies,
    discard_staged,
    extract_refresh_token,
    identity_service,
    json_response,
    require_auth,
    set_auth_cookies,
    stage_upload,
    timing,
)
from vidshare.schemas import (
    AccountUpdateSchema,
    LoginResponseSchema,
    LoginSchema,
    PasswordChangeSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    UserSchema,
)
from vidshare.services import (
    AccountUpdateIn,
    LoginIn,
    PasswordChangeIn,
    RefreshIn,
    RegisterIn,
    UserPublicOut,
)

bp = Blueprint("users", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
login_response_schema = LoginResponseSchema()
refresh_schema = RefreshSchema()
token_schema = TokenPairSchema()
account_update_schema = AccountUpdateSchema()
password_change_schema = PasswordChangeSchema()
user_schema = UserSchema()


@bp.post("/register")
@timing
def register():
    """Create an account from a JSON body or a multipart form with ``avatar``/``coverImage``."""

    raw = request.form.to_dict() if request.mimetype == "multipart/form-data" else None
    data = register_schema.load(raw if raw is not None else request.get_json(silent=True) or {})
    avatar_path = cover_path = None
    try:
        avatar_path = stage_upload("avatar")
        cover_path = stage_upload("coverImage")
        user = identity_service().register(
            RegisterIn(
                full_name=data["full_name"],
                email=data["email"],
                username=data["username"],
                password=data["password"],
                avatar_path=avatar_path,
                cover_image_path=cover_path,
            )
        )
    finally:
        # Rejected registrations never reach the media store
        discard_staged(avatar_path, cover_path)
    body = {"data": user_schema.dump(user), "message": "User registered successfully"}
    return json_response(body, status=201)


@bp.post("/login")
@timing
def login():
    """Verify credentials, issue a token pair and set both cookies."""

    data = login_schema.load(request.get_json(silent=True) or {})
    result = auth_service().login(
        LoginIn(password=data["password"], username=data["username"], email=data["email"])
    )
    payload = {
        "user": result.user,
        "access_token": result.tokens.access_token,
        "refresh_token": result.tokens.refresh_token,
    }
    body = {"data": login_response_schema.dump(payload), "message": "User logged in successfully"}
    return set_auth_cookies(json_response(body), result.tokens)


@bp.post("/logout")
@require_auth
@timing
def logout(current_user: UserPublicOut):
    """Drop the stored refresh token and clear both cookies."""

    auth_service(current_user.id).terminate(current_user.id)
    return clear_auth_cookies(json_response({"data": {}, "message": "User logged out"}))


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token (cookie first, then body ``refreshToken``)."""

    data = refresh_schema.load(request.get_json(silent=True) or {})
    tokens = auth_service().rotate(RefreshIn(extract_refresh_token(data["refresh_token"])))
    body = {"data": token_schema.dump(tokens), "message": "Access token refreshed"}
    return set_auth_cookies(json_response(body), tokens)


@bp.get("/current-user")
@require_auth
@timing
def get_current_user(current_user: UserPublicOut):
    """Return the authenticated identity."""

    body = {"data": user_schema.dump(current_user), "message": "User fetched successfully"}
    return json_response(body)


@bp.patch("/update-account")
@require_auth
@timing
def update_account(current_user: UserPublicOut):
    """Replace full name and email of the authenticated account."""

    data = account_update_schema.load(request.get_json(silent=True) or {})
    user = identity_service(current_user.id).update_account(
        current_user.id, AccountUpdateIn(full_name=data["full_name"], email=data["email"])
    )
    body = {"data": user_schema.dump(user), "message": "Account details updated successfully"}
    return json_response(body)


@bp.post("/change-password")
@require_auth
@timing
def change_password(current_user: UserPublicOut):
    """Change the password after checking the current one."""

    data = password_change_schema.load(request.get_json(silent=True) or {})
    identity_service(current_user.id).change_password(
        current_user.id,
        PasswordChangeIn(old_password=data["old_password"], new_password=data["new_password"]),
    )
    return json_response({"data": {}, "message": "Password changed successfully"})
