"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import os
import time
from collections.abc import Callable
from typing import Any, TypeVar
from uuid import uuid4

from flask import Response, current_app, jsonify, request
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from vidshare.core.logger import ensure_request_id
from vidshare.infra.providers import build_auth_service, build_identity_service
from vidshare.services._shared.base import ServiceContext
from vidshare.services.auth.dto import AuthTokenConfig, TokenPairOut
from vidshare.services.auth.service import AuthService
from vidshare.services.identity.service import IdentityService

F = TypeVar("F", bound=Callable[..., Any])

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


# ---- Service builders ----


def service_context(actor_id: int | None = None) -> ServiceContext:
    """Return the request-scoped context handed to services."""
    return ServiceContext(actor_id=actor_id, request_id=ensure_request_id())


def auth_service(actor_id: int | None = None) -> AuthService:
    return build_auth_service(current_app.config, ctx=service_context(actor_id))


def identity_service(actor_id: int | None = None) -> IdentityService:
    return build_identity_service(current_app.config, ctx=service_context(actor_id))


# ---- Token extraction ----


def extract_access_token() -> str | None:
    """Read the access token: ``accessToken`` cookie first, then ``Authorization: Bearer``."""
    token = request.cookies.get(ACCESS_COOKIE)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def extract_refresh_token(body_token: str | None) -> str | None:
    """Read the refresh token: ``refreshToken`` cookie first, then the request body."""
    return request.cookies.get(REFRESH_COOKIE) or body_token or None


# ---- Auth gate ----


def require_auth(func: F) -> F:
    """
    Admit the request only with a valid access token.

    The resolved identity is passed to the handler as the ``current_user``
    keyword argument. Failures raise ``UnauthorizedError`` (401).
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        user = auth_service().authenticate_access_token(extract_access_token())
        kwargs["current_user"] = user
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# ---- Cookies ----


def set_auth_cookies(response: Response, tokens: TokenPairOut) -> Response:
    """Attach both tokens as HTTP-only cookies."""
    cfg = AuthTokenConfig.from_mapping(current_app.config)
    secure = bool(current_app.config.get("AUTH_COOKIE_SECURE", True))
    samesite = current_app.config.get("AUTH_COOKIE_SAMESITE", "Lax")
    response.set_cookie(
        ACCESS_COOKIE,
        tokens.access_token,
        max_age=int(cfg.access_expires.total_seconds()),
        httponly=True,
        secure=secure,
        samesite=samesite,
    )
    response.set_cookie(
        REFRESH_COOKIE,
        tokens.refresh_token,
        max_age=int(cfg.refresh_expires.total_seconds()),
        httponly=True,
        secure=secure,
        samesite=samesite,
    )
    return response


def clear_auth_cookies(response: Response) -> Response:
    """Expire both auth cookies on the client."""
    secure = bool(current_app.config.get("AUTH_COOKIE_SECURE", True))
    samesite = current_app.config.get("AUTH_COOKIE_SAMESITE", "Lax")
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        response.delete_cookie(name, httponly=True, secure=secure, samesite=samesite)
    return response


# ---- Uploads ----


def stage_upload(field: str) -> str | None:
    """
    Save the multipart file ``field`` into ``UPLOAD_TEMP_DIR``.

    :returns: Local path of the staged file, or ``None`` when absent.
    """
    file: FileStorage | None = request.files.get(field)
    if file is None or not file.filename:
        return None
    temp_dir = current_app.config.get("UPLOAD_TEMP_DIR", "./public/temp")
    os.makedirs(temp_dir, exist_ok=True)
    name = f"{uuid4().hex}-{secure_filename(file.filename)}"
    path = os.path.join(temp_dir, name)
    file.save(path)
    return path


def discard_staged(*paths: str | None) -> None:
    """Remove staged uploads the media store did not consume."""
    for path in paths:
        if not path or not os.path.exists(path):
            continue
        try:
            os.remove(path)
        except OSError as exc:
            current_app.logger.warning("upload.cleanup_failed", extra={"reason": str(exc)})


# ---- Responses ----


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
