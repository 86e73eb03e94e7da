"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from vidshare.api.deps import json_response, timing
from vidshare.core.extensions import db, get_redis

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and session-store health information."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"

    backend = str(current_app.config.get("SESSION_STORE_BACKEND", "database")).lower()
    sessions_status = db_status
    if backend == "redis":
        try:
            get_redis().ping()
            sessions_status = "ok"
        except (RedisError, RuntimeError):  # pragma: no cover - needs a live server
            current_app.logger.exception("healthcheck.redis_error", extra={"backend": backend})
            sessions_status = "fail"

    version = current_app.config.get("APP_VERSION", "dev")
    commit = current_app.config.get("APP_COMMIT", "unknown")
    payload = {
        "status": "ok",
        "db": db_status,
        "sessions": {"backend": backend, "status": sessions_status},
        "version": version,
        "commit": commit,
    }
    return json_response(payload)
