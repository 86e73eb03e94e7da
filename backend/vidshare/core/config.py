"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

SESSION_STORE_BACKENDS: Final[frozenset[str]] = frozenset({"database", "redis"})

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_DURATION_UNITS: Final[Mapping[str, str]] = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


# Loads .env in development (no-op when the file is absent)
load_dotenv()


class ConfigurationError(RuntimeError):
    """Raised at startup when mandatory settings are missing or invalid."""


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    """Convert a compact duration such as ``"15m"`` or ``"10d"`` to a timedelta.

    Parameters
    ----------
    value: str | int | float | timedelta
        Either a timedelta (returned unchanged), a number of seconds, or a
        string made of an integer and an optional unit among ``s``, ``m``,
        ``h``, ``d`` and ``w``.

    Returns
    -------
    datetime.timedelta
        Parsed duration.

    Raises
    ------
    ConfigurationError
        If the value cannot be parsed.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid duration: {value!r}")
    if isinstance(value, int | float):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(str(value))
    if match is None:
        raise ConfigurationError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    ACCESS_TOKEN_SECRET: str | None
        HMAC key signing access tokens. Mandatory; no default.
    REFRESH_TOKEN_SECRET: str | None
        HMAC key signing refresh tokens. Mandatory, must differ from the
        access key.
    ACCESS_TOKEN_EXPIRY: str
        Access token lifetime (``"15m"`` by default).
    REFRESH_TOKEN_EXPIRY: str
        Refresh token lifetime (``"10d"`` by default).
    JWT_ALGORITHM: str
        Signing algorithm for both token classes.
    AUTH_COOKIE_SECURE: bool
        Emit auth cookies with the ``Secure`` attribute.
    AUTH_COOKIE_SAMESITE: str
        ``SameSite`` attribute for auth cookies.
    SESSION_STORE_BACKEND: str
        ``"database"`` (refresh token on the user row) or ``"redis"``.
    REDIS_URL: str | None
        Connection URL for the Redis client (required for the redis backend).
    MEDIA_ROOT: str
        Directory receiving uploaded avatar/cover files.
    MEDIA_URL_PREFIX: str
        Public URL prefix for uploaded media.
    UPLOAD_TEMP_DIR: str
        Staging directory for incoming multipart files.
    REGISTRATION_REQUIRE_AVATAR: bool
        Reject registrations without an avatar file when ``True``.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET")
    ACCESS_TOKEN_EXPIRY = os.getenv("ACCESS_TOKEN_EXPIRY", "15m")
    REFRESH_TOKEN_EXPIRY = os.getenv("REFRESH_TOKEN_EXPIRY", "10d")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

    # Auth cookies
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", True)
    AUTH_COOKIE_SAMESITE = os.getenv("AUTH_COOKIE_SAMESITE", "Lax")

    # Session store
    SESSION_STORE_BACKEND = os.getenv("SESSION_STORE_BACKEND", "database")
    REDIS_URL = os.getenv("REDIS_URL")

    # Media
    MEDIA_ROOT = os.getenv("MEDIA_ROOT", "./public/media")
    MEDIA_URL_PREFIX = os.getenv("MEDIA_URL_PREFIX", "/media")
    UPLOAD_TEMP_DIR = os.getenv("UPLOAD_TEMP_DIR", "./public/temp")
    REGISTRATION_REQUIRE_AVATAR = env_bool("REGISTRATION_REQUIRE_AVATAR", False)
    MAX_CONTENT_LENGTH = 8 * 1024 * 1024

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and relaxes the ``Secure`` cookie flag so
    the API can be exercised over plain HTTP on localhost.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    AUTH_COOKIE_SECURE = env_bool("AUTH_COOKIE_SECURE", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Ships throwaway token secrets so the suite never depends on the host env.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    ACCESS_TOKEN_SECRET = "test-access-secret-0123456789abcdef"
    REFRESH_TOKEN_SECRET = "test-refresh-secret-0123456789abcdef"
    AUTH_COOKIE_SECURE = False
    SESSION_STORE_BACKEND = "database"
    REDIS_URL = None
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    AUTH_COOKIE_SECURE = True


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_auth_config(config: Mapping[str, Any]) -> None:
    """Check token and session-store settings before the app starts serving.

    Parameters
    ----------
    config: Mapping[str, Any]
        Loaded Flask configuration.

    Raises
    ------
    ConfigurationError
        If a signing key is missing, both classes share the same key, a
        lifetime is not a positive duration, or the session backend is unknown
        or lacks its connection URL.
    """
    access_secret = config.get("ACCESS_TOKEN_SECRET")
    refresh_secret = config.get("REFRESH_TOKEN_SECRET")
    if not access_secret:
        raise ConfigurationError("ACCESS_TOKEN_SECRET must be set.")
    if not refresh_secret:
        raise ConfigurationError("REFRESH_TOKEN_SECRET must be set.")
    if access_secret == refresh_secret:
        raise ConfigurationError("Access and refresh tokens must use distinct secrets.")

    for key in ("ACCESS_TOKEN_EXPIRY", "REFRESH_TOKEN_EXPIRY"):
        if parse_duration(config.get(key, "")) <= timedelta(0):
            raise ConfigurationError(f"{key} must be a positive duration.")

    backend = str(config.get("SESSION_STORE_BACKEND", "database")).strip().lower()
    if backend not in SESSION_STORE_BACKENDS:
        raise ConfigurationError(f"Unknown SESSION_STORE_BACKEND: {backend!r}")
    if backend == "redis" and not config.get("REDIS_URL"):
        raise ConfigurationError("SESSION_STORE_BACKEND=redis requires REDIS_URL.")
