"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`vidshare.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``vidshare.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Auth service (from ``vidshare.services.auth``)
    * :class:`AuthService`, :class:`TokenIssuer`
    * DTOs: :class:`LoginIn`, :class:`RefreshIn`, :class:`LoginOut`,
      :class:`TokenPairOut`, :class:`AuthTokenConfig`

- Identity service (from ``vidshare.services.identity``)
    * :class:`IdentityService`, :class:`CredentialVerifier`
    * DTOs: :class:`RegisterIn`, :class:`AccountUpdateIn`,
      :class:`PasswordChangeIn`, :class:`UserPublicOut`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Auth service + DTOs
from .auth.dto import AuthTokenConfig, LoginIn, LoginOut, RefreshIn, TokenPairOut
from .auth.issuer import TokenIssuer
from .auth.service import AuthService

# Identity service + DTOs
from .identity.credentials import CredentialVerifier
from .identity.dto import AccountUpdateIn, PasswordChangeIn, RegisterIn, UserPublicOut
from .identity.service import IdentityService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Auth
    "AuthService",
    "TokenIssuer",
    "AuthTokenConfig",
    "LoginIn",
    "LoginOut",
    "RefreshIn",
    "TokenPairOut",
    # Identity
    "IdentityService",
    "CredentialVerifier",
    "RegisterIn",
    "AccountUpdateIn",
    "PasswordChangeIn",
    "UserPublicOut",
]
