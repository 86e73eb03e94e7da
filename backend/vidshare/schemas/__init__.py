"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginResponseSchema, LoginSchema, RefreshSchema, TokenPairSchema
from .user import AccountUpdateSchema, PasswordChangeSchema, RegisterSchema, UserSchema

__all__ = [
    "LoginSchema",
    "LoginResponseSchema",
    "RefreshSchema",
    "TokenPairSchema",
    "RegisterSchema",
    "AccountUpdateSchema",
    "PasswordChangeSchema",
    "UserSchema",
]
