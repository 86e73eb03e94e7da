"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from .user import UserSchema


class LoginSchema(Schema):
    """Input payload for authenticating a user (username or email)."""

    class Meta:
        unknown = EXCLUDE

    username = fields.String(load_default=None, validate=validate.Length(max=50))
    email = fields.String(load_default=None, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(Schema):
    """Optional body carrying a refresh token (cookie takes precedence)."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(data_key="refreshToken", load_default=None)


class TokenPairSchema(Schema):
    """Response payload containing both tokens."""

    access_token = fields.String(data_key="accessToken", required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)


class LoginResponseSchema(TokenPairSchema):
    """Response payload of a successful login."""

    user = fields.Nested(UserSchema, required=True)
