"""User resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class RegisterSchema(Schema):
    """Input payload for account registration (JSON body or multipart form fields)."""

    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(data_key="fullName", required=True, validate=validate.Length(max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))
    username = fields.String(required=True, validate=validate.Length(max=50))
    password = fields.String(required=True, validate=validate.Length(max=128))


class AccountUpdateSchema(Schema):
    """Payload for updating account details."""

    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(data_key="fullName", required=True, validate=validate.Length(max=100))
    email = fields.Email(required=True, validate=validate.Length(max=254))


class PasswordChangeSchema(Schema):
    """Payload for changing the password."""

    class Meta:
        unknown = EXCLUDE

    old_password = fields.String(data_key="oldPassword", required=True)
    new_password = fields.String(
        data_key="newPassword", required=True, validate=validate.Length(max=128)
    )


class UserSchema(Schema):
    """Public representation of a user (no credential, no refresh token)."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.Email(required=True)
    full_name = fields.String(data_key="fullName", required=True)
    avatar_url = fields.String(data_key="avatar", allow_none=True)
    cover_image_url = fields.String(data_key="coverImage", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
