"""User resource schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, fields, pre_load, validate

# Same acceptance rules the User model applies on assignment
USERNAME_RE = r"^[^\s]+$"
EMAIL_RE = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _email_field() -> fields.Email:
    return fields.Email(
        required=True,
        validate=[
            validate.Length(max=254),
            validate.Regexp(EMAIL_RE, error="Email domain must contain a dot."),
        ],
    )


class _StripsText(Schema):
    """Trim surrounding whitespace from the listed string inputs before validation."""

    strip_fields: tuple[str, ...] = ()

    @pre_load
    def _strip(self, data: Any, **_: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            k: v.strip() if k in self.strip_fields and isinstance(v, str) else v
            for k, v in data.items()
        }


class RegisterSchema(_StripsText):
    """Input payload for account registration."""

    strip_fields = ("email", "username", "full_name")

    email = _email_field()
    username = fields.String(
        required=True,
        validate=[
            validate.Length(min=3, max=50),
            validate.Regexp(USERNAME_RE, error="Username must not contain whitespace."),
        ],
    )
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    full_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    avatar_url = fields.URL(load_default=None)
    cover_image_url = fields.URL(load_default=None)


class UpdateAccountSchema(_StripsText):
    """Both fields are required; partial updates are rejected."""

    strip_fields = ("email", "full_name")

    full_name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    email = _email_field()


class AvatarSchema(Schema):
    avatar_url = fields.URL(required=True, validate=validate.Length(max=2048))


class CoverImageSchema(Schema):
    cover_image_url = fields.URL(required=True, validate=validate.Length(max=2048))


class ChangePasswordSchema(Schema):
    """Input payload for changing the current user's password."""

    old_password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    new_password = fields.String(required=True, validate=validate.Length(min=8, max=128))


class UserSchema(Schema):
    """Public representation of a user. Never includes secrets."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    username = fields.String(required=True)
    full_name = fields.String(required=True)
    avatar_url = fields.String(allow_none=True)
    cover_image_url = fields.String(allow_none=True)
