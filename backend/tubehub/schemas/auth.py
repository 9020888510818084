"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate, validates_schema


class LoginSchema(Schema):
    """Input payload for authenticating a user by email or username."""

    class Meta:
        unknown = EXCLUDE

    email = fields.String(load_default=None, validate=validate.Length(min=1, max=254))
    username = fields.String(load_default=None, validate=validate.Length(min=1, max=50))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))

    @validates_schema
    def require_identifier(self, data: dict[str, Any], **_: Any) -> None:
        if not (data.get("email") or data.get("username")):
            raise ValidationError("Username or email is required.", field_name="email")

    @staticmethod
    def identifiers(data: dict[str, Any]) -> tuple[str, ...]:
        """Return every identifier sent; the account may match either one."""
        return tuple(data[k] for k in ("email", "username") if data.get(k))


class TokenPairSchema(Schema):
    """Response payload with both tokens."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
