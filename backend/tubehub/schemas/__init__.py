"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import LoginSchema, TokenPairSchema
from .user import (
    AvatarSchema,
    ChangePasswordSchema,
    CoverImageSchema,
    RegisterSchema,
    UpdateAccountSchema,
    UserSchema,
)

__all__ = [
    "LoginSchema",
    "TokenPairSchema",
    "RegisterSchema",
    "UpdateAccountSchema",
    "ChangePasswordSchema",
    "AvatarSchema",
    "CoverImageSchema",
    "UserSchema",
]
