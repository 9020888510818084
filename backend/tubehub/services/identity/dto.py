"""
DTOs for IdentityService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass

from tubehub.services._shared.dto import UserPublicOut

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserRegisterIn:
    """
    Input DTO for user registration.

    :param email: Login email (normalized to lowercase by the model).
    :type email: str
    :param username: Channel handle (normalized to lowercase).
    :type username: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    :param full_name: Display name.
    :type full_name: str
    :param avatar_url: Optional avatar image URL.
    :type avatar_url: str | None
    :param cover_image_url: Optional cover image URL.
    :type cover_image_url: str | None
    """

    email: str
    username: str
    password: str
    full_name: str
    avatar_url: str | None = None
    cover_image_url: str | None = None


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """
    Input DTO for updating account details.

    :param full_name: New display name.
    :type full_name: str
    :param email: New email.
    :type email: str
    """

    full_name: str
    email: str


@dataclass(frozen=True, slots=True)
class UserPasswordChangeIn:
    """
    Input DTO for changing a user's password.

    :param user_id: User identifier.
    :type user_id: int
    :param old_password: Current password.
    :type old_password: str
    :param new_password: New password (raw).
    :type new_password: str
    """

    user_id: int
    old_password: str
    new_password: str


__all__ = ["UserRegisterIn", "UserUpdateIn", "UserPasswordChangeIn", "UserPublicOut"]
