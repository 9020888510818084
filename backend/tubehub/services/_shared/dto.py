# comments in English; reST docstrings strict
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public-safe view of an account.

    Never carries the password hash or the stored refresh token.

    :param id: User identifier.
    :type id: int
    :param email: Email address.
    :type email: str
    :param username: Username.
    :type username: str
    :param full_name: Display name.
    :type full_name: str
    :param avatar_url: Optional avatar image URL.
    :type avatar_url: str | None
    :param cover_image_url: Optional cover image URL.
    :type cover_image_url: str | None
    """

    id: int
    email: str
    username: str
    full_name: str
    avatar_url: str | None = None
    cover_image_url: str | None = None
