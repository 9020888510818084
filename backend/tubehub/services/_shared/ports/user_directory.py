from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from tubehub.services._shared.dto import UserPublicOut


@dataclass(frozen=True, slots=True)
class DirectoryUser:
    """
    Account snapshot needed to authenticate a user.

    :ivar id: User identifier.
    :ivar email: Normalized email.
    :ivar username: Normalized username.
    :ivar full_name: Display name.
    :ivar password_hash: Salted password hash. Never leaves the service layer.
    :ivar avatar_url: Optional avatar URL.
    :ivar cover_image_url: Optional cover URL.
    """

    id: int
    email: str
    username: str
    full_name: str
    password_hash: str
    avatar_url: str | None = None
    cover_image_url: str | None = None

    def to_public(self) -> UserPublicOut:
        return UserPublicOut(
            id=self.id,
            email=self.email,
            username=self.username,
            full_name=self.full_name,
            avatar_url=self.avatar_url,
            cover_image_url=self.cover_image_url,
        )


class UserDirectory(Protocol):
    """Read-only account lookups used by authentication."""

    def find_by_identifier(self, *identifiers: str) -> DirectoryUser | None:
        """Find a user whose email or username matches any identifier, case-insensitively.

        When several accounts match, the one with the lowest id wins.
        """

    def get(self, user_id: int) -> DirectoryUser | None:
        """Find a user by id."""


class InMemoryUserDirectory(UserDirectory):
    """List-backed directory for unit tests."""

    def __init__(self, users: list[DirectoryUser] | None = None) -> None:
        self._users = {u.id: u for u in users or []}

    def add(self, user: DirectoryUser) -> DirectoryUser:
        self._users[user.id] = user
        return user

    def remove(self, user_id: int) -> None:
        self._users.pop(user_id, None)

    def find_by_identifier(self, *identifiers: str) -> DirectoryUser | None:
        values = {i.strip().lower() for i in identifiers}
        for user in sorted(self._users.values(), key=lambda u: u.id):
            if values & {user.email, user.username}:
                return user
        return None

    def get(self, user_id: int) -> DirectoryUser | None:
        return self._users.get(user_id)
