"""User repository: account lookups and refresh-token persistence."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select, update

from tubehub.models.user import User
from tubehub.repositories.base import BaseRepository


def normalize_identifier(identifier: str) -> str:
    """Normalise an email or username the way the model stores it."""
    return identifier.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It NEVER issues or validates tokens; it only stores the opaque refresh
    token string handed to it.
    """

    model = User

    def _updatable_fields(self) -> set[str]:
        """Publicly allowed updatable fields (not including password)."""
        return {"email", "full_name", "avatar_url", "cover_image_url"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive)."""
        stmt = select(User).where(User.email == normalize_identifier(email))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def get_by_username(self, username: str) -> User | None:
        """Fetch a user by username (case-insensitive)."""
        stmt = select(User).where(User.username == normalize_identifier(username))
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def find_by_identifier(self, *identifiers: str) -> User | None:
        """Fetch a user whose email *or* username equals any of ``identifiers``.

        :param identifiers: Email addresses or usernames, any case.
        :type identifiers: str
        :returns: Matching user with the lowest id, or ``None``.
        :rtype: User | None
        """
        values = {normalize_identifier(i) for i in identifiers}
        if not values:
            return None
        stmt = (
            select(User)
            .where(or_(User.email.in_(values), User.username.in_(values)))
            .order_by(User.id)
        )
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def exists_by_email_or_username(self, email: str, username: str) -> bool:
        """Return ``True`` when either the email or the username is taken."""
        stmt = select(User.id).where(
            or_(
                User.email == normalize_identifier(email),
                User.username == normalize_identifier(username),
            )
        )
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Password ops ----------------------------

    def update_password(self, user_id: int, new_password: str) -> None:
        """Update a user's password and flush the session.

        :raises ValueError: If the user does not exist.
        """
        user = self.get(user_id)
        if not user:
            raise ValueError(f"User {user_id} not found.")
        user.password = new_password  # invokes setter → hash
        self.flush()

    # ---------------------------- Refresh token ----------------------------

    def get_refresh_token(self, user_id: int) -> str | None:
        """Return the stored refresh token for ``user_id`` (``None`` if unset or no user)."""
        stmt = select(User.refresh_token).where(User.id == user_id)
        return cast(str | None, self.session.execute(stmt).scalar_one_or_none())

    def set_refresh_token(self, user_id: int, token: str | None) -> bool:
        """Overwrite the stored refresh token with a single ``UPDATE``.

        :returns: ``True`` if a row was updated.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token)
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return bool(result.rowcount)

    def swap_refresh_token(self, user_id: int, expected: str, replacement: str) -> bool:
        """Replace the refresh token only if it still equals ``expected``.

        The check and the write are one conditional ``UPDATE``, so two
        concurrent rotations of the same token cannot both succeed.

        :returns: ``True`` when the swap happened.
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=replacement)
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1
