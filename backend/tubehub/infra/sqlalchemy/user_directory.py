"""User directory backed by :class:`~tubehub.repositories.user.UserRepository`."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from tubehub.models.user import User
from tubehub.services._shared.errors import InternalFailureError
from tubehub.services._shared.ports.user_directory import DirectoryUser, UserDirectory
from tubehub.uow.sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork

log = logging.getLogger(__name__)


def to_directory_user(user: User) -> DirectoryUser:
    """Snapshot an ORM row while its session is still open."""
    return DirectoryUser(
        id=user.id,
        email=user.email,
        username=user.username,
        full_name=user.full_name,
        password_hash=user.password_hash,
        avatar_url=user.avatar_url,
        cover_image_url=user.cover_image_url,
    )


class SQLAlchemyUserDirectory(UserDirectory):
    """Read-only lookups; database failures surface as :class:`InternalFailureError`."""

    def find_by_identifier(self, *identifiers: str) -> DirectoryUser | None:
        try:
            with SQLAlchemyReadOnlyUnitOfWork() as uow:
                user = uow.users.find_by_identifier(*identifiers)
                return to_directory_user(user) if user else None
        except SQLAlchemyError as exc:
            log.error("User directory lookup failed", exc_info=True)
            raise InternalFailureError("User directory unavailable") from exc

    def get(self, user_id: int) -> DirectoryUser | None:
        try:
            with SQLAlchemyReadOnlyUnitOfWork() as uow:
                user = uow.users.get(user_id)
                return to_directory_user(user) if user else None
        except SQLAlchemyError as exc:
            log.error("User directory lookup failed", exc_info=True)
            raise InternalFailureError("User directory unavailable") from exc
