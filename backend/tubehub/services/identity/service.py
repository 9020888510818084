"""
IdentityService
===============

Aggregate service responsible for the account data of the `User` aggregate:
- Registration with unique email and username
- Profile reads and updates (email, full_name, avatar and cover image URLs)
- Password lifecycle (which also ends the stored session)
"""

from __future__ import annotations

import logging
from typing import NoReturn

from sqlalchemy.exc import IntegrityError

from tubehub.infra.security.password_verifier import PasswordVerifier
from tubehub.models.user import User
from tubehub.repositories.user import UserRepository
from tubehub.services._shared.base import BaseService
from tubehub.services._shared.errors import (
    ConflictError,
    NotFoundError,
    ServiceError,
    violates,
)
from tubehub.services.identity.dto import (
    UserPasswordChangeIn,
    UserPublicOut,
    UserRegisterIn,
    UserUpdateIn,
)

log = logging.getLogger(__name__)


def _to_public(user: User) -> UserPublicOut:
    return UserPublicOut(
        id=user.id,
        email=user.email,
        username=user.username,
        full_name=user.full_name,
        avatar_url=user.avatar_url,
        cover_image_url=user.cover_image_url,
    )


def _raise_conflict(exc: IntegrityError) -> NoReturn:
    if violates(exc, "uq_users_email") or violates(exc, "users.email"):
        raise ConflictError("User", "email already in use") from exc
    if violates(exc, "uq_users_username") or violates(exc, "users.username"):
        raise ConflictError("User", "username already in use") from exc
    raise exc


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Register users ensuring email and username uniqueness.
    - Retrieve and update account details safely.
    - Manage password lifecycle.
    """

    def __init__(self, *, verifier: PasswordVerifier | None = None) -> None:
        super().__init__()
        self.verifier = verifier or PasswordVerifier()

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register_user(self, dto: UserRegisterIn) -> UserPublicOut:
        """
        Register a new user.

        :param dto: User registration input DTO.
        :type dto: UserRegisterIn
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises ConflictError: If the email or username is already taken.
        """

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email_or_username(dto.email, dto.username):
                raise ConflictError("User", "user with email or username already exists")

            try:
                user = repo.model(
                    email=dto.email,
                    username=dto.username,
                    full_name=dto.full_name,
                    avatar_url=dto.avatar_url,
                    cover_image_url=dto.cover_image_url,
                )
                user.password = dto.password  # setter hashes
                repo.add(user)
            except IntegrityError as exc:
                _raise_conflict(exc)

            log.info("User registered", extra={"user_id": user.id})
            return _to_public(user)

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Retrieve a user by identifier.

        :raises NotFoundError: If user does not exist.
        """

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return _to_public(user)

    # --------------------------------------------------------------------- #
    # Update account details
    # --------------------------------------------------------------------- #

    def update_account(self, user_id: int, dto: UserUpdateIn) -> UserPublicOut:
        """
        Replace the user's full name and email.

        :raises NotFoundError: When user not found.
        :raises ConflictError: When the new email belongs to another account.
        """

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_for_update(user_id)
            if user is None:
                raise NotFoundError("User", user_id)

            owner = repo.get_by_email(dto.email)
            if owner is not None and owner.id != user.id:
                raise ConflictError("User", "email already in use")

            try:
                repo.update(user, full_name=dto.full_name, email=dto.email)
            except IntegrityError as exc:
                _raise_conflict(exc)

            return _to_public(user)

    # --------------------------------------------------------------------- #
    # Profile images
    # --------------------------------------------------------------------- #

    def update_avatar(self, user_id: int, avatar_url: str) -> UserPublicOut:
        """Point the avatar at ``avatar_url``."""
        return self._set_image(user_id, avatar_url=avatar_url)

    def update_cover_image(self, user_id: int, cover_image_url: str) -> UserPublicOut:
        """Point the cover image at ``cover_image_url``."""
        return self._set_image(user_id, cover_image_url=cover_image_url)

    def _set_image(self, user_id: int, **image: str) -> UserPublicOut:
        with self.rw_uow() as uow:
            user = uow.users.get_for_update(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            uow.users.update(user, **image)
            return _to_public(user)

    # --------------------------------------------------------------------- #
    # Password management
    # --------------------------------------------------------------------- #

    def change_password(self, dto: UserPasswordChangeIn) -> None:
        """
        Change a user's password after verifying the old one.

        The stored refresh token is cleared in the same transaction, so every
        session must log in again with the new password.

        :raises NotFoundError: When user not found.
        :raises ServiceError: When old password verification fails.
        """

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_for_update(dto.user_id)
            if user is None:
                raise NotFoundError("User", dto.user_id)

            if not self.verifier.verify(dto.old_password, user.password_hash):
                raise ServiceError("Invalid old password")

            repo.update_password(dto.user_id, dto.new_password)
            user.refresh_token = None
            repo.flush()

        log.info("Password changed", extra={"user_id": dto.user_id})
