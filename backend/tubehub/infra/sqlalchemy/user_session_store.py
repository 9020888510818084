"""Session store that keeps the refresh token on the ``users`` row."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from tubehub.services._shared.errors import InternalFailureError
from tubehub.services._shared.ports.session_store import SessionStore
from tubehub.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork

log = logging.getLogger(__name__)


class UserSessionStore(SessionStore):
    """
    Single-session store over ``users.refresh_token``.

    Every call runs in its own read-write unit of work and is committed before
    returning, so a token is durable before it reaches the client. Rotation is
    a conditional ``UPDATE``; the database serializes competing rotations of
    the same user.
    """

    def set_refresh_token(self, user_id: int, token: str | None) -> None:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                uow.users.set_refresh_token(user_id, token)
        except SQLAlchemyError as exc:
            log.error("Session store write failed", exc_info=True, extra={"user_id": user_id})
            raise InternalFailureError("Session store unavailable") from exc

    def get_refresh_token(self, user_id: int) -> str | None:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                return uow.users.get_refresh_token(user_id)
        except SQLAlchemyError as exc:
            log.error("Session store read failed", exc_info=True, extra={"user_id": user_id})
            raise InternalFailureError("Session store unavailable") from exc

    def rotate_refresh_token(self, user_id: int, current: str, replacement: str) -> bool:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                return uow.users.swap_refresh_token(user_id, current, replacement)
        except SQLAlchemyError as exc:
            log.error("Session store rotation failed", exc_info=True, extra={"user_id": user_id})
            raise InternalFailureError("Session store unavailable") from exc
