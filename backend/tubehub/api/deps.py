"""Shared API helpers for authentication, service wiring and responses."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from tubehub.api.cookies import extract_access_token
from tubehub.core.errors import Unauthorized
from tubehub.core.extensions import get_token_codec
from tubehub.infra.sqlalchemy.user_directory import SQLAlchemyUserDirectory
from tubehub.infra.sqlalchemy.user_session_store import UserSessionStore
from tubehub.services._shared.errors import TokenError
from tubehub.services._shared.ports.token_codec import TokenKind
from tubehub.services.auth.service import AuthService
from tubehub.services.identity.service import IdentityService

F = TypeVar("F", bound=Callable[..., Any])


# ------------------------------ Service wiring ------------------------------


def get_auth_service() -> AuthService:
    """Build an :class:`AuthService` bound to the current app's adapters."""

    return AuthService(
        directory=SQLAlchemyUserDirectory(),
        session_store=UserSessionStore(),
        token_codec=get_token_codec(),
    )


def get_identity_service() -> IdentityService:
    """Build an :class:`IdentityService`."""

    return IdentityService()


# ------------------------------ Authentication ------------------------------


def current_user_id() -> int:
    """Return the id stored by :func:`require_auth` for this request."""

    return cast(int, g.current_user_id)


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token for an existing user.

    The token is read from the ``accessToken`` cookie or an
    ``Authorization: Bearer`` header. On success the user id is placed on
    ``flask.g.current_user_id``.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = extract_access_token(request)
        if token is None:
            raise Unauthorized("Unauthorized request")
        try:
            subject = get_token_codec().validate(token, TokenKind.ACCESS)
            user_id = int(subject)
        except (TokenError, ValueError) as exc:
            raise Unauthorized("Invalid access token") from exc
        if SQLAlchemyUserDirectory().get(user_id) is None:
            raise Unauthorized("Invalid access token")
        g.current_user_id = user_id
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# -------------------------------- Responses ---------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
