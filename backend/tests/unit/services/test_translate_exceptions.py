"""Mapping of service errors to API errors."""

from __future__ import annotations

import pytest

from tubehub.core import errors as api_errors
from tubehub.services._shared.base import BaseService
from tubehub.services._shared.errors import (
    ConflictError,
    InternalFailureError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthorizedError,
    UserNotFoundError,
)


@pytest.mark.parametrize(
    ("exc", "status", "code"),
    [
        (InvalidCredentialsError(), 401, "invalid_credentials"),
        (UserNotFoundError(), 404, "user_not_found"),
        (UnauthorizedError(), 401, "unauthorized"),
        (TokenInvalidError(), 401, "unauthorized"),
        (TokenExpiredError(), 401, "unauthorized"),
        (InternalFailureError(), 500, "internal_failure"),
        (ConflictError("User", "email already in use"), 409, "conflict"),
        (NotFoundError("User", 1), 404, "not_found"),
        (ServiceError("Invalid old password"), 400, "bad_request"),
    ],
)
def test_translation(exc, status, code):
    translated = BaseService.translate_exceptions(exc)
    assert isinstance(translated, api_errors.APIError)
    assert translated.status_code == status
    assert translated.code == code


def test_non_service_errors_pass_through():
    exc = KeyError("x")
    assert BaseService.translate_exceptions(exc) is exc
