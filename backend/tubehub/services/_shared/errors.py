"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
types. The translation to HTTP responses (RFC 7807) is handled by
``tubehub/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint to match (e.g., ``'uq_users_email'``).
    :returns: ``True`` if the error message names the constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - Any subclass without a dedicated mapping renders as 400.
    """

    pass


# --------------------------------------------------------------------------- #
# Generic errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :param key: Identifier or search key.
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :param detail: Short human-readable explanation.
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


# --------------------------------------------------------------------------- #
# Authentication taxonomy
# --------------------------------------------------------------------------- #


class InvalidCredentialsError(ServiceError):
    """The password did not match the stored hash."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class UserNotFoundError(ServiceError):
    """No account matches the login identifier."""

    def __init__(self, message: str = "User does not exist") -> None:
        super().__init__(message)


class UnauthorizedError(ServiceError):
    """
    Missing, invalid, expired or superseded token.

    Every refresh-path failure collapses to this type so clients cannot tell
    a forged token from a replayed one.
    """

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InternalFailureError(ServiceError):
    """A collaborator (token signer, user directory) failed unexpectedly."""

    def __init__(self, message: str = "Internal failure") -> None:
        super().__init__(message)


class TokenError(ServiceError):
    """Base for token validation failures raised by a token codec."""


class TokenInvalidError(TokenError):
    """Bad signature, malformed token, wrong kind or missing subject."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenExpiredError(TokenError):
    """Signature is valid but ``exp`` has passed."""

    def __init__(self, message: str = "Token expired") -> None:
        super().__init__(message)
