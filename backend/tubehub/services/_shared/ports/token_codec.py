from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Protocol


class TokenKind(str, Enum):
    """Kind of signed token. Each kind has its own secret and lifetime."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """
    A freshly signed token.

    :ivar token: Encoded token string handed to the client.
    :ivar kind: Token kind.
    :ivar expires_at: Absolute expiry (UTC).
    """

    token: str
    kind: TokenKind
    expires_at: datetime


class TokenCodec(Protocol):
    """
    Port for issuing and validating signed, time-limited tokens.

    Implementations MUST raise
    :class:`~tubehub.services._shared.errors.TokenExpiredError` when the
    signature is valid but the token has expired, and
    :class:`~tubehub.services._shared.errors.TokenInvalidError` for every other
    rejection (signature, format, wrong kind, missing subject).
    """

    def issue(
        self,
        user_id: int | str,
        kind: TokenKind,
        additional_claims: dict[str, Any] | None = None,
    ) -> IssuedToken: ...

    def validate(self, token: str, kind: TokenKind) -> str:
        """Return the subject (user id as string) of a valid token."""
        ...

    def lifetime(self, kind: TokenKind) -> timedelta: ...
