# tubehub/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass

from tubehub.services._shared.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param identifiers: Email address and/or username as sent (any case);
        a user matching any of them is selected.
    :type identifiers: tuple[str, ...]
    :param password: Raw password (to be verified).
    :type password: str
    """

    identifiers: tuple[str, ...]
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT, ``None`` when the client sent none.
    :type refresh_token: str | None
    """

    refresh_token: str | None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    :param access_max_age: Access token lifetime in seconds (cookie ``Max-Age``).
    :type access_max_age: int
    :param refresh_max_age: Refresh token lifetime in seconds.
    :type refresh_max_age: int
    """

    access_token: str
    refresh_token: str
    access_max_age: int
    refresh_max_age: int


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Output DTO for a successful login.

    :param tokens: Freshly issued pair.
    :type tokens: TokenPairOut
    :param user: Public view of the authenticated user.
    :type user: UserPublicOut
    """

    tokens: TokenPairOut
    user: UserPublicOut

    @property
    def access_token(self) -> str:
        return self.tokens.access_token

    @property
    def refresh_token(self) -> str:
        return self.tokens.refresh_token
