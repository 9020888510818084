"""PyJWT adapter for the :class:`TokenCodec` port."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from tubehub.services._shared.errors import TokenExpiredError, TokenInvalidError
from tubehub.services._shared.ports.token_codec import IssuedToken, TokenCodec, TokenKind

SUPPORTED_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})
RESERVED_CLAIMS = frozenset({"sub", "type", "iat", "exp", "jti", "iss"})


@dataclass(frozen=True, slots=True)
class TokenCodecConfig:
    """
    Explicit signing configuration.

    :ivar access_secret: HMAC key for access tokens.
    :ivar refresh_secret: HMAC key for refresh tokens. Must differ from
        ``access_secret``.
    :ivar access_lifetime: Access token lifetime.
    :ivar refresh_lifetime: Refresh token lifetime.
    :ivar algorithm: HMAC algorithm name.
    :ivar issuer: ``iss`` claim stamped on and required from every token.
    """

    access_secret: str
    refresh_secret: str
    access_lifetime: timedelta = timedelta(minutes=15)
    refresh_lifetime: timedelta = timedelta(days=10)
    algorithm: str = "HS256"
    issuer: str = "tubehub"

    def __post_init__(self) -> None:
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("Access and refresh secrets must be non-empty.")
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh secrets must differ.")
        if self.access_lifetime <= timedelta(0) or self.refresh_lifetime <= timedelta(0):
            raise ValueError("Token lifetimes must be positive.")
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {self.algorithm}")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> TokenCodecConfig:
        """Build from a Flask ``app.config``-like mapping."""
        return cls(
            access_secret=config.get("ACCESS_TOKEN_SECRET") or "",
            refresh_secret=config.get("REFRESH_TOKEN_SECRET") or "",
            access_lifetime=config.get("ACCESS_TOKEN_EXPIRY", timedelta(minutes=15)),
            refresh_lifetime=config.get("REFRESH_TOKEN_EXPIRY", timedelta(days=10)),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER", "tubehub"),
        )


class JWTTokenCodec(TokenCodec):
    """
    Issue and validate HMAC-signed JWTs, one secret per token kind.

    Claims: ``sub`` (user id as string), ``type``, ``iat``, ``exp``, ``jti``
    and ``iss``. The random ``jti`` makes two tokens issued for the same user
    in the same second distinct.

    The codec holds no mutable state and is safe to share across threads.
    """

    def __init__(self, config: TokenCodecConfig) -> None:
        self.config = config

    # ------------------------- helpers -------------------------

    def _secret(self, kind: TokenKind) -> str:
        if kind is TokenKind.ACCESS:
            return self.config.access_secret
        return self.config.refresh_secret

    def lifetime(self, kind: TokenKind) -> timedelta:
        if kind is TokenKind.ACCESS:
            return self.config.access_lifetime
        return self.config.refresh_lifetime

    # -------------------------- API ----------------------------

    def issue(
        self,
        user_id: int | str,
        kind: TokenKind,
        additional_claims: dict[str, Any] | None = None,
    ) -> IssuedToken:
        """
        Sign a new token of ``kind`` for ``user_id``.

        :param user_id: Subject; serialized as a string.
        :param kind: Token kind, selects secret and lifetime.
        :param additional_claims: Extra non-reserved claims (e.g. ``email``).
        :returns: Encoded token and its absolute expiry.
        :raises ValueError: If ``additional_claims`` overrides a reserved claim.
        """
        extra = dict(additional_claims or {})
        clash = RESERVED_CLAIMS.intersection(extra)
        if clash:
            raise ValueError(f"Reserved claims cannot be overridden: {sorted(clash)}")

        now = datetime.now(UTC).replace(microsecond=0)
        expires_at = now + self.lifetime(kind)
        payload: dict[str, Any] = {
            **extra,
            "sub": str(user_id),
            "type": kind.value,
            "iat": now,
            "exp": expires_at,
            "jti": uuid.uuid4().hex,
            "iss": self.config.issuer,
        }
        token = jwt.encode(payload, self._secret(kind), algorithm=self.config.algorithm)
        return IssuedToken(token=token, kind=kind, expires_at=expires_at)

    def issue_access_token(
        self, user_id: int | str, additional_claims: dict[str, Any] | None = None
    ) -> IssuedToken:
        return self.issue(user_id, TokenKind.ACCESS, additional_claims)

    def issue_refresh_token(self, user_id: int | str) -> IssuedToken:
        return self.issue(user_id, TokenKind.REFRESH)

    def validate(self, token: str, kind: TokenKind) -> str:
        """
        Verify signature, expiry, issuer and kind; return the subject.

        :raises TokenExpiredError: Signature valid but ``exp`` has passed.
        :raises TokenInvalidError: Any other rejection.
        """
        if not token or not isinstance(token, str):
            raise TokenInvalidError("Token is missing or not a string")
        try:
            claims = jwt.decode(
                token,
                self._secret(kind),
                algorithms=[self.config.algorithm],
                issuer=self.config.issuer,
                options={"require": ["exp", "iat", "sub", "type"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError(f"Invalid token: {exc}") from exc

        if claims.get("type") != kind.value:
            raise TokenInvalidError(f"Wrong token type: {kind.value} token required")
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise TokenInvalidError("Token has no subject")
        return subject
